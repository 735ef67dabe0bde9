"""Main CLI entry point for the simple-xml command-line tool.

Commands:
    events FILE        Print the parser's event stream
    tree FILE          Print the indented entity listing of the document tree
    format FILE        Print the document re-serialized as compact XML
    validate FILE...   Check that files parse, as text or JSON report
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from simple_xml_parser import __version__
from simple_xml_parser.api import parse_events, parse_file
from simple_xml_parser.events import PrintingSink
from simple_xml_parser.shared import (
    ConfigError,
    DiagnosticSeverity,
    ParseError,
    ParserConfig,
    configure_logging,
    get_logger,
)
from simple_xml_parser.tree import ParseResult

logger = get_logger(__name__, component="cli")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="simple-xml",
        description="Parse, inspect and validate simple XML documents"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    events_parser = subparsers.add_parser("events", help="Print parser events")
    events_parser.add_argument("path", type=Path, help="XML file to parse")

    tree_parser = subparsers.add_parser("tree", help="Print the document tree")
    tree_parser.add_argument("path", type=Path, help="XML file to parse")

    format_parser = subparsers.add_parser("format", help="Re-serialize a document")
    format_parser.add_argument("path", type=Path, help="XML file to parse")
    format_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    validate_parser = subparsers.add_parser("validate", help="Validate XML files")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to validate"
    )
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Require exactly one root element"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Parser configuration file (JSON)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(config_path: Optional[Path]) -> ParserConfig:
    """Load parser configuration from a JSON file, or return the default.

    Raises:
        ConfigError: If the file content is not a valid configuration
        OSError: If the file cannot be read
    """
    if config_path is None:
        return ParserConfig()
    try:
        return ParserConfig.from_json(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e


def _failure_message(result: ParseResult) -> str:
    critical = result.get_diagnostics_by_severity(DiagnosticSeverity.CRITICAL)
    return critical[0].message if critical else "parse failed"


def _report_failure(path: Path, result: ParseResult) -> None:
    print(f"{path}: {_failure_message(result)}", file=sys.stderr)


def cmd_events(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle events command."""
    try:
        data = args.path.read_bytes()
    except OSError as e:
        print(f"{args.path}: {e}", file=sys.stderr)
        return 1

    try:
        parse_events(data, PrintingSink(sys.stdout), config)
    except (ParseError, UnicodeError) as e:
        print(f"{args.path}: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_tree(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle tree command."""
    result = parse_file(args.path, config=config)
    if not result.success:
        _report_failure(args.path, result)
        return 1
    sys.stdout.write(result.document.dump())
    return 0


def cmd_format(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle format command."""
    result = parse_file(args.path, config=config)
    if not result.success:
        _report_failure(args.path, result)
        return 1

    text = result.document.serialize()
    if args.output:
        try:
            args.output.write_text(text + "\n", encoding="utf-8")
        except OSError as e:
            logger.error(
                "Formatted document could not be written",
                extra={"output": str(args.output)},
                exc_info=True,
            )
            print(f"{args.output}: {e}", file=sys.stderr)
            return 1
        logger.info("Formatted document written", extra={"output": str(args.output)})
    else:
        print(text)
    return 0


def format_validation_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format validation results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    valid_count = sum(1 for r in results if r["valid"])
    lines = [f"Validated {len(results)} files, {valid_count} valid", "-" * 50]
    for result in results:
        status = "✓" if result["valid"] else "✗"
        lines.append(f"{status} {result['file']}")
        if not result["valid"]:
            lines.append(f"   Error: {result['error']}")
    return "\n".join(lines)


def cmd_validate(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle validate command."""
    if args.strict:
        config = config.override(
            document__root_policy=ParserConfig.strict().document.root_policy
        )

    results = []
    for path in args.paths:
        result = parse_file(path, config=config)
        entry: Dict[str, Any] = {
            "file": str(path),
            "valid": result.success,
            "element_count": result.element_count,
            "processing_time_ms": result.performance.processing_time_ms,
        }
        if not result.success:
            entry["error"] = _failure_message(result)
            if result.error is not None:
                entry["error_kind"] = result.error.kind.name
                entry["position"] = result.error.position
        results.append(entry)

    print(format_validation_results(results, args.format))

    valid_count = sum(1 for r in results if r["valid"])
    return 0 if valid_count == len(results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except (ConfigError, OSError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.ERROR)
    else:
        configure_logging(config.global_.logging_level)

    handlers = {
        "events": cmd_events,
        "tree": cmd_tree,
        "format": cmd_format,
        "validate": cmd_validate,
    }

    try:
        return handlers[args.command](args, config)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
