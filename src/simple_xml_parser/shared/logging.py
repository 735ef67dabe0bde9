"""Component-aware logging for the parsing layers.

Every record carries the emitting component and an optional correlation ID in
its ``extra`` data so that log lines from one parse can be grouped together.
"""

import logging
from typing import Any, Dict, Optional, Union

DEFAULT_FORMAT = "%(levelname)s %(name)s [%(component)s]: %(message)s"


class ComponentLogger:
    """Logger that attaches component and correlation ID to every record."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize component logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name, defaults to the last part of ``name``
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def is_enabled_for(self, level: int) -> bool:
        """Check whether records at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message."""
        self.logger.warning(message, extra=self._get_extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log error message."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)


class _ComponentDefaults(logging.Filter):
    """Fill in component fields for records from foreign loggers."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        if not hasattr(record, "correlation_id"):
            record.correlation_id = None
        return True


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> ComponentLogger:
    """Get a component-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        ComponentLogger instance
    """
    return ComponentLogger(name, correlation_id, component)


def configure_logging(
    level: Union[int, str] = logging.WARNING,
    fmt: str = DEFAULT_FORMAT
) -> logging.Handler:
    """Attach a stderr handler to the package logger.

    Args:
        level: Logging level name or number
        fmt: Format string, may reference ``%(component)s``

    Returns:
        The installed handler
    """
    package_logger = logging.getLogger("simple_xml_parser")
    for existing in list(package_logger.handlers):
        if getattr(existing, "_simple_xml_handler", False):
            package_logger.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler.addFilter(_ComponentDefaults())
    handler._simple_xml_handler = True  # type: ignore[attr-defined]

    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
