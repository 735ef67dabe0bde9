"""Configuration classes for simple XML parsing.

This module provides configuration objects for the parsing layers: document
grammar strictness, tree building, input decoding and global settings.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional

VALID_DECODE_ERRORS = ("strict", "replace", "ignore")
VALID_LOGGING_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
COMPONENT_FIELDS = ("document", "tree", "input", "global_")
COMPONENT_ALIASES = {"global": "global_"}


class RootPolicy(Enum):
    """How many top-level tags a document may contain."""

    PERMISSIVE = auto()   # Zero or more top-level tags
    SINGLE = auto()       # Exactly one top-level tag


@dataclass
class DocumentConfig:
    """Configuration for the document grammar."""

    root_policy: RootPolicy = RootPolicy.PERMISSIVE
    max_depth: int = 256
    allow_header: bool = True

    def __post_init__(self) -> None:
        """Validate document configuration."""
        if not isinstance(self.root_policy, RootPolicy):
            raise ValueError("root_policy must be a RootPolicy member")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


@dataclass
class TreeConfig:
    """Configuration for tree building."""

    suppress_empty_text: bool = False


@dataclass
class InputConfig:
    """Configuration for input handling and byte decoding."""

    fallback_encoding: str = "utf-8"
    decode_errors: str = "strict"
    max_input_chars: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate input configuration."""
        if not self.fallback_encoding:
            raise ValueError("fallback_encoding cannot be empty")
        if self.decode_errors not in VALID_DECODE_ERRORS:
            raise ValueError(f"decode_errors must be one of {list(VALID_DECODE_ERRORS)}")
        if self.max_input_chars is not None and self.max_input_chars <= 0:
            raise ValueError("max_input_chars must be > 0 or None")


@dataclass
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"
    enable_diagnostics: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {list(VALID_LOGGING_LEVELS)}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Complete, immutable configuration for a parse.

    Component configurations validate themselves; this class re-runs the
    validation and reports failures as ``ConfigValidationError``.
    """

    document: DocumentConfig = field(default_factory=DocumentConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    input: InputConfig = field(default_factory=InputConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        try:
            self.document.__post_init__()
            self.input.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Nested fields use double-underscore notation; ``global`` names the
        ``global_`` component.

        Example:
            >>> config = ParserConfig().override(
            ...     document__root_policy=RootPolicy.SINGLE,
            ...     tree__suppress_empty_text=True,
            ...     global__enable_diagnostics=False,
            ... )
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                component = COMPONENT_ALIASES.get(component, component)
                if component not in COMPONENT_FIELDS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(COMPONENT_FIELDS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = dict(top_level)
        try:
            for component, values in nested_overrides.items():
                new_fields[component] = replace(getattr(self, component), **values)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown keys are ignored; enum members are given by name.
        """
        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            field_values: Dict[str, Any] = {}
            for field_name, field_info in target_class.__dataclass_fields__.items():
                if field_name not in data_dict:
                    continue
                value = data_dict[field_name]
                field_type = field_info.type

                if hasattr(field_type, "__dataclass_fields__"):
                    field_values[field_name] = _dict_to_dataclass(value, field_type)
                elif hasattr(field_type, "__members__") and isinstance(value, str):
                    try:
                        field_values[field_name] = field_type[value]
                    except KeyError as e:
                        raise ConfigValidationError(
                            f"Invalid value {value!r} for {field_name}",
                            field_name=field_name,
                            suggestions=list(field_type.__members__),
                        ) from e
                else:
                    field_values[field_name] = value

            try:
                return target_class(**field_values)
            except ValueError as e:
                raise ConfigValidationError(str(e)) from e

        return _dict_to_dataclass(data, cls)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def compatible(cls) -> "ParserConfig":
        """Preset accepting everything the grammar naturally allows."""
        return cls(
            name="compatible",
            description="Permissive grammar: any number of top-level tags",
        )

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Preset requiring a single root element and strict decoding."""
        return cls(
            document=DocumentConfig(root_policy=RootPolicy.SINGLE),
            tree=TreeConfig(suppress_empty_text=True),
            input=InputConfig(decode_errors="strict"),
            name="strict",
            description="Single root element, empty text ignored",
        )
