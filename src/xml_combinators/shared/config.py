"""Configuration classes for grammar-driven tree parsing.

This module provides configuration objects for document ingestion and for
the parse driver, validated on construction and serialisable to JSON.
"""

import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


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
class ReaderConfig:
    """Configuration for turning XML documents into trees of nodes."""

    # Entity expansion is off unless the input is trusted
    resolve_entities: bool = False
    # Lifts lxml's depth and text size limits
    huge_tree: bool = False

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        for name in ("resolve_entities", "huge_tree"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a bool")


@dataclass(frozen=True)
class ParserConfig:
    """Configuration shared by the reader, the driver and the CLI.

    Immutable; use ``override`` to derive a modified copy.
    """

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    logging_level: str = "WARNING"
    correlation_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        if not isinstance(self.reader, ReaderConfig):
            raise ConfigValidationError(
                "reader must be a ReaderConfig", field_name="reader"
            )
        if self.logging_level not in _LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {_LOGGING_LEVELS}",
                field_name="logging_level",
                suggestions=_LOGGING_LEVELS,
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Reader fields are addressed as ``reader__<field>``.

        Example:
            >>> config = ParserConfig().override(
            ...     logging_level="DEBUG", reader__huge_tree=True
            ... )
        """
        reader_overrides: Dict[str, Any] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if key.startswith("reader__"):
                reader_overrides[key[len("reader__"):]] = value
            else:
                top_level[key] = value

        try:
            if reader_overrides:
                top_level["reader"] = replace(self.reader, **reader_overrides)
            return replace(self, **top_level)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "reader": {f.name: getattr(self.reader, f.name) for f in fields(self.reader)},
            "logging_level": self.logging_level,
            "correlation_id": self.correlation_id,
            "name": self.name,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Raises:
            ConfigValidationError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}",
                    field_name=key,
                    suggestions=sorted(known),
                )

        values = dict(data)
        reader_data = values.pop("reader", None)
        try:
            if reader_data is not None:
                if not isinstance(reader_data, dict):
                    raise ConfigValidationError(
                        "reader must be a mapping", field_name="reader"
                    )
                values["reader"] = ReaderConfig(**reader_data)
            return cls(**values)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e), field_name="reader") from e

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def debugging(cls) -> "ParserConfig":
        """Preset that logs every failed alternative and child attempt."""
        return cls(logging_level="DEBUG", name="debugging")
