"""Shared utilities for grammar-driven tree parsing.

This module provides configuration objects, result and diagnostic types, and
logging helpers used across the reader, the engine and the API.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    ReaderConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "ReaderConfig",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParseMetrics",
]
