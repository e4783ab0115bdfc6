"""Shared utilities for XML subset parsing.

This module provides the configuration objects, error types, diagnostic
records and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    DanglingEntityPolicy,
    ParserConfig,
    TokenizationConfig,
    TreeConfig,
)
from .errors import (
    ErrorKind,
    InputDecodingError,
    ParseError,
    TokenizationError,
    TreeBuildError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "DanglingEntityPolicy",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ErrorKind",
    "InputDecodingError",
    "ParseError",
    "ParserConfig",
    "PerformanceMetrics",
    "TokenizationConfig",
    "TokenizationError",
    "TreeBuildError",
    "TreeConfig",
    "configure_logging",
    "get_logger",
]
