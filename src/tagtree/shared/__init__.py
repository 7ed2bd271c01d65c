"""Shared utilities for the tag tree editor.

This module provides configuration objects, result types and logging helpers
used by the parser, the structural editor and the serializer.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    EditResult,
    ParseStatistics,
    TreeStatistics,
)
from .config import (
    ConfigError,
    ConfigValidationError,
    EditorConfig,
    GlobalConfig,
    ParserConfig,
    RenderConfig,
    TreeConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "EditResult",
    "ParseStatistics",
    "TreeStatistics",
    "ConfigError",
    "ConfigValidationError",
    "EditorConfig",
    "GlobalConfig",
    "ParserConfig",
    "RenderConfig",
    "TreeConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
]
