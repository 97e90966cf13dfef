"""Shared utilities for tagtree.

Configuration objects, result and diagnostic types, the exception hierarchy
and logging helpers used by every processing layer.
"""

from .config import (
    CharacterConfig,
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ParserConfig,
    SerializationConfig,
    TokenizationConfig,
    TreeConfig,
)
from .errors import StructureError, TagTreeError, XMLSyntaxError
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
    "CharacterConfig",
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "ParserConfig",
    "SerializationConfig",
    "TokenizationConfig",
    "TreeConfig",
    "StructureError",
    "TagTreeError",
    "XMLSyntaxError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
