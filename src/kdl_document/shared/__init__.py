"""Shared utilities for KDL document processing.

This module provides the error hierarchy, configuration objects, metrics and
logging helpers used across all layers.
"""

from .config import (
    BuilderConfig,
    ConfigError,
    ConfigValidationError,
    EmitterConfig,
    GlobalConfig,
    KDLConfig,
    KdlVersion,
)
from .errors import (
    EmitError,
    InvalidIndexError,
    KDLError,
    KindMismatchError,
    MarshalError,
    NotFoundError,
    ParseError,
    PrecisionLossError,
    RangeError,
    StructuralError,
    is_not_found,
)
from .logging import CorrelationLogger, get_logger
from .result import ProcessingMetrics

__all__ = [
    # Configuration
    "BuilderConfig",
    "ConfigError",
    "ConfigValidationError",
    "EmitterConfig",
    "GlobalConfig",
    "KDLConfig",
    "KdlVersion",
    # Errors
    "EmitError",
    "InvalidIndexError",
    "KDLError",
    "KindMismatchError",
    "MarshalError",
    "NotFoundError",
    "ParseError",
    "PrecisionLossError",
    "RangeError",
    "StructuralError",
    "is_not_found",
    # Logging and metrics
    "CorrelationLogger",
    "ProcessingMetrics",
    "get_logger",
]
