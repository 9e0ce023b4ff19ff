"""Shared utilities for streaming XML reading.

This module provides the configuration record, statistics type and logging
helpers used across the lexer, the tree assembler and the public API.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ReaderConfig,
    resolve_config,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import ReaderStatistics

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "ReaderConfig",
    "ReaderStatistics",
    "configure_logging",
    "get_logger",
    "resolve_config",
]
