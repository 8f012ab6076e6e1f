"""Utility functions for twig.

This package provides utility modules:
- logging: Logging configuration and logger creation
- threading: Worker sizing for the parallel untracked-file copy
"""

from .logging import setup_logging, get_logger, ColoredFormatter
from .threading import (
    is_free_threading_enabled,
    get_optimal_worker_count,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "ColoredFormatter",
    # Threading
    "is_free_threading_enabled",
    "get_optimal_worker_count",
]
