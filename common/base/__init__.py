"""Low-level shared utilities for pathentry-tools."""

from .logging import get_logger, setup_logging, PathLogger

__all__ = [
    "get_logger",
    "setup_logging",
    "PathLogger",
]
