"""Utility helpers for logging context, performance tracking and input debouncing."""

from .debounce import Debouncer
from .logging_context import (
    bind_catalog_context,
    unbind_context,
    log_context,
    log_performance,
    get_logger_with_context,
)

__all__ = [
    "Debouncer",
    "bind_catalog_context",
    "unbind_context",
    "log_context",
    "log_performance",
    "get_logger_with_context",
]
