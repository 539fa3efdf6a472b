"""
Logging Context Management Utilities

Provides helpers for adding and managing context in structured logs.
Context automatically appears in all log statements within the scope.
"""

import time
from contextlib import contextmanager
from typing import Optional

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars


def bind_catalog_context(
    catalog_session_id: Optional[str] = None,
    view_mode: Optional[str] = None,
    client_id: Optional[str] = None,
    **kwargs
):
    """
    Bind catalog-session context to all logs.

    Args:
        catalog_session_id: Catalog engine session identifier
        view_mode: "grid" or "table"
        client_id: Owner of the durable settings
        **kwargs: Additional context key-value pairs

    Example:
        ```python
        bind_catalog_context(catalog_session_id="abc123", view_mode="table")
        logger.info("intent applied")  # Includes catalog_session_id, view_mode
        ```
    """
    context = {}

    if catalog_session_id:
        context["catalog_session_id"] = catalog_session_id
    if view_mode:
        context["view_mode"] = view_mode
    if client_id:
        context["client_id"] = client_id

    context.update(kwargs)
    bind_contextvars(**context)


def unbind_context(*keys: str):
    """Remove specific keys from logging context"""
    unbind_contextvars(*keys)


@contextmanager
def log_context(**context_vars):
    """
    Context manager for temporary logging context.

    Context is added on enter and removed on exit.

    Example:
        ```python
        with log_context(load_generation=4):
            logger.info("search dispatched")  # Includes load_generation
        ```
    """
    bind_contextvars(**context_vars)

    try:
        yield
    finally:
        unbind_contextvars(*context_vars.keys())


@contextmanager
def log_performance(operation_name: str, logger=None):
    """
    Context manager for logging operation performance.

    Logs operation start, end, and duration.

    Example:
        ```python
        with log_performance("catalog_search"):
            response = await search.search(params)
        ```
    """
    if logger is None:
        logger = structlog.get_logger()

    start_time = time.time()

    logger.info(f"{operation_name}_started", operation=operation_name)

    try:
        yield
    finally:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"{operation_name}_completed",
            operation=operation_name,
            duration_ms=duration_ms
        )


def get_logger_with_context(name: str, **context) -> structlog.BoundLogger:
    """
    Get a logger with pre-bound context.

    Example:
        ```python
        logger = get_logger_with_context(__name__, component="loader")
        ```
    """
    return structlog.get_logger(name).bind(**context)
