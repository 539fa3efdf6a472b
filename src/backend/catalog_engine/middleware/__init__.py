"""Middleware package for request processing and logging context injection."""

from .logging_middleware import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
