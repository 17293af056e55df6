"""Observability module for cacheware."""

from .logging import RequestContext, RequestLogEntry, ResponseLogEntry, StructuredLogger

__all__ = [
    "StructuredLogger",
    "RequestLogEntry",
    "ResponseLogEntry",
    "RequestContext",
]
