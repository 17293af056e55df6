"""Middleware for request/response processing."""

from .base import Middleware, MiddlewareChain, PassthroughMiddleware
from .cache_headers import CacheHeaderMiddleware
from .logging import LoggingMiddleware

__all__ = [
    "Middleware",
    "MiddlewareChain",
    "PassthroughMiddleware",
    "CacheHeaderMiddleware",
    "LoggingMiddleware",
]
