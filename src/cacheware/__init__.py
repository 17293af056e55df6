"""
cacheware - Cache header middleware.

Features:
- Session-cache-limiter style strategies (public, private,
  private_no_expire, nocache, none)
- Header append semantics that keep values set downstream
- Async middleware chain
- Structured request logging
- Starlette / FastAPI integration
"""

from .config import CacheConfig, CachewareConfig, load_env_files
from .headers import CACHE_EXPIRED, build_cache_headers, format_http_date
from .middleware import (
    CacheHeaderMiddleware,
    LoggingMiddleware,
    Middleware,
    MiddlewareChain,
    PassthroughMiddleware,
)
from .observability import RequestContext, StructuredLogger
from .pipeline import build_chain, build_middleware
from .session import SessionEnvironment, SessionSettings, StaticSessionEnvironment
from .types import (
    CacheLimiter,
    # Exceptions
    CachewareError,
    ConfigError,
    # HTTP types
    Headers,
    HttpRequest,
    HttpResponse,
    RequestHandler,
)

__version__ = "0.1.0"

__all__ = [
    # Middleware
    "CacheHeaderMiddleware",
    "LoggingMiddleware",
    "Middleware",
    "MiddlewareChain",
    "PassthroughMiddleware",
    "build_chain",
    "build_middleware",
    # Configuration
    "CacheConfig",
    "CacheLimiter",
    "CachewareConfig",
    "load_env_files",
    # Session
    "SessionEnvironment",
    "SessionSettings",
    "StaticSessionEnvironment",
    # Headers
    "CACHE_EXPIRED",
    "build_cache_headers",
    "format_http_date",
    # HTTP types
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "RequestHandler",
    # Observability
    "StructuredLogger",
    "RequestContext",
    # Exceptions
    "CachewareError",
    "ConfigError",
]
