"""Assemble middleware stacks from configuration."""

import logging
from collections.abc import Callable
from datetime import datetime

from .config import CachewareConfig
from .middleware.base import Middleware, MiddlewareChain
from .middleware.cache_headers import CacheHeaderMiddleware
from .middleware.logging import LoggingMiddleware
from .observability.logging import StructuredLogger
from .session import SessionEnvironment
from .types import RequestHandler

logger = logging.getLogger(__name__)


def build_middleware(
    config: CachewareConfig | None = None,
    *,
    session: SessionEnvironment | None = None,
    structured_logger: StructuredLogger | None = None,
    clock: Callable[[], datetime] | None = None,
) -> list[Middleware]:
    """
    Build the middleware stack for a configuration.

    Order (outermost to innermost):
    1. Logging - only when ``log_requests`` is set or a structured logger is given;
       sees the final headers and the full latency
    2. Cache headers

    Args:
        config: Environment-level configuration (read from the environment if omitted)
        session: Session environment supplying defaults
        structured_logger: Structured logger for JSONL request logs
        clock: Returns the current time for the cache headers

    Returns:
        The middleware list, ready for MiddlewareChain
    """
    if config is None:
        config = CachewareConfig.from_env()

    middleware: list[Middleware] = []

    if config.log_requests or structured_logger:
        middleware.append(
            LoggingMiddleware(
                structured_logger=structured_logger,
                log_level=config.log_level,
            )
        )

    middleware.append(
        CacheHeaderMiddleware(config.to_settings(), session=session, clock=clock)
    )

    logger.debug(f"Built middleware stack: {[type(m).__name__ for m in middleware]}")
    return middleware


def build_chain(
    app: RequestHandler,
    config: CachewareConfig | None = None,
    **options,
) -> MiddlewareChain:
    """Wrap an application handler in the configured middleware stack."""
    return MiddlewareChain(build_middleware(config, **options), app)
