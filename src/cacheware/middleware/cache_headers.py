"""Cache header middleware for cacheware."""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from ..config import CacheConfig
from ..headers import HeaderList, apply_cache_headers, build_cache_headers
from ..session import SessionEnvironment, StaticSessionEnvironment
from ..types import CacheLimiter, HttpRequest, HttpResponse, RequestHandler
from .base import Middleware

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class CacheHeaderMiddleware(Middleware):
    """
    Middleware that decorates responses with cache headers.

    The headers (Expires, Cache-Control, Last-Modified, Pragma) follow the
    configured cache limiter. They are appended to whatever the downstream
    handler already set. Before the handler runs, the session layer is told
    to stop emitting its own cookies and cache headers.

    Example:
        middleware = CacheHeaderMiddleware({"mode": "public", "expire_minutes": 30})
        chain = MiddlewareChain([middleware], app)
    """

    def __init__(
        self,
        settings: Mapping[str, Any] | CacheConfig | None = None,
        *,
        session: SessionEnvironment | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the cache header middleware.

        Args:
            settings: ``mode``/``expire_minutes`` overrides, or a resolved CacheConfig
            session: Session environment supplying defaults (nocache, 180 minutes if omitted)
            clock: Returns the current time (defaults to UTC now)
        """
        self._session = session or StaticSessionEnvironment()
        if isinstance(settings, CacheConfig):
            self._config = settings
        else:
            self._config = CacheConfig.resolve(self._session, settings)
        self._clock = clock or _utc_now

        logger.debug(
            f"Cache headers: limiter={self._config.mode.value}, "
            f"max_age={self._config.max_age}s"
        )

    async def __call__(
        self,
        request: HttpRequest,
        next_handler: RequestHandler,
    ) -> HttpResponse:
        """Process request, then add cache headers to the response."""
        self._session.disable_automatic_headers()

        response = await next_handler(request)

        if self._config.mode is CacheLimiter.NONE:
            return response
        return apply_cache_headers(response, self.cache_headers())

    def cache_headers(self, now: datetime | None = None) -> HeaderList:
        """
        Compute the cache headers for the configured limiter.

        Args:
            now: Reference time (defaults to the middleware clock)

        Returns:
            (name, value) pairs in the order they are added
        """
        if now is None:
            now = self._clock().astimezone(UTC)
        return build_cache_headers(self._config.mode, self._config.max_age, now)

    @property
    def config(self) -> CacheConfig:
        """Get the resolved configuration."""
        return self._config

    @property
    def session(self) -> SessionEnvironment:
        """Get the session environment."""
        return self._session
