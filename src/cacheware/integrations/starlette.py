"""Starlette / FastAPI integration."""

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ..config import CacheConfig
from ..middleware.cache_headers import CacheHeaderMiddleware
from ..session import SessionEnvironment


class CacheHeaderASGIMiddleware(BaseHTTPMiddleware):
    """
    Starlette middleware adding cache headers to every response.

    Headers are appended, so values set by the endpoint are kept.

    Example:
        app = FastAPI()
        app.add_middleware(CacheHeaderASGIMiddleware, settings={"mode": "public"})
    """

    def __init__(
        self,
        app: ASGIApp,
        settings: Mapping[str, Any] | CacheConfig | None = None,
        session: SessionEnvironment | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(app)
        self._cache_headers = CacheHeaderMiddleware(settings, session=session, clock=clock)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        self._cache_headers.session.disable_automatic_headers()
        response = await call_next(request)
        for name, value in self._cache_headers.cache_headers():
            response.headers.append(name, value)
        return response

    @property
    def config(self) -> CacheConfig:
        """Get the resolved configuration."""
        return self._cache_headers.config
