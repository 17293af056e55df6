"""Tests for middleware functionality."""

import re
from datetime import UTC, datetime, timedelta, timezone

import pytest

from cacheware.config import CacheConfig
from cacheware.headers import CACHE_EXPIRED
from cacheware.middleware.base import Middleware, MiddlewareChain, PassthroughMiddleware
from cacheware.middleware.cache_headers import CacheHeaderMiddleware
from cacheware.session import SessionEnvironment, SessionSettings, StaticSessionEnvironment
from cacheware.types import CacheLimiter, ConfigError, Headers, HttpRequest, HttpResponse

RFC1123 = re.compile(r"^[A-Z][a-z]{2}, \d{2} [A-Z][a-z]{2} \d{4} \d{2}:\d{2}:\d{2} GMT$")
CACHE_HEADERS = ("Expires", "Cache-Control", "Last-Modified", "Pragma")


def make_request(path: str = "/items") -> HttpRequest:
    return HttpRequest(method="GET", path=path)


def make_response(**headers: str) -> HttpResponse:
    return HttpResponse(status_code=200, headers=Headers(headers), body=b"Hi there!")


async def handler(req: HttpRequest) -> HttpResponse:
    return make_response()


class RecordingSession(SessionEnvironment):
    """Session double recording calls in order."""

    def __init__(self, limiter: str | None = "nocache", expire: int = 0):
        self.limiter = limiter
        self.expire = expire
        self.calls: list[str] = []

    def cache_limiter(self) -> str | None:
        return self.limiter

    def cache_expire(self) -> int:
        return self.expire

    def disable_automatic_headers(self) -> None:
        self.calls.append("disable")


class TestMiddlewareChain:
    """Tests for middleware chain."""

    async def test_empty_chain_calls_handler(self) -> None:
        calls: list[str] = []

        async def final(req: HttpRequest) -> HttpResponse:
            calls.append("handler")
            return make_response()

        chain = MiddlewareChain([], final)
        result = await chain(make_request())

        assert calls == ["handler"]
        assert result.body == b"Hi there!"

    async def test_middleware_order(self) -> None:
        calls: list[str] = []

        class TrackingMiddleware(Middleware):
            def __init__(self, name: str):
                self.name = name

            async def __call__(self, request, next_handler):
                calls.append(f"{self.name}_before")
                result = await next_handler(request)
                calls.append(f"{self.name}_after")
                return result

        async def final(req: HttpRequest) -> HttpResponse:
            calls.append("handler")
            return make_response()

        chain = MiddlewareChain([TrackingMiddleware("A"), TrackingMiddleware("B")], final)
        await chain(make_request())

        # A wraps B wraps handler
        assert calls == ["A_before", "B_before", "handler", "B_after", "A_after"]

    async def test_passthrough_middleware(self) -> None:
        chain = MiddlewareChain([PassthroughMiddleware()], handler)
        result = await chain(make_request())
        assert result.status_code == 200


class TestCacheHeaderMiddleware:
    """Tests for cache header decoration."""

    async def test_public(self, fixed_clock) -> None:
        middleware = CacheHeaderMiddleware(
            {"mode": "public", "expire_minutes": 3}, clock=fixed_clock
        )
        response = await middleware(make_request(), handler)

        assert response.get_header_line("Cache-Control") == "public, max-age=180"
        assert "max-age=180" in response.get_header_line("Expires")
        assert response.get_header_line("Expires") == (
            "expires=Tue, 05 Mar 2024 14:33:15 GMT; max-age=180"
        )
        assert RFC1123.match(response.get_header_line("Last-Modified"))
        assert not response.has_header("Pragma")

    async def test_public_zero_expiry(self) -> None:
        middleware = CacheHeaderMiddleware({"mode": "public", "expire_minutes": 0})
        response = await middleware(make_request(), handler)

        assert response.get_header_line("Cache-Control") == "public, max-age=0"
        assert response.get_header_line("Expires").endswith("; max-age=0")

    async def test_private(self) -> None:
        middleware = CacheHeaderMiddleware({"mode": "private"})
        response = await middleware(make_request(), handler)

        assert response.get_header_line("Expires") == CACHE_EXPIRED
        assert response.get_header_line("Cache-Control").startswith("private")
        assert response.get_header_line("Cache-Control") == (
            "private, max-age=10800, pre-check=10800"
        )
        assert response.has_header("Last-Modified")

    async def test_private_no_expire(self) -> None:
        middleware = CacheHeaderMiddleware({"mode": "private_no_expire"})
        response = await middleware(make_request(), handler)

        assert not response.has_header("Expires")
        assert response.get_header_line("Cache-Control").startswith("private")
        assert response.has_header("Last-Modified")

    async def test_nocache(self) -> None:
        middleware = CacheHeaderMiddleware({"mode": "nocache"})
        response = await middleware(make_request(), handler)

        assert response.get_header_line("Expires") == "Thu, 19 Nov 1981 08:52:00 GMT"
        assert response.get_header_line("Cache-Control") == (
            "no-store, no-cache, must-revalidate, post-check=0, pre-check=0"
        )
        assert response.get_header_line("Pragma") == "no-cache"
        assert not response.has_header("Last-Modified")

    @pytest.mark.parametrize("mode", [None, "none", "limit", "something-else"])
    async def test_no_headers(self, mode) -> None:
        middleware = CacheHeaderMiddleware({"mode": mode})
        response = await middleware(make_request(), handler)

        for name in CACHE_HEADERS:
            assert not response.has_header(name)

    async def test_none_keeps_downstream_headers(self) -> None:
        downstream = make_response(**{"Cache-Control": "max-age=5"})

        async def final(req: HttpRequest) -> HttpResponse:
            return downstream

        middleware = CacheHeaderMiddleware({"mode": "none"})
        response = await middleware(make_request(), final)

        assert response is downstream

    async def test_headers_are_appended(self) -> None:
        async def final(req: HttpRequest) -> HttpResponse:
            return make_response(**{"Cache-Control": "no-transform", "Pragma": "x"})

        middleware = CacheHeaderMiddleware({"mode": "nocache"})
        response = await middleware(make_request(), final)

        assert response.get_header("Cache-Control") == [
            "no-transform",
            "no-store, no-cache, must-revalidate, post-check=0, pre-check=0",
        ]
        assert response.get_header("Pragma") == ["x", "no-cache"]

    async def test_request_forwarded_unchanged(self) -> None:
        seen: list[HttpRequest] = []
        request = make_request("/report")

        async def final(req: HttpRequest) -> HttpResponse:
            seen.append(req)
            return make_response()

        await CacheHeaderMiddleware({"mode": "public"})(request, final)

        assert seen == [request]
        assert seen[0] is request

    async def test_repeatable_output(self) -> None:
        middleware = CacheHeaderMiddleware({"mode": "private", "expire_minutes": 10})

        first = await middleware(make_request(), handler)
        second = await middleware(make_request(), handler)

        assert first.get_header_line("Cache-Control") == second.get_header_line("Cache-Control")
        assert first.get_header_line("Pragma") == second.get_header_line("Pragma")

    async def test_handle_alias(self) -> None:
        middleware = CacheHeaderMiddleware({"mode": "nocache"})
        response = await middleware.handle(make_request(), handler)
        assert response.get_header_line("Pragma") == "no-cache"

    async def test_downstream_error_propagates(self) -> None:
        class DownstreamError(Exception):
            pass

        async def failing(req: HttpRequest) -> HttpResponse:
            raise DownstreamError("boom")

        middleware = CacheHeaderMiddleware({"mode": "public"})
        with pytest.raises(DownstreamError, match="boom"):
            await middleware(make_request(), failing)


class TestCacheHeaderMiddlewareConfig:
    """Tests for configuration resolution and the session side effect."""

    def test_defaults_without_session(self) -> None:
        middleware = CacheHeaderMiddleware()

        assert middleware.config.mode is CacheLimiter.NOCACHE
        assert middleware.config.expire_minutes == 180
        assert isinstance(middleware.session, StaticSessionEnvironment)

    def test_defaults_from_session(self) -> None:
        middleware = CacheHeaderMiddleware(session=RecordingSession("public", 0))

        assert middleware.config.mode is CacheLimiter.PUBLIC
        # Zero session expiry falls back to 180 minutes
        assert middleware.config.max_age == 10800

    def test_settings_override_session(self) -> None:
        session = RecordingSession("public", 20)
        middleware = CacheHeaderMiddleware({"expire_minutes": 1}, session=session)

        assert middleware.config.mode is CacheLimiter.PUBLIC
        assert middleware.config.max_age == 60

    def test_accepts_resolved_config(self) -> None:
        config = CacheConfig(mode=CacheLimiter.PRIVATE, expire_minutes=2)
        assert CacheHeaderMiddleware(config).config is config

    def test_negative_expiry_rejected(self) -> None:
        with pytest.raises(ConfigError):
            CacheHeaderMiddleware({"mode": "public", "expire_minutes": -5})

    async def test_disables_session_headers_before_downstream(self) -> None:
        session = RecordingSession("nocache")

        async def final(req: HttpRequest) -> HttpResponse:
            session.calls.append("handler")
            return make_response()

        middleware = CacheHeaderMiddleware(session=session)
        await middleware(make_request(), final)

        assert session.calls == ["disable", "handler"]

    async def test_mode_fixed_after_session_cleared(self) -> None:
        settings = SessionSettings(cache_limiter="private")
        middleware = CacheHeaderMiddleware(session=StaticSessionEnvironment(settings))

        await middleware(make_request(), handler)
        response = await middleware(make_request(), handler)

        assert settings.cache_limiter == ""
        assert response.get_header_line("Expires") == CACHE_EXPIRED

    def test_clock_converted_to_utc(self) -> None:
        local = datetime(2024, 3, 5, 16, 30, 15, tzinfo=timezone(timedelta(hours=2)))
        middleware = CacheHeaderMiddleware(
            {"mode": "private_no_expire"}, clock=lambda: local
        )

        headers = dict(middleware.cache_headers())

        assert headers["Last-Modified"] == "Tue, 05 Mar 2024 14:30:15 GMT"

    def test_cache_headers_explicit_now(self) -> None:
        middleware = CacheHeaderMiddleware({"mode": "public", "expire_minutes": 1})
        now = datetime(2024, 1, 1, tzinfo=UTC)

        headers = dict(middleware.cache_headers(now))

        assert headers["Expires"] == "expires=Mon, 01 Jan 2024 00:01:00 GMT; max-age=60"
