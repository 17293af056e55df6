"""Cache header builders, one per cache limiter."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from email.utils import format_datetime

from .types import CacheLimiter, HttpResponse

# Fixed past date that forces immediate expiry
CACHE_EXPIRED = "Thu, 19 Nov 1981 08:52:00 GMT"

NO_CACHE_CONTROL = "no-store, no-cache, must-revalidate, post-check=0, pre-check=0"

HeaderList = list[tuple[str, str]]
HeaderBuilder = Callable[[int, datetime], HeaderList]


def format_http_date(dt: datetime) -> str:
    """Format a datetime as an RFC 1123 date in GMT."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return format_datetime(dt.astimezone(UTC), usegmt=True)


def public_headers(max_age: int, now: datetime) -> HeaderList:
    expires = now + timedelta(seconds=max_age)
    return [
        ("Expires", f"expires={format_http_date(expires)}; max-age={max_age}"),
        ("Cache-Control", f"public, max-age={max_age}"),
        ("Last-Modified", format_http_date(now)),
    ]


def private_no_expire_headers(max_age: int, now: datetime) -> HeaderList:
    return [
        ("Cache-Control", f"private, max-age={max_age}, pre-check={max_age}"),
        ("Last-Modified", format_http_date(now)),
    ]


def private_headers(max_age: int, now: datetime) -> HeaderList:
    """Private caching: private_no_expire plus an already-expired Expires."""
    return [("Expires", CACHE_EXPIRED), *private_no_expire_headers(max_age, now)]


def nocache_headers(max_age: int, now: datetime) -> HeaderList:
    return [
        ("Expires", CACHE_EXPIRED),
        ("Cache-Control", NO_CACHE_CONTROL),
        ("Pragma", "no-cache"),
    ]


def no_headers(max_age: int, now: datetime) -> HeaderList:
    return []


HEADER_BUILDERS: dict[CacheLimiter, HeaderBuilder] = {
    CacheLimiter.PUBLIC: public_headers,
    CacheLimiter.PRIVATE: private_headers,
    CacheLimiter.PRIVATE_NO_EXPIRE: private_no_expire_headers,
    CacheLimiter.NOCACHE: nocache_headers,
    CacheLimiter.NONE: no_headers,
}


def build_cache_headers(
    mode: CacheLimiter | str | None,
    max_age: int,
    now: datetime | None = None,
) -> HeaderList:
    """
    Build the cache headers for a limiter.

    Args:
        mode: The cache limiter (strings are parsed, unknown ones add nothing)
        max_age: Freshness lifetime in seconds
        now: Reference time (defaults to the current UTC time)

    Returns:
        (name, value) pairs in the order they should be added
    """
    if now is None:
        now = datetime.now(UTC)
    return HEADER_BUILDERS[CacheLimiter.parse(mode)](max_age, now)


def apply_cache_headers(response: HttpResponse, headers: HeaderList) -> HttpResponse:
    """Append headers to a response, keeping any values it already carries."""
    for name, value in headers:
        response = response.with_added_header(name, value)
    return response
