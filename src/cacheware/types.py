"""Shared types and protocols for cacheware."""

from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

HeaderValues = str | Sequence[str]


class CacheLimiter(str, Enum):
    """Cache limiter strategies controlling which cache headers a response carries."""

    PUBLIC = "public"
    PRIVATE = "private"
    PRIVATE_NO_EXPIRE = "private_no_expire"
    NOCACHE = "nocache"
    NONE = "none"

    @classmethod
    def parse(cls, value: "CacheLimiter | str | None") -> "CacheLimiter":
        """
        Resolve a limiter name to a member.

        Accepts the canonical identifiers plus the hyphenated spellings
        ``private-no-expire`` and ``no-cache``. Empty and unrecognized values
        resolve to NONE, which applies no headers.

        Example:
            CacheLimiter.parse("no-cache")  # CacheLimiter.NOCACHE
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.NONE
        return _LIMITER_ALIASES.get(str(value).strip().lower(), cls.NONE)

    @classmethod
    def is_known(cls, value: "CacheLimiter | str | None") -> bool:
        """Whether a value names a limiter (empty values count as NONE)."""
        if isinstance(value, cls) or not value:
            return True
        return str(value).strip().lower() in _LIMITER_ALIASES


_LIMITER_ALIASES: dict[str, CacheLimiter] = {
    "public": CacheLimiter.PUBLIC,
    "private": CacheLimiter.PRIVATE,
    "private_no_expire": CacheLimiter.PRIVATE_NO_EXPIRE,
    "private-no-expire": CacheLimiter.PRIVATE_NO_EXPIRE,
    "nocache": CacheLimiter.NOCACHE,
    "no-cache": CacheLimiter.NOCACHE,
    "none": CacheLimiter.NONE,
}


class Headers:
    """
    Immutable, case-insensitive HTTP header collection.

    A header name may carry several values; their insertion order is kept.
    Every modifying operation returns a new instance.

    Example:
        headers = Headers({"Cache-Control": "no-store"})
        headers = headers.with_added("cache-control", "private")
        headers.get_all("CACHE-CONTROL")  # ["no-store", "private"]
    """

    __slots__ = ("_items",)

    def __init__(
        self,
        headers: Mapping[str, HeaderValues] | Iterable[tuple[str, str]] | None = None,
    ):
        items: list[tuple[str, str]] = []
        if isinstance(headers, Headers):
            items = list(headers._items)
        elif isinstance(headers, Mapping):
            for name, values in headers.items():
                if isinstance(values, str):
                    items.append((name, values))
                else:
                    items.extend((name, value) for value in values)
        elif headers is not None:
            items = [(name, value) for name, value in headers]
        self._items: tuple[tuple[str, str], ...] = tuple(items)

    @classmethod
    def _from_items(cls, items: Iterable[tuple[str, str]]) -> "Headers":
        instance = cls()
        instance._items = tuple(items)
        return instance

    def _canonical_name(self, name: str) -> str:
        # Keep the casing the header was first added with
        key = name.lower()
        for existing, _ in self._items:
            if existing.lower() == key:
                return existing
        return name

    def get(self, name: str, default: str | None = None) -> str | None:
        """Get the first value of a header."""
        key = name.lower()
        for existing, value in self._items:
            if existing.lower() == key:
                return value
        return default

    def get_all(self, name: str) -> list[str]:
        """Get every value of a header, in insertion order."""
        key = name.lower()
        return [value for existing, value in self._items if existing.lower() == key]

    def get_line(self, name: str) -> str:
        """Get all values of a header joined with commas ("" if absent)."""
        return ", ".join(self.get_all(name))

    def names(self) -> list[str]:
        """Get the distinct header names, in insertion order."""
        seen: dict[str, str] = {}
        for name, _ in self._items:
            seen.setdefault(name.lower(), name)
        return list(seen.values())

    def with_added(self, name: str, value: str) -> "Headers":
        """Return a copy with a value appended to a header."""
        return self._from_items((*self._items, (self._canonical_name(name), value)))

    def with_replaced(self, name: str, value: str) -> "Headers":
        """Return a copy where a header has exactly one value."""
        canonical = self._canonical_name(name)
        return self.without(name).with_added(canonical, value)

    def without(self, name: str) -> "Headers":
        """Return a copy with every value of a header removed."""
        key = name.lower()
        return self._from_items(item for item in self._items if item[0].lower() != key)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.get(name) is not None

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return [(n.lower(), v) for n, v in self._items] == [
            (n.lower(), v) for n, v in other._items
        ]

    def __hash__(self) -> int:
        return hash(tuple((n.lower(), v) for n, v in self._items))

    def __repr__(self) -> str:
        return f"Headers({list(self._items)!r})"


@dataclass(frozen=True)
class HttpRequest:
    """An inbound HTTP request. Middleware pass it through untouched."""

    method: str = "GET"
    path: str = "/"
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""


@dataclass(frozen=True)
class HttpResponse:
    """An HTTP response produced by a handler."""

    status_code: int = 200
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    def has_header(self, name: str) -> bool:
        return name in self.headers

    def get_header(self, name: str) -> list[str]:
        return self.headers.get_all(name)

    def get_header_line(self, name: str) -> str:
        return self.headers.get_line(name)

    def with_added_header(self, name: str, value: str) -> "HttpResponse":
        """Return a copy with a header value appended to any existing ones."""
        return replace(self, headers=self.headers.with_added(name, value))

    def with_header(self, name: str, value: str) -> "HttpResponse":
        """Return a copy with a header replaced."""
        return replace(self, headers=self.headers.with_replaced(name, value))

    def without_header(self, name: str) -> "HttpResponse":
        return replace(self, headers=self.headers.without(name))


# Type alias for the downstream handler
RequestHandler = Callable[[HttpRequest], Awaitable[HttpResponse]]


# Exceptions
class CachewareError(Exception):
    """Base exception for cacheware errors."""

    pass


class ConfigError(CachewareError):
    """Configuration error."""

    pass
