"""Session subsystem collaborator.

The hosting environment's session layer supplies the default cache limiter
and expiry, and can emit its own cookies and cache headers. The middleware
only talks to it through :class:`SessionEnvironment`.
"""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .types import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_LIMITER = "nocache"
DEFAULT_CACHE_EXPIRE = 180


@dataclass
class SessionSettings:
    """Session knobs that influence automatic header emission."""

    # Propagate the session id through URLs
    use_trans_sid: bool = False
    use_cookies: bool = True
    use_only_cookies: bool = True
    use_strict_mode: bool = False

    cache_limiter: str = DEFAULT_CACHE_LIMITER
    # Minutes
    cache_expire: int = DEFAULT_CACHE_EXPIRE

    @classmethod
    def from_env(cls) -> "SessionSettings":
        """Create settings from CACHEWARE_SESSION_ prefixed env vars."""
        settings = cls()

        limiter = os.getenv("CACHEWARE_SESSION_CACHE_LIMITER")
        if limiter is not None:
            settings.cache_limiter = limiter.strip()

        if expire := os.getenv("CACHEWARE_SESSION_CACHE_EXPIRE"):
            try:
                settings.cache_expire = int(expire)
            except ValueError:
                raise ConfigError(f"Invalid CACHEWARE_SESSION_CACHE_EXPIRE: {expire}")

        return settings


class SessionEnvironment(ABC):
    """Interface to the hosting environment's session-cache subsystem."""

    @abstractmethod
    def cache_limiter(self) -> str | None:
        """Get the current cache limiter name."""
        pass

    @abstractmethod
    def cache_expire(self) -> int:
        """Get the current cache expiry in minutes (0 if unset)."""
        pass

    @abstractmethod
    def disable_automatic_headers(self) -> None:
        """Stop the session layer from sending its own cookies and cache headers."""
        pass


class StaticSessionEnvironment(SessionEnvironment):
    """
    In-process session environment backed by :class:`SessionSettings`.

    Example:
        session = StaticSessionEnvironment(SessionSettings(cache_limiter="public"))
        middleware = CacheHeaderMiddleware(session=session)
    """

    def __init__(self, settings: SessionSettings | None = None):
        self._settings = settings or SessionSettings()

    def cache_limiter(self) -> str | None:
        return self._settings.cache_limiter

    def cache_expire(self) -> int:
        return self._settings.cache_expire

    def disable_automatic_headers(self) -> None:
        self._settings.use_trans_sid = False
        self._settings.use_cookies = False
        self._settings.use_only_cookies = True
        self._settings.use_strict_mode = False
        self._settings.cache_limiter = ""
        logger.debug("Disabled automatic session cookie and cache headers")

    @property
    def settings(self) -> SessionSettings:
        """Get the underlying settings."""
        return self._settings
