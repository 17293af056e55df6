"""Configuration management and environment loading."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .session import DEFAULT_CACHE_EXPIRE, SessionEnvironment
from .types import CacheLimiter, ConfigError

logger = logging.getLogger(__name__)

SETTINGS_KEYS = frozenset({"mode", "expire_minutes"})

# One hundred years; keeps public Expires dates inside the datetime range
MAX_EXPIRE_MINUTES = 100 * 365 * 24 * 60


@dataclass(frozen=True)
class CacheConfig:
    """Resolved cache header configuration. Never changes after creation."""

    mode: CacheLimiter = CacheLimiter.NOCACHE
    expire_minutes: int = DEFAULT_CACHE_EXPIRE

    def __post_init__(self) -> None:
        if not CacheLimiter.is_known(self.mode):
            logger.warning(
                f"Unrecognized cache limiter {self.mode!r}, no cache headers will be added"
            )
        object.__setattr__(self, "mode", CacheLimiter.parse(self.mode))

        if isinstance(self.expire_minutes, bool) or not isinstance(self.expire_minutes, int):
            raise ConfigError(
                f"expire_minutes must be an integer, got {self.expire_minutes!r}"
            )
        if self.expire_minutes < 0:
            raise ConfigError(
                f"expire_minutes must be non-negative, got {self.expire_minutes}"
            )
        if self.expire_minutes > MAX_EXPIRE_MINUTES:
            raise ConfigError(
                f"expire_minutes must be at most {MAX_EXPIRE_MINUTES}, got {self.expire_minutes}"
            )

    @property
    def max_age(self) -> int:
        """Freshness lifetime in seconds."""
        return self.expire_minutes * 60 if self.expire_minutes else 0

    @classmethod
    def resolve(
        cls,
        session: SessionEnvironment,
        settings: Mapping[str, Any] | None = None,
    ) -> "CacheConfig":
        """
        Merge session defaults with explicit settings.

        Settings win key by key. A session expiry of zero falls back to 180
        minutes; an explicit ``expire_minutes=0`` is kept.

        Args:
            session: Session environment supplying the defaults
            settings: Overrides with optional ``mode`` and ``expire_minutes`` keys

        Returns:
            The resolved configuration
        """
        settings = dict(settings or {})
        unknown = set(settings) - SETTINGS_KEYS
        if unknown:
            raise ConfigError(f"Unknown cache settings: {', '.join(sorted(unknown))}")

        merged: dict[str, Any] = {
            "mode": session.cache_limiter(),
            "expire_minutes": session.cache_expire() or DEFAULT_CACHE_EXPIRE,
        }
        merged.update(settings)
        return cls(**merged)


@dataclass
class CachewareConfig:
    """Environment-level configuration for cacheware."""

    # Overrides for the session defaults (None = use the session value)
    mode: str | None = None
    expire_minutes: int | None = None

    # Logging
    log_requests: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "CachewareConfig":
        """Create config from environment variables."""
        config = cls()

        # Read config from CACHEWARE_ prefixed env vars
        if mode := os.getenv("CACHEWARE_CACHE_MODE"):
            config.mode = mode.strip()

        if expire := os.getenv("CACHEWARE_CACHE_EXPIRE"):
            try:
                config.expire_minutes = int(expire)
            except ValueError:
                raise ConfigError(f"Invalid CACHEWARE_CACHE_EXPIRE: {expire}")

        if log_level := os.getenv("CACHEWARE_LOG_LEVEL"):
            config.log_level = log_level.upper()

        if os.getenv("CACHEWARE_LOG_REQUESTS", "").lower() in ("1", "true", "yes"):
            config.log_requests = True

        return config

    def to_settings(self) -> dict[str, Any]:
        """Get the cache overrides that are actually set."""
        settings: dict[str, Any] = {}
        if self.mode is not None:
            settings["mode"] = self.mode
        if self.expire_minutes is not None:
            settings["expire_minutes"] = self.expire_minutes
        return settings


def load_env_files(
    env_file: str | Path | None = None,
    env_files: list[str | Path] | None = None,
) -> None:
    """
    Load environment variables from .env files.

    Args:
        env_file: Single env file to load
        env_files: Multiple env files to load (later files override earlier)
    """
    files_to_load: list[Path] = []

    if env_files:
        files_to_load.extend(Path(f) for f in env_files)
    elif env_file:
        files_to_load.append(Path(env_file))
    else:
        default_env = Path(".env")
        if default_env.exists():
            files_to_load.append(default_env)

    for file_path in files_to_load:
        if file_path.exists():
            load_dotenv(file_path, override=True)
