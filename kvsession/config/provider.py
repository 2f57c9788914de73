"""Configuration provider following Black Box Design principles."""
import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Mapping, Optional, Protocol

from ..modules.cache.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_REDIS_HOST = "localhost"
DEFAULT_REDIS_PORT = 6379
DEFAULT_REDIS_DB = 0
DEFAULT_SESSION_TTL = timedelta(hours=168)


def requires_tls(username: Optional[str], password: Optional[str]) -> bool:
    """Credentials are the only trigger for a TLS connection."""
    return bool(username) or bool(password)


@dataclass(frozen=True)
class RedisConfig:
    """Redis connection configuration."""
    host: str = DEFAULT_REDIS_HOST
    port: int = DEFAULT_REDIS_PORT
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    db: int = DEFAULT_REDIS_DB
    prefix: str = ""

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def use_tls(self) -> bool:
        return requires_tls(self.username, self.password)


@dataclass(frozen=True)
class SessionConfig:
    """Session cookie configuration, fixed for the lifetime of a manager."""
    name: str = "session"
    secure: bool = True
    ttl: timedelta = DEFAULT_SESSION_TTL
    path: str = "/"


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_redis_config(self) -> RedisConfig:
        """Get Redis configuration."""
        ...

    def get_session_config(self) -> SessionConfig:
        """Get session configuration."""
        ...


def _parse_port(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"invalid Redis port {value!r}") from None


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ

    def _get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self._environ.get(name)
        return value if value else default

    def get_redis_config(self) -> RedisConfig:
        """
        Get Redis configuration from environment variables.

        REDIS_ADDR (host or host:port) takes precedence over REDIS_HOST and
        REDIS_PORT. REDIS_PASS is accepted as a legacy alias for
        REDIS_PASSWORD. A malformed REDIS_DB falls back to the default
        database with a warning.
        """
        host = self._get("REDIS_HOST", "")
        port = self._get("REDIS_PORT", str(DEFAULT_REDIS_PORT))

        addr = self._get("REDIS_ADDR")
        if addr:
            components = addr.split(":")
            if len(components) == 1:
                host, port = components[0], str(DEFAULT_REDIS_PORT)
            elif len(components) == 2:
                host, port = components
            else:
                logger.warning("Ignoring unparseable REDIS_ADDR %r", addr)

        db = DEFAULT_REDIS_DB
        db_env = self._environ.get("REDIS_DB")
        if db_env is not None:
            try:
                db = int(db_env)
            except ValueError:
                logger.warning(
                    "Invalid REDIS_DB %r, falling back to database %d", db_env, DEFAULT_REDIS_DB
                )

        return RedisConfig(
            host=host or DEFAULT_REDIS_HOST,
            port=_parse_port(port),
            username=self._get("REDIS_USER"),
            password=self._get("REDIS_PASSWORD") or self._get("REDIS_PASS"),
            db=db,
            prefix=self._get("CACHE_PREFIX", ""),
        )

    def get_session_config(self) -> SessionConfig:
        """Get session configuration from environment variables."""
        ttl_env = self._get("SESSION_TTL")
        ttl = DEFAULT_SESSION_TTL
        if ttl_env:
            try:
                ttl = timedelta(seconds=float(ttl_env))
            except ValueError:
                logger.warning("Invalid SESSION_TTL %r, using %s", ttl_env, DEFAULT_SESSION_TTL)

        return SessionConfig(
            name=self._get("SESSION_COOKIE_NAME", "session"),
            secure=self._get("SESSION_SECURE", "true").lower() == "true",
            ttl=ttl,
            path=self._get("SESSION_PATH", "/"),
        )
