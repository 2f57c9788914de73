"""Redis-backed Cache implementation."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING, Any, List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from .errors import ConfigurationError, NotFoundError, guarded
from .serialization import TTL, decode, encode, ttl_milliseconds

if TYPE_CHECKING:
    from ...config.provider import RedisConfig

logger = logging.getLogger(__name__)

PING_TIMEOUT = 30.0

_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


class RedisCache:
    """
    Cache over a Redis server.

    Every key is prefixed with `prefix` before it reaches Redis, so several
    logical caches can share one database. Values are stored as JSON text.
    Failures are never retried here; callers own the retry policy.
    """

    def __init__(self, client: redis.Redis, prefix: str = ""):
        """
        Initialize with an already verified client.

        Prefer connect(), which performs the liveness check.

        Args:
            client: Async Redis client (decode_responses=True)
            prefix: Namespace prepended to every key
        """
        self.redis = client
        self.prefix = prefix

    @classmethod
    async def connect(
        cls, config: RedisConfig, prefix: Optional[str] = None, ping_timeout: float = PING_TIMEOUT
    ) -> "RedisCache":
        """
        Connect using the transport the credentials call for.

        Any username or password upgrades the connection to TLS.

        Args:
            config: Connection configuration
            prefix: Key namespace (defaults to config.prefix)
            ping_timeout: Seconds allowed for the initial ping

        Raises:
            ConfigurationError: Redis could not be reached or pinged in time
        """
        if config.use_tls:
            return await cls.connect_secure(config, prefix, ping_timeout)
        return await cls.connect_insecure(config, prefix, ping_timeout)

    @classmethod
    async def connect_insecure(
        cls, config: RedisConfig, prefix: Optional[str] = None, ping_timeout: float = PING_TIMEOUT
    ) -> "RedisCache":
        """Connect over plain TCP without credentials."""
        client = redis.Redis(
            host=config.host,
            port=config.port,
            db=config.db,
            encoding="utf-8",
            decode_responses=True,
        )
        return await cls._verified(client, config, prefix, ping_timeout, secure=False)

    @classmethod
    async def connect_secure(
        cls, config: RedisConfig, prefix: Optional[str] = None, ping_timeout: float = PING_TIMEOUT
    ) -> "RedisCache":
        """Connect over TLS with username/password authentication."""
        client = redis.Redis(
            host=config.host,
            port=config.port,
            db=config.db,
            username=config.username or None,
            password=config.password or None,
            ssl=True,
            encoding="utf-8",
            decode_responses=True,
        )
        return await cls._verified(client, config, prefix, ping_timeout, secure=True)

    @classmethod
    async def _verified(
        cls,
        client: redis.Redis,
        config: RedisConfig,
        prefix: Optional[str],
        ping_timeout: float,
        secure: bool,
    ) -> "RedisCache":
        kind = "secure Redis" if secure else "Redis"
        try:
            await asyncio.wait_for(client.ping(), timeout=ping_timeout)
        except (asyncio.TimeoutError, RedisError, OSError) as e:
            logger.error("Failed to create %s client %s: %s", kind, config.address, e)
            await client.aclose()
            raise ConfigurationError(
                f"failed to create {kind} client {config.address!r}: {str(e) or type(e).__name__}",
                operation="connect",
            ) from e

        logger.info("Connected %s cache at %s (db=%d)", kind, config.address, config.db)
        return cls(client, config.prefix if prefix is None else prefix)

    def _key(self, key: str) -> str:
        return self.prefix + key

    async def get(self, key: str, model: Any = None, *, timeout: Optional[float] = None) -> Any:
        raw = await guarded(self.redis.get(self._key(key)), "get", key, timeout)
        if raw is None:
            raise NotFoundError(key)
        return decode(raw, model, key=key)

    async def set(self, key: str, value: Any, ttl: TTL = None, *, timeout: Optional[float] = None) -> None:
        raw = encode(value, key=key)
        await guarded(
            self.redis.set(self._key(key), raw, px=ttl_milliseconds(ttl)), "set", key, timeout
        )

    async def has(self, key: str, *, timeout: Optional[float] = None) -> bool:
        count = await guarded(self.redis.exists(self._key(key)), "has", key, timeout)
        return count > 0

    async def keys(self, pattern: str = "*", *, timeout: Optional[float] = None) -> List[str]:
        # The prefix is literal; only the caller's pattern is glob syntax
        query = _GLOB_SPECIAL.sub(r"\\\1", self.prefix) + pattern
        found = await guarded(self.redis.keys(query), "keys", pattern, timeout)
        start = len(self.prefix)
        return [key[start:] for key in found if key.startswith(self.prefix)]

    async def delete(self, *keys: str, timeout: Optional[float] = None) -> int:
        if not keys:
            return 0
        physical = [self._key(key) for key in keys]
        return await guarded(self.redis.delete(*physical), "delete", keys[0], timeout)

    async def close(self) -> None:
        await self.redis.aclose()
        logger.info("Redis cache closed")
