"""
Cache and session factory following Black Box Design principles.

This factory:
- Resolves configuration through a ConfigProvider
- Connects and verifies the cache backend
- Returns only the public interfaces (Cache, SessionManager)
"""

import logging
from typing import Optional

from .config.provider import ConfigProvider, SessionConfig
from .modules.cache import Cache, MemoryCache, RedisCache
from .modules.session import SessionManager

logger = logging.getLogger(__name__)


class CacheFactory:
    """
    Composition root for caches and session managers.

    Nothing returned from here is in a connected-but-unverified state.
    """

    @staticmethod
    async def build(config_provider: ConfigProvider, prefix: Optional[str] = None) -> Cache:
        """
        Build a Redis-backed cache.

        Args:
            config_provider: Configuration provider
            prefix: Key namespace (defaults to the configured prefix)

        Returns:
            Connected Cache

        Raises:
            ConfigurationError: Redis unreachable during the liveness check
        """
        redis_config = config_provider.get_redis_config()
        logger.info(
            "Building Redis cache at %s (%s)",
            redis_config.address,
            "TLS" if redis_config.use_tls else "plaintext",
        )
        return await RedisCache.connect(redis_config, prefix)

    @staticmethod
    async def build_session_manager(
        config_provider: ConfigProvider, prefix: Optional[str] = None
    ) -> SessionManager:
        """Build a session manager over a freshly connected Redis cache."""
        cache = await CacheFactory.build(config_provider, prefix)
        return SessionManager(cache, config_provider.get_session_config())

    @staticmethod
    def build_for_testing(
        prefix: str = "", session_config: Optional[SessionConfig] = None
    ) -> SessionManager:
        """
        Build a session manager over an in-memory cache.

        Args:
            prefix: Key namespace for the memory cache
            session_config: Optional session configuration

        Returns:
            SessionManager whose cache is a MemoryCache
        """
        return SessionManager(MemoryCache(prefix), session_config)
