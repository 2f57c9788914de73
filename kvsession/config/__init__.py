"""Configuration providers."""

from .provider import (
    DEFAULT_REDIS_DB,
    DEFAULT_REDIS_PORT,
    ConfigProvider,
    EnvConfigProvider,
    RedisConfig,
    SessionConfig,
    requires_tls,
)

__all__ = [
    "ConfigProvider",
    "EnvConfigProvider",
    "RedisConfig",
    "SessionConfig",
    "requires_tls",
    "DEFAULT_REDIS_DB",
    "DEFAULT_REDIS_PORT",
]
