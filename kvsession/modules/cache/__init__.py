"""
Cache Module - Black Box Interface

Purpose: Key-value storage with per-entry expiration
Interface: get(), set(), has(), keys(), delete(), close()
Hidden: Storage engine, key namespacing, JSON serialization

Backends are interchangeable; the session module only sees Cache.
"""

from .errors import (
    BackendError,
    CacheError,
    CacheTimeoutError,
    ConfigurationError,
    NotFoundError,
    SerializationError,
)
from .interfaces import Cache
from .memory import MemoryCache
from .redis_cache import RedisCache

__all__ = [
    "Cache",
    "MemoryCache",
    "RedisCache",
    "CacheError",
    "NotFoundError",
    "SerializationError",
    "BackendError",
    "CacheTimeoutError",
    "ConfigurationError",
]
