"""In-process Cache backend."""

import fnmatch
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import NotFoundError
from .serialization import TTL, decode, encode, ttl_seconds

logger = logging.getLogger(__name__)

# physical key -> (encoded value, monotonic expiry or None)
Store = Dict[str, Tuple[str, Optional[float]]]


class MemoryCache:
    """
    Dict-backed cache for tests and single-process deployments.

    Values go through the same JSON boundary as the Redis backend, so a
    payload that round-trips here round-trips there. Several instances can
    share one store dict, each isolated by its prefix.
    """

    def __init__(
        self,
        prefix: str = "",
        store: Optional[Store] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.prefix = prefix
        self._store: Store = store if store is not None else {}
        self._clock = clock

    def _live(self, physical_key: str) -> Optional[str]:
        entry = self._store.get(physical_key)
        if entry is None:
            return None
        raw, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            return None
        return raw

    async def get(self, key: str, model: Any = None, *, timeout: Optional[float] = None) -> Any:
        raw = self._live(self.prefix + key)
        if raw is None:
            raise NotFoundError(key)
        return decode(raw, model, key=key)

    async def set(self, key: str, value: Any, ttl: TTL = None, *, timeout: Optional[float] = None) -> None:
        raw = encode(value, key=key)
        seconds = ttl_seconds(ttl)
        expires_at = None if seconds is None else self._clock() + seconds
        self._store[self.prefix + key] = (raw, expires_at)

    async def has(self, key: str, *, timeout: Optional[float] = None) -> bool:
        return self._live(self.prefix + key) is not None

    async def keys(self, pattern: str = "*", *, timeout: Optional[float] = None) -> List[str]:
        matched = []
        for physical_key in list(self._store):
            if not physical_key.startswith(self.prefix):
                continue
            key = physical_key[len(self.prefix):]
            if fnmatch.fnmatchcase(key, pattern) and self._live(physical_key) is not None:
                matched.append(key)
        return matched

    async def delete(self, *keys: str, timeout: Optional[float] = None) -> int:
        removed = 0
        for key in keys:
            if self._live(self.prefix + key) is not None:
                removed += 1
            self._store.pop(self.prefix + key, None)
        return removed

    async def close(self) -> None:
        logger.debug("Memory cache closed (prefix=%r)", self.prefix)
