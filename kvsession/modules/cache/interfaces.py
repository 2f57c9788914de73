"""Cache interfaces following Black Box Design principles."""
from typing import Any, List, Optional, Protocol, runtime_checkable

from .serialization import TTL


@runtime_checkable
class Cache(Protocol):
    """
    Protocol for key-value caches with per-entry expiration.

    Implementations namespace every key with their own prefix, serialize
    values on write and decode them on read. All operations accept an
    optional timeout in seconds and raise CacheTimeoutError when it elapses.
    """

    async def get(self, key: str, model: Any = None, *, timeout: Optional[float] = None) -> Any:
        """
        Load the value stored at key.

        Args:
            key: Logical key
            model: Shape to decode into (None = plain JSON values)

        Raises:
            NotFoundError: No live entry at key
            SerializationError: Stored value does not decode into model
            BackendError: Connectivity or protocol failure
        """
        ...

    async def set(self, key: str, value: Any, ttl: TTL = None, *, timeout: Optional[float] = None) -> None:
        """
        Store value at key, overwriting any existing entry.

        A ttl of None or <= 0 means the entry never expires.
        """
        ...

    async def has(self, key: str, *, timeout: Optional[float] = None) -> bool:
        """Check whether a live entry exists at key."""
        ...

    async def keys(self, pattern: str = "*", *, timeout: Optional[float] = None) -> List[str]:
        """List live logical keys matching a glob-style pattern."""
        ...

    async def delete(self, *keys: str, timeout: Optional[float] = None) -> int:
        """Remove entries, returning how many existed."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...
