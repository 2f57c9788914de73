"""Cache error taxonomy and backend exception translation."""

import asyncio
from typing import Any, Awaitable, Optional

from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError


class CacheError(Exception):
    """Base exception for cache operations."""

    def __init__(self, message: str, operation: Optional[str] = None, key: Optional[str] = None) -> None:
        """
        Initialize error.

        Args:
            message: Error message
            operation: Cache operation that failed (get, set, has, keys, ...)
            key: Logical key the operation targeted
        """
        self.operation = operation
        self.key = key
        context = " ".join(
            part for part in (operation, repr(key) if key is not None else None) if part
        )
        super().__init__(f"[{context}] {message}" if context else message)


class NotFoundError(CacheError):
    """Raised when a key has no live entry."""

    def __init__(self, key: str, operation: str = "get") -> None:
        super().__init__("key not found", operation=operation, key=key)


class SerializationError(CacheError):
    """Raised when a value cannot be encoded or decoded."""


class BackendError(CacheError):
    """Raised on connectivity or protocol failures talking to the store."""


class CacheTimeoutError(BackendError):
    """Raised when an operation does not finish within its deadline."""


class ConfigurationError(CacheError):
    """Raised when a backend cannot be constructed from its configuration."""


async def guarded(
    awaitable: Awaitable[Any],
    operation: str,
    key: Optional[str] = None,
    timeout: Optional[float] = None,
) -> Any:
    """
    Await a backend call, enforcing the deadline and translating failures.

    Args:
        awaitable: Pending backend call
        operation: Operation name for error context
        key: Logical key for error context
        timeout: Seconds to wait before giving up (None = no deadline)

    Returns:
        Result of the backend call

    Raises:
        CacheTimeoutError: The deadline elapsed
        BackendError: The backend failed
    """
    try:
        if timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except (asyncio.TimeoutError, RedisTimeoutError) as e:
        raise CacheTimeoutError(
            f"timed out after {timeout}s" if timeout is not None else "backend timed out",
            operation=operation,
            key=key,
        ) from e
    except (RedisError, OSError) as e:
        raise BackendError(str(e) or type(e).__name__, operation=operation, key=key) from e
