"""JSON serialization boundary shared by all cache backends."""

import math
from datetime import timedelta
from functools import lru_cache
from typing import Any, Optional, Union

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from .errors import SerializationError

TTL = Union[timedelta, int, float, None]


@lru_cache(maxsize=128)
def _cached_adapter(model: Any) -> TypeAdapter:
    return TypeAdapter(model)


def _adapter(model: Any) -> TypeAdapter:
    try:
        hash(model)
    except TypeError:
        # Unhashable forms (e.g. Annotated with list metadata) bypass the cache
        return TypeAdapter(model)
    return _cached_adapter(model)


def encode(value: Any, key: Optional[str] = None) -> str:
    """
    Serialize a value to JSON text.

    Handles primitives, nested dicts/lists, pydantic models and dataclasses.

    Raises:
        SerializationError: The value is not JSON-serializable
    """
    try:
        return to_json(value).decode("utf-8")
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise SerializationError(f"cannot encode value: {e}", operation="set", key=key) from e


def decode(raw: Union[str, bytes], model: Any = None, key: Optional[str] = None) -> Any:
    """
    Deserialize JSON text into the requested shape.

    Args:
        raw: Stored JSON text
        model: Target type (pydantic model, dataclass, typing form); None
            returns plain JSON values
        key: Logical key for error context

    Raises:
        SerializationError: The stored bytes do not decode into `model`
    """
    try:
        return _adapter(Any if model is None else model).validate_json(raw)
    except ValidationError as e:
        raise SerializationError(f"cannot decode value: {e}", operation="get", key=key) from e


def ttl_seconds(ttl: TTL) -> Optional[float]:
    """
    Normalize a TTL to seconds.

    Returns:
        Positive seconds, or None when the entry must not expire (ttl <= 0)
    """
    if ttl is None:
        return None
    seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
    if seconds <= 0:
        return None
    return seconds


def ttl_milliseconds(ttl: TTL) -> Optional[int]:
    """TTL in whole milliseconds, rounded up so sub-second values never collapse to zero."""
    seconds = ttl_seconds(ttl)
    if seconds is None:
        return None
    return max(1, math.ceil(round(seconds * 1000, 3)))
