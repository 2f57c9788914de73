"""
Shared pytest fixtures for kvsession tests.

This module provides common fixtures including:
- Redis mocks for cache tests (call-recording and data-backed)
- A controllable clock for TTL tests
- Starlette request builders carrying cookies
"""

import os
import re
import sys
from typing import Dict, Optional
from unittest.mock import AsyncMock

import pytest
from fastapi import Request

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

def redis_glob_to_regex(pattern: str) -> "re.Pattern[str]":
    """Translate a Redis KEYS pattern, honoring backslash escapes."""
    out = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\" and i + 1 < len(pattern):
            i += 1
            out.append(re.escape(pattern[i]))
        elif char == "*":
            out.append(".*")
        elif char == "?":
            out.append(".")
        elif char == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                out.append(re.escape(char))
            else:
                body = pattern[i + 1:end]
                negate = body.startswith("^")
                if negate:
                    body = body[1:]
                out.append("[" + ("^" if negate else "") + body.replace("\\", "\\\\") + "]")
                i = end
        else:
            out.append(re.escape(char))
        i += 1
    return re.compile("".join(out), re.DOTALL)


@pytest.fixture
def mock_redis():
    """Create a mock Redis client for async operations."""
    redis = AsyncMock()

    redis.ping = AsyncMock(return_value=True)
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.exists = AsyncMock(return_value=0)
    redis.keys = AsyncMock(return_value=[])
    redis.delete = AsyncMock(return_value=0)
    redis.aclose = AsyncMock()

    return redis


@pytest.fixture
def mock_redis_with_data():
    """
    Redis mock with in-memory data storage for more realistic tests.

    Records the PX expiry of every SET in `_ttls` so tests can assert on
    what reached Redis without waiting for real expiry.
    """
    storage: Dict[str, str] = {}
    ttls: Dict[str, Optional[int]] = {}

    redis = AsyncMock()

    async def mock_set(key, value, px=None, **kwargs):
        storage[key] = value
        ttls[key] = px
        return True

    async def mock_get(key):
        return storage.get(key)

    async def mock_delete(*keys):
        count = 0
        for key in keys:
            if key in storage:
                del storage[key]
                ttls.pop(key, None)
                count += 1
        return count

    async def mock_exists(*keys):
        return sum(1 for k in keys if k in storage)

    async def mock_keys(pattern):
        regex = redis_glob_to_regex(pattern)
        return [k for k in storage.keys() if regex.fullmatch(k)]

    redis.set = mock_set
    redis.get = mock_get
    redis.delete = mock_delete
    redis.exists = mock_exists
    redis.keys = mock_keys
    redis.ping = AsyncMock(return_value=True)
    redis.aclose = AsyncMock()
    redis._storage = storage  # Expose for test assertions
    redis._ttls = ttls

    return redis


# =============================================================================
# Clock and Request Helpers
# =============================================================================

class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def build_request(cookies: Optional[Dict[str, str]] = None) -> Request:
    """Build a Starlette request carrying the given cookies."""
    headers = []
    if cookies:
        header = "; ".join(f"{name}={value}" for name, value in cookies.items())
        headers.append((b"cookie", header.encode("latin-1")))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


@pytest.fixture
def make_request():
    """Factory fixture: make_request({"session": "abc"}) -> Request."""
    return build_request


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring a real Redis server"
    )
