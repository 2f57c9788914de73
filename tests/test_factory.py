from datetime import timedelta
from unittest.mock import patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from kvsession.config import EnvConfigProvider, SessionConfig
from kvsession.factory import CacheFactory
from kvsession.modules.cache import ConfigurationError, MemoryCache, RedisCache
from kvsession.modules.session import SessionManager


@pytest.mark.asyncio
async def test_build_connects_from_provider(mock_redis):
    provider = EnvConfigProvider({"REDIS_ADDR": "cache.internal:6380", "CACHE_PREFIX": "prod:"})

    with patch("kvsession.modules.cache.redis_cache.redis.Redis", return_value=mock_redis) as ctor:
        cache = await CacheFactory.build(provider)

    assert isinstance(cache, RedisCache)
    assert cache.prefix == "prod:"
    assert ctor.call_args.kwargs["host"] == "cache.internal"
    assert ctor.call_args.kwargs["port"] == 6380
    mock_redis.ping.assert_awaited_once()


@pytest.mark.asyncio
async def test_build_prefix_override(mock_redis):
    provider = EnvConfigProvider({"CACHE_PREFIX": "prod:"})

    with patch("kvsession.modules.cache.redis_cache.redis.Redis", return_value=mock_redis):
        cache = await CacheFactory.build(provider, prefix="tenant-a:")

    assert cache.prefix == "tenant-a:"


@pytest.mark.asyncio
async def test_build_unreachable_backend_is_fatal(mock_redis):
    mock_redis.ping.side_effect = RedisConnectionError("connection refused")

    with patch("kvsession.modules.cache.redis_cache.redis.Redis", return_value=mock_redis):
        with pytest.raises(ConfigurationError):
            await CacheFactory.build(EnvConfigProvider({}))


@pytest.mark.asyncio
async def test_build_session_manager(mock_redis):
    provider = EnvConfigProvider({"REDIS_USER": "svc", "REDIS_PASS": "s3cret", "SESSION_TTL": "60"})

    with patch("kvsession.modules.cache.redis_cache.redis.Redis", return_value=mock_redis) as ctor:
        manager = await CacheFactory.build_session_manager(provider)

    assert isinstance(manager, SessionManager)
    assert isinstance(manager.cache, RedisCache)
    assert manager.config.ttl == timedelta(seconds=60)
    assert ctor.call_args.kwargs["ssl"] is True


@pytest.mark.asyncio
async def test_build_for_testing_uses_memory_cache(make_request):
    manager = CacheFactory.build_for_testing(prefix="t:", session_config=SessionConfig(name="sid"))

    assert isinstance(manager.cache, MemoryCache)

    cookie = await manager.create({"user": "alice"})

    assert cookie.name == "sid"
    assert await manager.get(make_request({"sid": cookie.value})) == {"user": "alice"}
