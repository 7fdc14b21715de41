from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from files_manager.adapters.cache import CacheFactory, LocalCache, RedisCache
from files_manager.settings import Settings


async def test_local_cache_expiry(cache, clock):
    await cache.set("auth_t", "u1", 10)

    clock.advance(9.5)
    assert await cache.get("auth_t") == "u1"

    clock.advance(0.5)
    assert await cache.get("auth_t") is None


async def test_local_cache_delete(cache):
    await cache.set("k", "v", 10)
    await cache.delete("k")
    await cache.delete("k")

    assert await cache.get("k") is None


async def test_redis_cache_passes_ttl_through():
    client = AsyncMock()
    client.get.return_value = "u1"
    redis_cache = RedisCache(client=client)

    await redis_cache.set("auth_t", "u1", 86400)
    assert await redis_cache.get("auth_t") == "u1"
    await redis_cache.delete("auth_t")

    client.set.assert_awaited_once_with("auth_t", "u1", ex=86400)
    client.get.assert_awaited_once_with("auth_t")
    client.delete.assert_awaited_once_with("auth_t")


async def test_redis_cache_not_alive_when_ping_fails():
    client = AsyncMock()
    client.ping.side_effect = RedisConnectionError("refused")

    assert await RedisCache(client=client).is_alive() is False


def test_factory_picks_cache_by_deployment_mode():
    assert isinstance(CacheFactory.get_cache(Settings(deployment_mode="local-dev")), LocalCache)
    assert isinstance(CacheFactory.get_cache(Settings(deployment_mode="prod")), RedisCache)


def test_unknown_deployment_mode_is_rejected():
    with pytest.raises(ValueError):
        Settings(deployment_mode="staging")
