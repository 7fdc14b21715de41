import logging
import time
from typing import Callable, Dict, Optional, Tuple

import redis.asyncio as redis
from redis.exceptions import RedisError

from files_manager.settings import Settings

logger = logging.getLogger(__name__)


class BaseCache:
    """Key-value cache with per-key expiry"""
    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set(self, key: str, value: str, ttl: int) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def is_alive(self) -> bool:
        raise NotImplementedError

    async def close(self) -> None:
        pass


class LocalCache(BaseCache):
    """In-process cache for local development and tests"""
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        logger.info("LocalCache initialized")

    async def get(self, key):
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def set(self, key, value, ttl):
        self._entries[key] = (value, self._clock() + ttl)

    async def delete(self, key):
        self._entries.pop(key, None)

    async def is_alive(self):
        return True


class RedisCache(BaseCache):
    """Handles the Redis-backed cache"""
    def __init__(self, host: str = "127.0.0.1", port: int = 6379, client: Optional[redis.Redis] = None):
        self.client = client or redis.Redis(host=host, port=port, decode_responses=True)
        logger.info(f"RedisCache initialized for {host}:{port}")

    async def get(self, key):
        return await self.client.get(key)

    async def set(self, key, value, ttl):
        await self.client.set(key, value, ex=ttl)

    async def delete(self, key):
        await self.client.delete(key)

    async def is_alive(self):
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            logger.warning(f"Redis not reachable: {e}")
            return False

    async def close(self):
        await self.client.aclose()


class CacheFactory:
    """Factory to initialize the correct cache based on deployment mode"""

    @staticmethod
    def get_cache(settings: Settings) -> BaseCache:
        cache_builders = {
            "local-dev": lambda: LocalCache(),
            "prod": lambda: RedisCache(host=settings.redis_host, port=settings.redis_port),
        }

        deployment_mode = settings.deployment_mode
        if deployment_mode not in cache_builders:
            raise ValueError(
                f"Invalid deployment_mode: {deployment_mode}. "
                f"Choose from {list(cache_builders.keys())}"
            )

        logger.info(f"Creating cache for mode: {deployment_mode}")
        return cache_builders[deployment_mode]()
