import logging
import uuid
from typing import Optional

from files_manager.adapters.cache import BaseCache

logger = logging.getLogger(__name__)

SESSION_TTL_SECONDS = 24 * 60 * 60


def session_key(token: str) -> str:
    return f"auth_{token}"


class SessionStore:
    """Token -> user bindings kept entirely in the shared cache.

    No state lives in this object, so one instance can serve any number of
    concurrent requests and workers. Expiry is enforced by the cache.
    """

    def __init__(self, cache: BaseCache, ttl_seconds: int = SESSION_TTL_SECONDS):
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    async def issue(self, user_id: str) -> str:
        # uuid4 draws 122 random bits from os.urandom; collisions are not checked
        token = str(uuid.uuid4())
        await self.cache.set(session_key(token), str(user_id), self.ttl_seconds)
        logger.info("Issued session for user %s", user_id)
        return token

    async def resolve(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        return await self.cache.get(session_key(token))

    async def revoke(self, token: Optional[str]) -> None:
        if not token:
            return
        await self.cache.delete(session_key(token))
