import asyncio
import logging
from typing import Awaitable, Callable

from files_manager.errors import DependencyUnavailable

logger = logging.getLogger(__name__)


async def wait_for_dependency(
    name: str,
    check: Callable[[], Awaitable[bool]],
    attempts: int = 10,
    interval: float = 1.0,
) -> None:
    """Poll `check` until it reports ready.

    Raises:
        DependencyUnavailable: `check` stayed false (or raised) for every attempt.
    """
    for attempt in range(1, attempts + 1):
        try:
            if await check():
                if attempt > 1:
                    logger.info(f"{name} ready after {attempt} attempts")
                return
        except Exception as e:
            logger.warning(f"{name} readiness check raised: {e}")

        if attempt < attempts:
            logger.debug(f"{name} not ready (attempt {attempt}/{attempts}), retrying in {interval}s")
            await asyncio.sleep(interval)

    logger.error(f"{name} not ready after {attempts} attempts")
    raise DependencyUnavailable(name, attempts)
