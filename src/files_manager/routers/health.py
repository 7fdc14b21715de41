from fastapi import APIRouter, Depends

from files_manager.core import Core
from files_manager.dependencies import get_core

router = APIRouter()


@router.get("/status")
async def get_status(core: Core = Depends(get_core)):
    """
    Report whether the session cache and the document store answer.

    Waits for both within the configured retry budget; exhausting it
    renders a 500 naming the dependency that stayed down.
    """
    await core.wait_until_ready()
    return {
        "redis": await core.cache.is_alive(),
        "db": await core.store_is_alive(),
    }


@router.get("/stats")
async def get_stats(core: Core = Depends(get_core)):
    """Number of users and files in the store."""
    await core.wait_until_ready()
    return {
        "users": await core.users.count_users(),
        "files": await core.files.count_files(),
    }
