"""FastAPI dependencies shared by the routers."""

from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi import Header, Path, Request

from files_manager.core import Core
from files_manager.errors import Unauthorized, ValidationError


def get_core(request: Request) -> Core:
    return request.app.state.core


async def get_optional_user(
    request: Request, x_token: Optional[str] = Header(default=None)
) -> Optional[Dict[str, Any]]:
    """User behind the `X-Token` header, or None when absent or expired."""
    core = get_core(request)
    user_id = await core.sessions.resolve(x_token)
    if user_id is None:
        return None
    return await core.users.get_user(user_id)


async def get_current_user(
    request: Request, x_token: Optional[str] = Header(default=None)
) -> Dict[str, Any]:
    user = await get_optional_user(request, x_token)
    if user is None:
        raise Unauthorized()
    return user


def valid_file_id(file_id: str = Path(..., description="Id of the file")) -> str:
    """Reject ids that cannot name a stored file before touching the store."""
    if not ObjectId.is_valid(file_id):
        raise ValidationError("Invalid ID format")
    return file_id
