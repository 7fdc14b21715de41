from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from files_manager.adapters.queue import Lane
from files_manager.core import Core
from files_manager.dependencies import get_core, get_current_user
from files_manager.schemas import CreateUserRequest, UserResponse
from files_manager.tasks.payloads import CreateUserPayload

router = APIRouter()


@router.post("/users", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
async def create_user(body: CreateUserRequest, core: Core = Depends(get_core)):
    """Register a new account."""
    payload = CreateUserPayload(email=body.email, password=body.password)
    user_id = await core.queue.submit(Lane.USER, payload.kind, payload)
    return {"id": user_id, "email": body.email}


@router.get("/users/me", response_model=UserResponse)
async def get_me(user: Dict[str, Any] = Depends(get_current_user)):
    return user
