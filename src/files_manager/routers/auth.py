import base64
import binascii
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Depends, Header, Response, status

from files_manager.adapters.queue import Lane
from files_manager.core import Core
from files_manager.dependencies import get_core, get_current_user
from files_manager.errors import Unauthorized
from files_manager.schemas import TokenResponse
from files_manager.tasks.payloads import SignInPayload, SignOutPayload

router = APIRouter()


def parse_basic_auth(authorization: Optional[str]) -> Tuple[str, str]:
    """Split a `Basic <base64(email:password)>` header.

    Raises:
        Unauthorized: Header missing or malformed
    """
    if not authorization:
        raise Unauthorized()
    scheme, _, encoded = authorization.partition(" ")
    if scheme.lower() != "basic" or not encoded:
        raise Unauthorized()
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise Unauthorized()
    email, separator, password = decoded.partition(":")
    if not separator:
        raise Unauthorized()
    return email, password


@router.get("/connect", response_model=TokenResponse)
async def connect(
    authorization: Optional[str] = Header(default=None),
    core: Core = Depends(get_core),
):
    """Exchange Basic credentials for a session token."""
    email, password = parse_basic_auth(authorization)
    payload = SignInPayload(email=email, password=password)
    user = await core.queue.submit(Lane.USER, payload.kind, payload)
    if user is None:
        raise Unauthorized()
    token = await core.sessions.issue(user["id"])
    return {"token": token}


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect(
    x_token: Optional[str] = Header(default=None),
    user: Dict[str, Any] = Depends(get_current_user),
    core: Core = Depends(get_core),
):
    """Revoke the caller's session token."""
    payload = SignOutPayload(token=x_token)
    await core.queue.submit(Lane.USER, payload.kind, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
