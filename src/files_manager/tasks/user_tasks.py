"""
User lane processors: account creation, sign-in and sign-out.
"""

import logging
from typing import Any, Dict, Optional

from database.schemas import MAX_EMAIL_LENGTH
from files_manager.adapters.queue import TaskDefinition
from files_manager.db_layer import UserService, hash_password
from files_manager.errors import AlreadyExists, ValidationError
from files_manager.sessions import SessionStore
from files_manager.tasks.payloads import (
    CREATE_USER,
    SIGN_IN_USER,
    SIGN_OUT_USER,
    CreateUserPayload,
    SignInPayload,
    SignOutPayload,
)
from files_manager.utils.decorators import log_task_execution

logger = logging.getLogger(__name__)


class UserTaskProcessor:
    def __init__(self, users: UserService, sessions: SessionStore):
        self.users = users
        self.sessions = sessions

    @log_task_execution(CREATE_USER)
    async def create_user(self, payload: CreateUserPayload) -> str:
        """Create a user and return the new id.

        The existence check and the insert are not atomic: two concurrent
        sign-ups for one email can both pass the check. The store's unique
        index then rejects the second insert, which surfaces as AlreadyExists.
        """
        if not payload.email:
            raise ValidationError("Missing email")
        if len(payload.email) > MAX_EMAIL_LENGTH:
            raise ValidationError("Invalid email")
        if not payload.password:
            raise ValidationError("Missing password")

        if await self.users.email_exists(payload.email):
            raise AlreadyExists()

        user_id = await self.users.create_user(payload.email, hash_password(payload.password))
        logger.info(f"Created user {user_id}")
        return user_id

    @log_task_execution(SIGN_IN_USER)
    async def sign_in(self, payload: SignInPayload) -> Optional[Dict[str, Any]]:
        """Return the matching user, or None for unknown credentials."""
        if not payload.email or not payload.password:
            return None
        return await self.users.find_by_credentials(payload.email, hash_password(payload.password))

    @log_task_execution(SIGN_OUT_USER)
    async def sign_out(self, payload: SignOutPayload) -> None:
        await self.sessions.revoke(payload.token)

    def definitions(self) -> Dict[str, TaskDefinition]:
        return {
            CREATE_USER: TaskDefinition(CreateUserPayload, self.create_user),
            SIGN_IN_USER: TaskDefinition(SignInPayload, self.sign_in),
            SIGN_OUT_USER: TaskDefinition(SignOutPayload, self.sign_out),
        }
