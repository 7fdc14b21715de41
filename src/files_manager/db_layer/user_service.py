"""
User service for document store operations.
Handles user documents keyed by a unique email address.
"""

import asyncio
import hashlib
import logging
from typing import Any, Dict, Optional

from database.exceptions import DuplicateDocumentError
from database.local import DocumentStore
from files_manager.errors import AlreadyExists

logger = logging.getLogger(__name__)

USERS = 'users'


def hash_password(password: str) -> str:
    """SHA-1 hex digest; the only form of a password that is stored or compared."""
    return hashlib.sha1(password.encode('utf-8')).hexdigest()


def to_public_user(document: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": document["_id"], "email": document["email"]}


class UserService:
    """Service for managing user documents"""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        document = await asyncio.to_thread(self.store.find_one, USERS, {"_id": user_id})
        return to_public_user(document) if document else None

    async def email_exists(self, email: str) -> bool:
        return await asyncio.to_thread(self.store.find_one, USERS, {"email": email}) is not None

    async def find_by_credentials(self, email: str, password_hash: str) -> Optional[Dict[str, Any]]:
        document = await asyncio.to_thread(
            self.store.find_one, USERS, {"email": email, "password": password_hash}
        )
        return to_public_user(document) if document else None

    async def create_user(self, email: str, password_hash: str) -> str:
        """Insert a user and return its id.

        The unique index on email is the last line of defence for two
        concurrent sign-ups that both passed the existence check.
        """
        try:
            return await asyncio.to_thread(
                self.store.insert_one, USERS, {"email": email, "password": password_hash}
            )
        except DuplicateDocumentError:
            logger.warning("Concurrent sign-up lost the race for an existing email")
            raise AlreadyExists()

    async def count_users(self) -> int:
        return await asyncio.to_thread(self.store.count_documents, USERS)
