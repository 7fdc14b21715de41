"""
File service for document store operations.
Handles file, folder and image metadata; every read that a caller can
trigger is scoped to the owning user.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

from database.local import DocumentStore

logger = logging.getLogger(__name__)

FILES = 'files'

ROOT_PARENT_ID = 0

ParentId = Union[int, str]


def normalize_parent_id(parent_id: Any) -> ParentId:
    """Map the spellings of "root" (None, 0, "0", "") to 0; other ids to str."""
    if parent_id in (None, "", 0, "0"):
        return ROOT_PARENT_ID
    return str(parent_id)


def to_public_file(document: Dict[str, Any]) -> Dict[str, Any]:
    """Public view of a file document: `_id` becomes `id`, localPath stays internal."""
    return {
        "id": document["_id"],
        "userId": document["userId"],
        "name": document["name"],
        "type": document["type"],
        "isPublic": document["isPublic"],
        "parentId": document["parentId"],
    }


class FileService:
    """Service for managing file documents"""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_file(self, file_id: str) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(self.store.find_one, FILES, {"_id": file_id})

    async def get_owned_file(self, file_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(
            self.store.find_one, FILES, {"_id": file_id, "userId": user_id}
        )

    async def list_children(
        self, user_id: str, parent_id: Any = ROOT_PARENT_ID, page: int = 0, page_size: int = 20
    ) -> List[Dict[str, Any]]:
        query = {"userId": user_id, "parentId": normalize_parent_id(parent_id)}
        documents = await asyncio.to_thread(
            self.store.find_many, FILES, query, max(page, 0) * page_size, page_size
        )
        return [to_public_file(doc) for doc in documents]

    async def insert_file(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a file document and return it with its new `_id`."""
        file_id = await asyncio.to_thread(self.store.insert_one, FILES, document)
        return {**document, "_id": file_id}

    async def set_public(self, file_id: str, user_id: str, is_public: bool) -> Optional[Dict[str, Any]]:
        """Toggle visibility of an owned file; None when the caller does not own it."""
        query = {"_id": file_id, "userId": user_id}
        updated = await asyncio.to_thread(self.store.update_one, FILES, query, {"isPublic": is_public})
        if not updated:
            return None
        logger.info(f"File {file_id} isPublic={is_public}")
        return await self.get_owned_file(file_id, user_id)

    async def count_files(self) -> int:
        return await asyncio.to_thread(self.store.count_documents, FILES)
