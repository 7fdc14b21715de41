"""
File lane processors: uploads and thumbnail derivation.
"""

import asyncio
import base64
import binascii
import logging
from typing import Any, Dict, List

from database.schemas import MAX_NAME_LENGTH, FileType
from files_manager.adapters.queue import TaskDefinition
from files_manager.adapters.storage import THUMBNAIL_WIDTHS, BlobStorage
from files_manager.db_layer import FileService, to_public_file
from files_manager.db_layer.file_service import ROOT_PARENT_ID, normalize_parent_id
from files_manager.errors import InternalError, InvalidParent, NotFound, ValidationError
from files_manager.tasks.payloads import (
    GENERATE_THUMBNAILS,
    UPLOAD_FILE,
    GenerateThumbnailsPayload,
    UploadFilePayload,
)
from files_manager.utils.decorators import log_task_execution

logger = logging.getLogger(__name__)

FILE_TYPES = tuple(t.value for t in FileType)


class FileTaskProcessor:
    def __init__(self, files: FileService, storage: BlobStorage):
        self.files = files
        self.storage = storage

    @log_task_execution(UPLOAD_FILE)
    async def upload_file(self, payload: UploadFilePayload) -> Dict[str, Any]:
        """Persist a folder record, or a file's bytes followed by its record."""
        if not payload.name:
            raise ValidationError("Missing name")
        if len(payload.name) > MAX_NAME_LENGTH:
            raise ValidationError("Invalid name")
        if payload.type not in FILE_TYPES:
            raise ValidationError("Invalid type")
        is_folder = payload.type == FileType.FOLDER.value
        if not is_folder and not payload.data:
            raise ValidationError("Missing data")

        parent_id = normalize_parent_id(payload.parent_id)
        if parent_id != ROOT_PARENT_ID:
            # Parents are looked up among the uploader's own files only
            parent = await self.files.get_owned_file(parent_id, payload.owner_user_id)
            if parent is None:
                raise InvalidParent("Parent not found")
            if parent["type"] != FileType.FOLDER.value:
                raise InvalidParent("Parent is not a folder")

        document = {
            "userId": payload.owner_user_id,
            "name": payload.name,
            "type": payload.type,
            "isPublic": payload.is_public,
            "parentId": parent_id,
        }

        if not is_folder:
            try:
                content = base64.b64decode(payload.data, validate=True)
            except (binascii.Error, ValueError):
                raise ValidationError("Invalid data")
            if not content:
                raise ValidationError("Invalid data")
            local_path = await asyncio.to_thread(self.storage.write, content, payload.name)
            document["localPath"] = str(local_path)

        try:
            stored = await self.files.insert_file(document)
        except Exception:
            # No record will point at the blob
            if "localPath" in document:
                await asyncio.to_thread(self.storage.delete, document["localPath"])
            raise
        return to_public_file(stored)

    @log_task_execution(GENERATE_THUMBNAILS)
    async def generate_thumbnails(self, payload: GenerateThumbnailsPayload) -> List[int]:
        """Write every rendition next to the original.

        Renditions are derived concurrently. If one fails the task fails,
        but siblings already running may still write their file.
        """
        document = await self.files.get_owned_file(payload.file_id, payload.owner_user_id)
        local_path = document.get("localPath") if document else None
        if not local_path or not await asyncio.to_thread(self.storage.exists, local_path):
            raise NotFound()

        try:
            async with asyncio.TaskGroup() as group:
                for width in THUMBNAIL_WIDTHS:
                    group.create_task(asyncio.to_thread(self.storage.write_thumbnail, local_path, width))
        except ExceptionGroup as eg:
            raise InternalError(f"Thumbnail generation failed for {payload.file_id}") from eg.exceptions[0]

        logger.info(f"Derived {len(THUMBNAIL_WIDTHS)} renditions for {payload.file_id}")
        return list(THUMBNAIL_WIDTHS)

    def definitions(self) -> Dict[str, TaskDefinition]:
        return {
            UPLOAD_FILE: TaskDefinition(UploadFilePayload, self.upload_file),
            GENERATE_THUMBNAILS: TaskDefinition(GenerateThumbnailsPayload, self.generate_thumbnails),
        }
