import logging
import mimetypes
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, responses, status

from database.schemas import FileType
from files_manager.access import resolve_read_path
from files_manager.adapters.queue import Lane
from files_manager.core import Core
from files_manager.db_layer import to_public_file
from files_manager.dependencies import get_core, get_current_user, get_optional_user, valid_file_id
from files_manager.errors import NotFound
from files_manager.schemas import CreateFileRequest, FileResponse
from files_manager.tasks.payloads import GenerateThumbnailsPayload, UploadFilePayload

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/files", status_code=status.HTTP_201_CREATED, response_model=FileResponse)
async def upload_file(
    body: CreateFileRequest,
    user: Dict[str, Any] = Depends(get_current_user),
    core: Core = Depends(get_core),
):
    """
    Create a folder, or store a file or image.

    Images additionally get their thumbnails derived in the background;
    the response does not wait for them.
    """
    payload = UploadFilePayload(
        owner_user_id=user["id"],
        name=body.name,
        type=body.type,
        parent_id=body.parent_id,
        is_public=body.is_public,
        data=body.data,
    )
    file = await core.queue.submit(Lane.FILE, payload.kind, payload)

    if file["type"] == FileType.IMAGE.value:
        thumbnails = GenerateThumbnailsPayload(owner_user_id=user["id"], file_id=file["id"])
        handle = core.queue.submit(Lane.FILE, thumbnails.kind, thumbnails)
        logger.info(f"Queued thumbnails for {file['id']} as task {handle.id}")

    return file


@router.get("/files/{file_id}", response_model=FileResponse)
async def get_file(
    user: Dict[str, Any] = Depends(get_current_user),
    file_id: str = Depends(valid_file_id),
    core: Core = Depends(get_core),
):
    document = await core.files.get_owned_file(file_id, user["id"])
    if document is None:
        raise NotFound()
    return to_public_file(document)


@router.get("/files", response_model=List[FileResponse])
async def list_files(
    parent_id: str = Query("0", alias="parentId", description="Folder to list; 0 is the root"),
    page: int = Query(0, ge=0, description="Zero-based page index"),
    user: Dict[str, Any] = Depends(get_current_user),
    core: Core = Depends(get_core),
):
    """List the caller's files under one folder, a page at a time."""
    return await core.files.list_children(
        user["id"], parent_id, page=page, page_size=core.settings.page_size
    )


@router.put("/files/{file_id}/publish", response_model=FileResponse)
async def publish_file(
    user: Dict[str, Any] = Depends(get_current_user),
    file_id: str = Depends(valid_file_id),
    core: Core = Depends(get_core),
):
    return await _set_public(core, file_id, user["id"], True)


@router.put("/files/{file_id}/unpublish", response_model=FileResponse)
async def unpublish_file(
    user: Dict[str, Any] = Depends(get_current_user),
    file_id: str = Depends(valid_file_id),
    core: Core = Depends(get_core),
):
    return await _set_public(core, file_id, user["id"], False)


@router.get("/files/{file_id}/data")
async def get_file_data(
    file_id: str,
    size: Optional[int] = Query(None, description="Thumbnail width: 500, 250 or 100"),
    user: Optional[Dict[str, Any]] = Depends(get_optional_user),
    core: Core = Depends(get_core),
):
    """
    Return a file's content.

    Public files are readable by anyone; private ones only with the
    owner's token. Everyone else gets a 404.
    """
    document = await core.files.get_file(file_id)
    if document is None:
        raise NotFound()
    path = resolve_read_path(document, user["id"] if user else None, size)
    media_type, _ = mimetypes.guess_type(document["name"])
    return responses.FileResponse(path, media_type=media_type or "application/octet-stream")


async def _set_public(core: Core, file_id: str, user_id: str, is_public: bool) -> Dict[str, Any]:
    document = await core.files.set_public(file_id, user_id, is_public)
    if document is None:
        raise NotFound()
    return to_public_file(document)
