"""
Read access to stored file content.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from database.schemas import FileType
from files_manager.adapters.storage import THUMBNAIL_WIDTHS, variant_path
from files_manager.errors import NotAFile, NotFound, ValidationError


def resolve_read_path(file: Dict[str, Any], user_id: Optional[str], size: Optional[int] = None) -> Path:
    """Return the on-disk path `user_id` may read for `file`.

    Private files are reported as missing to anyone but their owner, so a
    caller cannot tell "forbidden" from "absent". `size` selects one of the
    thumbnail renditions instead of the original.

    Raises:
        NotFound: Private file of another user, or nothing on disk
        NotAFile: The record is a folder
        ValidationError: `size` is not a rendition width
    """
    if not file.get("isPublic") and (user_id is None or file.get("userId") != user_id):
        raise NotFound()
    if file.get("type") == FileType.FOLDER.value:
        raise NotAFile()
    if not file.get("localPath"):
        raise NotFound()

    path = Path(file["localPath"])
    if size is not None:
        if size not in THUMBNAIL_WIDTHS:
            raise ValidationError("Invalid size")
        path = variant_path(path, size)

    if not path.is_file():
        raise NotFound()
    return path
