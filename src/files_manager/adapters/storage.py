"""
Local blob storage for uploaded files and their derived thumbnails.
"""

import logging
import uuid
from pathlib import Path
from typing import Union

from PIL import Image

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Rendition widths derived from every image, largest first
THUMBNAIL_WIDTHS = (500, 250, 100)


def variant_path(path: PathLike, width: int) -> Path:
    """Sibling path for a size variant: ``name.ext`` -> ``name_{width}.ext``."""
    path = Path(path)
    return path.with_name(f"{path.stem}_{width}{path.suffix}")


class BlobStorage:
    """Writes raw bytes under a root directory that is created on demand"""

    def __init__(self, root: PathLike):
        self.root = Path(root)

    def write(self, data: bytes, filename: str = "") -> Path:
        """Store `data` at a new unique path, keeping the extension of `filename`."""
        self.root.mkdir(parents=True, exist_ok=True)
        local_path = self.root / f"{uuid.uuid4()}{Path(filename).suffix.lower()}"
        local_path.write_bytes(data)
        logger.info(f"Stored {len(data)} bytes at {local_path}")
        return local_path

    def delete(self, path: PathLike) -> None:
        Path(path).unlink(missing_ok=True)
        logger.info(f"Removed {path}")

    def exists(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def write_thumbnail(self, source: PathLike, width: int) -> Path:
        """Resize `source` to `width` pixels wide, keeping the aspect ratio."""
        target = variant_path(source, width)
        with Image.open(source) as image:
            height = max(1, round(image.height * width / image.width))
            thumbnail = image.resize((width, height))
            thumbnail.save(target, format=image.format)
        logger.info(f"Wrote {width}px thumbnail {target}")
        return target
