"""
DevCamper API — Bootcamp Photo Storage
=======================================

What:  Validates and stores bootcamp photos uploaded through
       PUT /api/v1/bootcamps/{id}/photo.
Why:   Keeps file system access out of the routes and the bootcamp service.
How:   Checks the declared content type and size, reads the real type from
       the magic bytes with python-magic, then writes the bytes with aiofiles
       under FILE_UPLOAD_PATH.

Naming:
    Photos are stored as `photo_<bootcampId><ext>`. Only the original
    extension survives from the client's filename, so no user input reaches
    the path; a new upload for the same bootcamp overwrites the old file.

Validation order:
    1. Content type must be image/*      → 400 "Please upload an image file"
    2. Size must be ≤ MAX_FILE_UPLOAD    → 400 "Please upload an image less than N"
    3. Magic bytes must be image/*       → 400 "Please upload an image file"
                                            (500 if libmagic cannot read them)
    4. Write to disk                     → 500 "Problem with file upload" on OSError
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from devcamper.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

# Extensions are kept only when they look like one (".jpg", ".webp")
_EXTENSION = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


class FileService:
    def __init__(self, upload_path: str, max_size: int):
        self.upload_root = Path(upload_path).resolve()
        self.max_size = max_size

    def ensure_upload_root(self) -> None:
        self.upload_root.mkdir(parents=True, exist_ok=True)

    def validate_content_type(self, content_type: Optional[str]) -> None:
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError(
                message="Please upload an image file",
                field="file",
                context={"content_type": content_type},
            )

    def validate_size(self, size: int) -> None:
        if size > self.max_size:
            raise ValidationError(
                message=f"Please upload an image less than {self.max_size}",
                field="file",
                context={"max_size": self.max_size, "actual_size": size},
            )

    def detect_content_type(self, content: bytes) -> str:
        """Content type read from the bytes themselves; the client header is not trusted."""
        try:
            import magic

            mime_type = magic.from_buffer(content, mime=True)
        except Exception as e:
            logger.error("MIME type detection failed: %s", e)
            raise FileStorageError(
                message="Could not verify file type. Please try again.",
                context={"error": str(e)},
            )

        if not mime_type.startswith("image/"):
            raise ValidationError(
                message="Please upload an image file",
                field="file",
                context={"detected_mime": mime_type},
            )
        return mime_type

    @staticmethod
    def photo_filename(bootcamp_id: uuid.UUID, original_filename: Optional[str]) -> str:
        ext = Path(original_filename or "").suffix
        if not _EXTENSION.match(ext):
            ext = ""
        return f"photo_{bootcamp_id}{ext.lower()}"

    async def store_file(self, filename: str, content: bytes) -> Path:
        path = self.upload_root / filename
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, e)
            raise FileStorageError(context={"path": str(path), "os_error": str(e)})

        logger.info("File stored: %s (%d bytes)", filename, len(content))
        return path

    async def save_bootcamp_photo(
        self,
        bootcamp_id: uuid.UUID,
        original_filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
    ) -> str:
        """Validate and write a photo; returns the stored filename."""
        self.validate_content_type(content_type)
        self.validate_size(len(content))
        self.detect_content_type(content)
        filename = self.photo_filename(bootcamp_id, original_filename)
        await self.store_file(filename, content)
        return filename
