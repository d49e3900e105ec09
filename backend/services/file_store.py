"""
Local disk storage for uploaded images.

Files land under ``<root>/<subfolder>/`` with a random UUID name that keeps
the original extension. Deletion is best-effort: failures are logged and
never raised, so cleanup cannot mask the error that triggered it.
"""

import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from models.config import settings
from models.exceptions import UpstreamFailureException, ValidationException


@dataclass(frozen=True)
class IncomingFile:
    """An upload as received from the client, independent of the web framework."""

    content: bytes
    filename: str
    content_type: str


class FileStore:
    """Writes and removes image files below a root directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def validate(self, upload: IncomingFile, max_size: int) -> None:
        """
        Check an upload against the image rules.

        Raises:
            ValidationException: If the declared type is not an image or the
                file is larger than ``max_size``.
        """
        if not (upload.content_type or "").startswith("image/"):
            raise ValidationException(
                "Only image files are allowed",
                errors=[{"field": "image", "message": "Only image files are allowed"}],
            )
        if len(upload.content) > max_size:
            limit_mb = max_size // (1024 * 1024)
            raise ValidationException(
                f"File size exceeds {limit_mb}MB limit",
                errors=[{"field": "image", "message": f"File size exceeds {limit_mb}MB limit"}],
            )

    def save(
        self, subfolder: str, upload: IncomingFile, max_size: int
    ) -> dict[str, Any]:
        """
        Validate and store an upload.

        Args:
            subfolder: Directory below the root, one per entity type
            upload: The incoming file
            max_size: Size ceiling in bytes

        Returns:
            Image descriptor ``{filename, original_name, path, size, mimetype}``
        """
        self.validate(upload, max_size)

        extension = Path(upload.filename or "").suffix.lower()
        filename = f"{uuid.uuid4()}{extension}"
        directory = self.root / subfolder
        file_path = directory / filename

        try:
            directory.mkdir(parents=True, exist_ok=True)
            with open(file_path, "wb") as buffer:
                buffer.write(upload.content)
        except OSError as exc:
            logger.error(f"Failed to store upload in {directory}: {exc}")
            raise UpstreamFailureException("Failed to store uploaded file") from exc

        logger.debug(f"Stored upload {filename} ({len(upload.content)} bytes)")
        return {
            "filename": filename,
            "original_name": upload.filename,
            "path": str(file_path).replace("\\", "/"),
            "size": len(upload.content),
            "mimetype": upload.content_type,
        }

    def delete(self, path: Optional[str]) -> bool:
        """Remove a stored file. Returns True when a file was removed."""
        if not path:
            return False
        try:
            Path(path).unlink()
            return True
        except FileNotFoundError:
            logger.warning(f"Upload already gone: {path}")
            return False
        except OSError as exc:
            logger.error(f"Failed to delete upload {path}: {exc}")
            return False


def get_file_store() -> FileStore:
    return FileStore(settings.UPLOAD_DIR)
