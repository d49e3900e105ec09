"""
Multipart form helpers.

Resource endpoints that take an image receive their fields as multipart
form data; these helpers turn the raw form values into the plain dicts the
services validate.
"""

import json
from typing import Any, List, Optional

from fastapi import UploadFile

from models.config import settings
from models.exceptions import ValidationException
from services.file_store import IncomingFile


def provided(**fields: Any) -> dict[str, Any]:
    """Only the fields the client actually sent."""
    return {name: value for name, value in fields.items() if value is not None}


def list_field(values: Optional[List[str]]) -> Optional[List[str]]:
    """
    Normalize a list sent as repeated fields or as one JSON array string.

    Returns:
        The list, or None when the field was not sent
    """
    if values is None:
        return None
    if len(values) == 1 and values[0].strip().startswith("["):
        try:
            parsed = json.loads(values[0])
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return [str(value) for value in parsed]
    return [value for value in values if value != ""]


def json_field(name: str, raw: Optional[str]) -> Optional[dict[str, Any]]:
    """Parse a JSON object sent as a single form field."""
    if raw is None or raw == "":
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = None
    if not isinstance(parsed, dict):
        raise ValidationException(
            "Validation failed",
            errors=[{"field": name, "message": "Must be a JSON object"}],
        )
    return parsed


async def read_upload(
    upload: Optional[UploadFile], max_size: Optional[int] = None
) -> Optional[IncomingFile]:
    """
    Read an uploaded file into memory; an empty file field counts as no file.

    At most one byte past ``max_size`` is read, enough for the file store to
    reject an oversized file without buffering all of it.
    """
    if upload is None or not upload.filename:
        return None
    limit = max_size if max_size is not None else settings.MAX_IMAGE_SIZE
    content = await upload.read(limit + 1)
    return IncomingFile(
        content=content,
        filename=upload.filename,
        content_type=upload.content_type or "",
    )


async def read_uploads(
    uploads: Optional[List[UploadFile]], max_size: Optional[int] = None
) -> List[IncomingFile]:
    files = []
    for upload in uploads or []:
        incoming = await read_upload(upload, max_size)
        if incoming is not None:
            files.append(incoming)
    return files
