"""
Helpers for HTML form submissions.
"""
from typing import Optional

from fastapi import UploadFile
from pydantic import ValidationError

from carwash.client import Upload


async def read_upload(upload: Optional[UploadFile]) -> Optional[Upload]:
    """Turn an optional file field into an httpx upload tuple."""
    # Browsers submit an empty part when no file was chosen
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    if not content:
        return None
    return upload.filename, content, upload.content_type or "application/octet-stream"


def first_error(exc: ValidationError) -> str:
    """Human readable text for the first invalid form field."""
    detail = exc.errors()[0]
    field = ".".join(str(part) for part in detail.get("loc", ()))
    return f"Invalid {field}: {detail.get('msg', 'invalid value')}" if field else detail.get("msg", "Invalid form")
