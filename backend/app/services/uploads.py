from __future__ import annotations

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from app.config import settings
from app.errors import PayloadTooLargeError, ValidationError


logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"


def upload_dir() -> Path:
    return Path(settings.UPLOAD_DIR)


def _parse_allowed_mime() -> set[str] | None:
    if not settings.UPLOAD_ALLOWED_MIME:
        return None
    return {item.strip().lower() for item in settings.UPLOAD_ALLOWED_MIME.split(",") if item.strip()}


async def read_upload_with_limit(upload: UploadFile, max_bytes: int) -> bytes:
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await upload.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise PayloadTooLargeError(f"File too large. Max {settings.UPLOAD_MAX_FILE_MB}MB.")
        chunks.append(chunk)
    return b"".join(chunks)


def _safe_suffix(filename: str | None) -> str:
    suffix = Path(filename or "").suffix.lower()
    if 1 < len(suffix) <= 8 and suffix[1:].isalnum():
        return suffix
    return ""


def path_for(image_path: str) -> Path:
    return upload_dir() / Path(image_path).name


async def store_image(upload: UploadFile) -> str:
    """Persist an uploaded image and return the path entities should reference."""
    allowed = _parse_allowed_mime()
    content_type = (upload.content_type or "").lower()
    if allowed and content_type not in allowed:
        raise ValidationError("Unsupported image format")

    max_bytes = settings.UPLOAD_MAX_FILE_MB * 1024 * 1024
    try:
        data = await read_upload_with_limit(upload, max_bytes)
    finally:
        await upload.close()

    if not data:
        raise ValidationError("Empty image file")

    filename = f"{uuid.uuid4().hex}{_safe_suffix(upload.filename)}"
    directory = upload_dir()
    directory.mkdir(parents=True, exist_ok=True)
    (directory / filename).write_bytes(data)
    return f"{UPLOAD_URL_PREFIX}/{filename}"


def retrieve_image(image_path: str) -> bytes | None:
    target = path_for(image_path)
    if not target.is_file():
        return None
    return target.read_bytes()


def delete_image(image_path: str | None) -> None:
    if not image_path:
        return
    try:
        path_for(image_path).unlink(missing_ok=True)
    except OSError:
        logger.warning("Could not remove superseded upload %s", image_path, exc_info=True)


def public_url(image_path: str | None, base_url: str) -> str | None:
    if not image_path:
        return None
    base = (settings.PUBLIC_BASE_URL or base_url).rstrip("/")
    return f"{base}{image_path}"
