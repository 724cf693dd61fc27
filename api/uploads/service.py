"""
Image upload handling.

This file contains logic that is independent of FastAPI's routing layer:
- Validate uploads
- Read file bytes with a size limit
- Store under a time-based name that keeps the original extension
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import HTTPException, UploadFile

from core import config

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".ico", ".avif"}
PUBLIC_PREFIX = "/uploads"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredUpload:
    filename: str
    original_filename: str
    size_bytes: int

    @property
    def url(self) -> str:
        return f"{PUBLIC_PREFIX}/{self.filename}"


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def validate_upload(file: UploadFile) -> str:
    """
    Return the normalized file extension if this upload is acceptable.

    We validate based on filename extension here because `content_type`
    is often missing or incorrect in practice.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file.")

    ext = _file_ext(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: {sorted(ALLOWED_EXTENSIONS)}",
        )

    return ext


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Max is {max_bytes} bytes.",
            )

    return bytes(buf)


def ensure_upload_dir() -> Path:
    directory = config.upload_dir()
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def generate_filename(ext: str) -> str:
    return f"{time.time_ns()}{ext}"


async def store_upload(file: UploadFile) -> StoredUpload:
    """
    Validate, read and persist one uploaded image.
    """
    ext = validate_upload(file)
    data = await read_upload_bytes(file, max_bytes=config.max_upload_bytes())

    directory = ensure_upload_dir()
    filename = generate_filename(ext)
    # Exclusive create: never overwrite an earlier upload.
    with open(directory / filename, "xb") as fh:
        fh.write(data)

    logger.info("upload_saved filename=%s size_bytes=%s", filename, len(data))
    return StoredUpload(
        filename=filename,
        original_filename=file.filename or "",
        size_bytes=len(data),
    )
