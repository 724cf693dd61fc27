"""
Upload API endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from auth import dependencies as auth_dependencies
from auth.schemas import Principal

from . import service

router = APIRouter(prefix="/api")


@router.post("/upload")
async def upload_file(
    file: UploadFile = File(...),
    _: Principal = Depends(auth_dependencies.require_admin),
) -> dict:
    """
    Store one image and return the path to put into `image_url` fields.
    """
    stored = await service.store_upload(file)
    return {"url": stored.url}
