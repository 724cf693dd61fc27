"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.db import Database, get_database

from . import schemas, service

router = APIRouter(prefix="/api/auth")


@router.post("/login", response_model=schemas.LoginResponse)
async def login(
    request: schemas.LoginRequest,
    db: Database = Depends(get_database),
) -> schemas.LoginResponse:
    return await service.login(db, request)
