"""
Auth business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from core.db import Database

from . import repository, schemas, security

ADMIN_ROLE = "admin"

logger = logging.getLogger(__name__)


def _to_admin_response(admin_row: dict) -> schemas.AdminResponse:
    return schemas.AdminResponse(
        id=int(admin_row["id"]),
        username=str(admin_row["username"]),
        role=str(admin_row["role"]),
    )


async def login(db: Database, payload: schemas.LoginRequest) -> schemas.LoginResponse:
    admin_row = await repository.get_admin_by_username(db, payload.username)
    if admin_row is None:
        logger.info("login_failed reason=unknown_user")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Login failed.",
        )

    is_valid = security.verify_password(payload.password, str(admin_row.get("password_hash") or ""))
    if not is_valid:
        logger.info("login_failed reason=bad_password admin_id=%s", admin_row["id"])
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Login failed.",
        )

    token = security.build_access_token(
        admin_id=int(admin_row["id"]),
        role=str(admin_row["role"]),
    )
    return schemas.LoginResponse(token=token, user=_to_admin_response(admin_row))


def principal_from_token(access_token: str) -> schemas.Principal:
    """
    Stateless: the signed token already carries identity and role.
    """
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access token subject.",
        )

    return schemas.Principal(identity=int(subject), role=str(payload.get("role") or ""))


def ensure_admin(principal: schemas.Principal) -> schemas.Principal:
    if principal.role != ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin only.",
        )
    return principal


async def create_admin(
    db: Database,
    *,
    username: str,
    password: str,
    role: str = ADMIN_ROLE,
) -> schemas.AdminResponse:
    password_hash = security.hash_password(password)
    admin_row = await repository.create_admin(
        db,
        username=username,
        password_hash=password_hash,
        role=role,
    )
    return _to_admin_response(admin_row)
