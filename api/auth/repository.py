"""
Admin user persistence helpers.
"""

from __future__ import annotations

from core.db import Database


def normalize_username(username: str) -> str:
    return (username or "").strip()


async def get_admin_by_username(db: Database, username: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, username, password_hash, role
        FROM admin_users
        WHERE username = $1
        """,
        normalize_username(username),
    )


async def create_admin(db: Database, *, username: str, password_hash: str, role: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO admin_users (username, password_hash, role)
        VALUES ($1, $2, $3)
        RETURNING id, username, role
        """,
        normalize_username(username),
        password_hash,
        role,
    )
    if row is None:
        raise RuntimeError("Failed to create admin user.")
    return row
