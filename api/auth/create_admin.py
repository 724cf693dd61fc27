"""
Provision an admin account with a bcrypt-hashed password.

Usage:
    DATABASE_URL=... python -m auth.create_admin <username> [--role admin]
"""

from __future__ import annotations

import asyncio

import click

from core.db import Database

from . import schemas, service


async def _create(username: str, password: str, role: str) -> schemas.AdminResponse:
    db = Database()
    await db.connect()
    try:
        return await service.create_admin(db, username=username, password=password, role=role)
    finally:
        await db.close()


@click.command()
@click.argument("username")
@click.option("--role", default=service.ADMIN_ROLE, show_default=True)
@click.password_option()
def main(username: str, role: str, password: str) -> None:
    """Create an admin user."""
    admin = asyncio.run(_create(username, password, role))
    click.echo(f"Created admin id={admin.id} username={admin.username} role={admin.role}")


if __name__ == "__main__":
    main()
