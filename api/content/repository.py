"""
Content persistence (raw SQL).

Table names and column lists come from `ResourceSpec`; caller data is only
ever bound as parameters.
"""

from __future__ import annotations

from typing import Any

from core.db import Database

from . import compiler
from .resources import (
    CONTACT_PAGE,
    CONTACT_PAGE_ID,
    ResourceSpec,
    decode_row,
    encode_value,
    is_structured,
)


async def list_records(db: Database, spec: ResourceSpec) -> list[dict[str, Any]]:
    rows = await db.fetch_all(
        f"""
        SELECT {spec.select_list()}
        FROM {spec.table}
        ORDER BY sort_order ASC, id ASC
        """
    )
    return [decode_row(spec, row) for row in rows]


async def get_record(db: Database, spec: ResourceSpec, record_id: int) -> dict[str, Any] | None:
    row = await db.fetch_one(
        f"""
        SELECT {spec.select_list()}
        FROM {spec.table}
        WHERE id = $1
        """,
        record_id,
    )
    return decode_row(spec, row)


async def insert_record(db: Database, spec: ResourceSpec, values: dict[str, Any]) -> dict[str, Any]:
    statement = compiler.compile_insert(spec, values)
    row = await db.fetch_one(statement.sql, *statement.args)
    if row is None:
        raise RuntimeError(f"Failed to insert into {spec.table}.")
    return decode_row(spec, row)


async def delete_record(db: Database, spec: ResourceSpec, record_id: int) -> bool:
    row = await db.fetch_one(
        f"""
        DELETE FROM {spec.table}
        WHERE id = $1
        RETURNING id
        """,
        record_id,
    )
    return row is not None


async def list_menu_entries(
    db: Database,
    spec: ResourceSpec,
    columns: tuple[str, ...],
) -> list[dict[str, Any]]:
    """
    Active rows only, projected to `columns` (which must belong to `spec`).
    """
    unknown = [c for c in columns if c != "id" and not spec.is_writable(c)]
    if unknown:
        raise ValueError(f"Unknown columns for {spec.name}: {unknown}")

    rows = await db.fetch_all(
        f"""
        SELECT {', '.join(columns)}
        FROM {spec.table}
        WHERE is_active = true
        ORDER BY sort_order ASC, id ASC
        """
    )
    return [decode_row(spec, row) for row in rows]


async def get_contact(db: Database) -> dict[str, Any] | None:
    row = await db.fetch_one(
        f"""
        SELECT {CONTACT_PAGE.select_list(("updated_at",))}
        FROM contact_page
        WHERE id = $1
        """,
        CONTACT_PAGE_ID,
    )
    return decode_row(CONTACT_PAGE, row)


async def upsert_contact(db: Database, data: dict[str, Any]) -> dict[str, Any]:
    """
    Insert-or-overwrite the singleton row in one statement.

    Concurrent writers serialize on the row; the last one wins wholesale.
    """
    names = CONTACT_PAGE.column_names
    placeholders = []
    for i, name in enumerate(names, start=2):
        cast = "::jsonb" if is_structured(CONTACT_PAGE.name, name) else ""
        placeholders.append(f"${i}{cast}")
    assignments = ",\n            ".join(f"{name} = EXCLUDED.{name}" for name in names)

    row = await db.fetch_one(
        f"""
        INSERT INTO contact_page (id, {', '.join(names)}, updated_at)
        VALUES ($1, {', '.join(placeholders)}, now())
        ON CONFLICT (id) DO UPDATE
        SET {assignments},
            updated_at = now()
        RETURNING {CONTACT_PAGE.select_list(("updated_at",))}
        """,
        CONTACT_PAGE_ID,
        *(encode_value(CONTACT_PAGE, name, data[name]) for name in names),
    )
    if row is None:
        raise RuntimeError("Failed to upsert contact page.")
    return decode_row(CONTACT_PAGE, row)
