"""
Statement compiler for content writes.

Turns a sparse field mapping into a parameterized INSERT or UPDATE for one
resource type. Column names come only from the resource's `ResourceSpec`;
values are always bound as `$n` parameters. Keys outside the allow-list
(including `id`) are dropped before anything is compiled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from core.db import Database

from .resources import ResourceSpec, decode_row, encode_value, is_structured

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledStatement:
    sql: str
    args: tuple[Any, ...]


class PatchStatus(str, Enum):
    UPDATED = "updated"
    NOT_FOUND = "not_found"
    NO_CHANGE = "no_change"


@dataclass(frozen=True)
class PatchResult:
    status: PatchStatus
    record: dict[str, Any] | None = None


def applicable_fields(spec: ResourceSpec, fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Keep only writable columns of `spec`, in the resource's column order.
    """
    dropped = sorted(k for k in fields if not spec.is_writable(k))
    if dropped:
        logger.debug("patch_fields_dropped resource=%s fields=%s", spec.name, dropped)
    return {name: fields[name] for name in spec.column_names if name in fields}


def _placeholder(spec: ResourceSpec, name: str, index: int) -> str:
    if is_structured(spec.name, name):
        return f"${index}::jsonb"
    return f"${index}"


def compile_insert(spec: ResourceSpec, values: Mapping[str, Any]) -> CompiledStatement:
    fields = applicable_fields(spec, values)
    if not fields:
        raise ValueError(f"No insertable fields for {spec.name}.")

    names = list(fields)
    placeholders = [_placeholder(spec, name, i) for i, name in enumerate(names, start=1)]
    args = tuple(encode_value(spec, name, fields[name]) for name in names)
    sql = (
        f"INSERT INTO {spec.table} ({', '.join(names)}) "
        f"VALUES ({', '.join(placeholders)}) "
        f"RETURNING {spec.select_list()}"
    )
    return CompiledStatement(sql=sql, args=args)


def compile_patch(
    spec: ResourceSpec,
    record_id: int,
    fields: Mapping[str, Any],
) -> CompiledStatement | None:
    """
    Build `UPDATE ... SET <supplied columns> WHERE id = $n RETURNING ...`.

    Returns None when nothing applicable was supplied.
    """
    updates = applicable_fields(spec, fields)
    if not updates:
        return None

    assignments = [
        f"{name} = {_placeholder(spec, name, i)}" for i, name in enumerate(updates, start=1)
    ]
    args = tuple(encode_value(spec, name, value) for name, value in updates.items())
    id_index = len(args) + 1
    sql = (
        f"UPDATE {spec.table} SET {', '.join(assignments)} "
        f"WHERE id = ${id_index} "
        f"RETURNING {spec.select_list()}"
    )
    return CompiledStatement(sql=sql, args=args + (record_id,))


async def apply_partial_update(
    db: Database,
    spec: ResourceSpec,
    record_id: int,
    fields: Mapping[str, Any],
) -> PatchResult:
    statement = compile_patch(spec, record_id, fields)
    if statement is None:
        return PatchResult(status=PatchStatus.NO_CHANGE)

    row = await db.fetch_one(statement.sql, *statement.args)
    if row is None:
        return PatchResult(status=PatchStatus.NOT_FOUND)
    return PatchResult(status=PatchStatus.UPDATED, record=decode_row(spec, row))
