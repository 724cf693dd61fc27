"""
Async database access (raw SQL) using asyncpg.

`Database` owns one connection pool. FastAPI opens it on startup and closes it
on shutdown (see `api/main.py`); the instance lives on `app.state.db` and is
handed to services through the `get_database` dependency.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

This is the only place asyncpg exceptions are caught. They are translated into
`core.errors` so callers can tell constraint violations from outages.
"""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import config
from .errors import ConflictError, StorageUnavailableError, ValidationFailedError

logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


@contextmanager
def _translate_errors(sql: str) -> Iterator[None]:
    try:
        yield
    except asyncpg.UniqueViolationError as exc:
        logger.warning("storage_conflict constraint=%s", exc.constraint_name)
        raise ConflictError(
            constraint=exc.constraint_name,
            internal_detail=str(exc),
        ) from exc
    except (asyncpg.NotNullViolationError, asyncpg.CheckViolationError, asyncpg.DataError) as exc:
        logger.info("storage_rejected_value sqlstate=%s", exc.sqlstate)
        raise ValidationFailedError(
            "A value was rejected by storage constraints.",
            internal_detail=str(exc),
        ) from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
        logger.exception("storage_failed sql=%s", " ".join(sql.split())[:200])
        raise StorageUnavailableError(internal_detail=str(exc)) from exc


class Database:
    """
    Storage capability passed explicitly to every service.
    """

    def __init__(self, dsn: str | None = None, *, pool: Any = None) -> None:
        self._dsn = dsn
        self._pool = pool

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        self._pool = await asyncpg.create_pool(
            dsn=self._dsn or database_url(),
            min_size=config.db_pool_min_size(),
            max_size=config.db_pool_max_size(),
            command_timeout=config.db_command_timeout(),
        )
        logger.info("db_pool_opened")

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None
        logger.info("db_pool_closed")

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StorageUnavailableError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        pool = self.pool()
        with _translate_errors(sql):
            row = await pool.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        pool = self.pool()
        with _translate_errors(sql):
            rows = await pool.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). Returns the status tag.
        """
        pool = self.pool()
        with _translate_errors(sql):
            return await pool.execute(sql, *args)


def get_database(request: Request) -> Database:
    return request.app.state.db
