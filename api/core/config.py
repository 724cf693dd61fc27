"""
Environment-driven settings.

Every value is read on call so tests can tweak `os.environ` without reloading.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def upload_dir() -> Path:
    return Path(os.environ.get("UPLOAD_DIR", "uploads").strip() or "uploads")


def max_upload_bytes() -> int:
    return env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)


def expose_storage_errors() -> bool:
    # Never enable in production: driver messages can leak table/column details.
    return env_bool("EXPOSE_STORAGE_ERRORS", False)


def db_pool_min_size() -> int:
    return env_int("DB_POOL_MIN_SIZE", 1)


def db_pool_max_size() -> int:
    return env_int("DB_POOL_MAX_SIZE", 5)


def db_command_timeout() -> int:
    return env_int("DB_COMMAND_TIMEOUT", 30)
