"""
Slug derivation for slugged categories.
"""

from __future__ import annotations

import re
import time
from uuid import uuid4

_WHITESPACE_RUN = re.compile(r"\s+")


def fallback_slug() -> str:
    # Timestamp alone collides when two untitled rows land in the same tick.
    return f"no-title-{time.time_ns()}-{uuid4().hex[:8]}"


def derive_slug(title: str | None, explicit_slug: str | None = None) -> str:
    """
    Caller-supplied slugs win unchanged; uniqueness is left to the DB.

    Otherwise trim, collapse whitespace runs to "-", lowercase. Anything else
    (punctuation, non-ASCII) passes through untouched.
    """
    if explicit_slug:
        return explicit_slug
    slug = _WHITESPACE_RUN.sub("-", (title or "").strip()).lower()
    return slug or fallback_slug()
