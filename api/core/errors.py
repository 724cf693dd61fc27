"""
Domain errors raised by the content layer.

FastAPI exception handlers in `main.py` map these to HTTP responses.
Auth failures stay as `HTTPException` 401/403 (see `auth/dependencies.py`).
"""

from __future__ import annotations


class ContentError(RuntimeError):
    status_code = 500
    public_message = "Internal error."

    def __init__(self, message: str | None = None, *, internal_detail: str | None = None) -> None:
        super().__init__(message or self.public_message)
        # Raw driver text; only surfaced when EXPOSE_STORAGE_ERRORS is set.
        self.internal_detail = internal_detail


class NotFoundError(ContentError):
    status_code = 404
    public_message = "Not found."


class ValidationFailedError(ContentError):
    status_code = 400
    public_message = "Invalid payload."


class ConflictError(ContentError):
    status_code = 409
    public_message = "Conflicts with an existing record."

    def __init__(
        self,
        message: str | None = None,
        *,
        constraint: str | None = None,
        internal_detail: str | None = None,
    ) -> None:
        super().__init__(message, internal_detail=internal_detail)
        self.constraint = constraint


class StorageUnavailableError(ContentError):
    status_code = 503
    public_message = "Storage is unavailable."
