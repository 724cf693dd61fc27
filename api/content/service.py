"""
Content business logic.

Services hold no state besides the storage capability they were built with;
every read goes to the database.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from core.db import Database
from core.errors import NotFoundError, ValidationFailedError

from . import compiler, repository
from .resources import (
    CONTACT_PAGE,
    CONTACT_PAGE_ID,
    PRODUCT_CATEGORIES,
    SERVICE_CATEGORIES,
    ResourceSpec,
    default_value,
)
from .slugs import derive_slug

logger = logging.getLogger(__name__)

MENU_PRODUCT_COLUMNS = ("id", "title", "slug", "subcategories")
MENU_SERVICE_COLUMNS = ("id", "title", "slug")


class ResourceService:
    """
    list/get/create/update/delete for one collection resource.
    """

    def __init__(self, db: Database, spec: ResourceSpec) -> None:
        self.db = db
        self.spec = spec

    async def list(self) -> list[dict[str, Any]]:
        return await repository.list_records(self.db, self.spec)

    async def get(self, record_id: int) -> dict[str, Any]:
        row = await repository.get_record(self.db, self.spec, record_id)
        if row is None:
            raise NotFoundError()
        return row

    def _validate_required(self, values: Mapping[str, Any]) -> None:
        missing = [name for name in self.spec.required if not values.get(name)]
        if missing:
            raise ValidationFailedError(f"Required fields missing: {', '.join(missing)}.")

    async def create(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        values = compiler.applicable_fields(self.spec, payload)
        self._validate_required(values)

        for column in self.spec.columns:
            if values.get(column.name) is None:
                values[column.name] = default_value(column)

        if self.spec.slugged:
            values["slug"] = derive_slug(values.get("title"), values.get("slug"))

        return await repository.insert_record(self.db, self.spec, values)

    async def update(self, record_id: int, payload: Mapping[str, Any]) -> compiler.PatchResult:
        """
        Patch only the supplied fields.

        Returns a NO_CHANGE result when nothing applicable was supplied;
        raises NotFoundError when no row has `record_id`.
        """
        fields = dict(payload)
        if self.spec.slugged and not fields.get("slug"):
            # Slugs are never stored empty; re-derive from the title instead.
            fields.pop("slug", None)
            if "title" in fields:
                fields["slug"] = derive_slug(fields["title"])

        result = await compiler.apply_partial_update(self.db, self.spec, record_id, fields)
        if result.status is compiler.PatchStatus.NOT_FOUND:
            raise NotFoundError()
        return result

    async def delete(self, record_id: int) -> None:
        deleted = await repository.delete_record(self.db, self.spec, record_id)
        if not deleted:
            raise NotFoundError()


def empty_contact_page() -> dict[str, Any]:
    page: dict[str, Any] = {"id": CONTACT_PAGE_ID}
    for column in CONTACT_PAGE.columns:
        page[column.name] = default_value(column)
    page["updated_at"] = None
    return page


class ContactService:
    """
    The contact page singleton: one row, fixed id, replaced wholesale.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    async def get(self) -> dict[str, Any]:
        row = await repository.get_contact(self.db)
        return row if row is not None else empty_contact_page()

    async def put(self, data: Mapping[str, Any]) -> dict[str, Any]:
        missing = [name for name in CONTACT_PAGE.column_names if name not in data]
        if missing:
            raise ValidationFailedError(f"Required fields missing: {', '.join(missing)}.")

        row = await repository.upsert_contact(self.db, dict(data))
        logger.info("contact_page_saved updated_at=%s", row.get("updated_at"))
        return row


async def site_menu(db: Database) -> dict[str, list[dict[str, Any]]]:
    """
    Active product and service categories for site navigation.

    The two reads are independent; slight staleness between them is fine.
    """
    products, services = await asyncio.gather(
        repository.list_menu_entries(db, PRODUCT_CATEGORIES, MENU_PRODUCT_COLUMNS),
        repository.list_menu_entries(db, SERVICE_CATEGORIES, MENU_SERVICE_COLUMNS),
    )
    return {"products": products, "services": services}
