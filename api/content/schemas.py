"""
Request schemas for content resources.

Each `*Fields` model is the closed set of writable fields for one resource
type. Every field is optional: routers dump with `exclude_unset=True,
exclude_none=True`, so the same model serves sparse creates and patches.
Unknown keys are ignored, never forwarded.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Fields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ProductCategoryFields(_Fields):
    title: str | None = Field(default=None, max_length=500)
    slug: str | None = Field(default=None, max_length=500)
    sort_order: int | None = None
    is_active: bool | None = None
    subcategories: list[Any] | None = None


class ServiceCategoryFields(_Fields):
    title: str | None = Field(default=None, max_length=500)
    slug: str | None = Field(default=None, max_length=500)
    sort_order: int | None = None
    is_active: bool | None = None


class ProductFields(_Fields):
    category: str | None = None
    subcategory: str | None = None
    name: str | None = None
    description: str | None = None
    image_url: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None
    cta_url: str | None = None


class ServiceFields(_Fields):
    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None


class NewsFields(_Fields):
    title: str | None = None
    content: str | None = None
    image_url: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None


class CertificationFields(_Fields):
    title: str | None = None
    image_url: str | None = None
    sort_order: int | None = None


class CustomerLogoFields(_Fields):
    name: str | None = None
    image_url: str | None = None
    sort_order: int | None = None


class ContactPageData(BaseModel):
    """
    Whole-record replacement payload; every field must be supplied.
    """

    model_config = ConfigDict(extra="ignore")

    heading: str
    description: str
    email: str
    phone: str
    line_label: str
    line_url: str
    line_icon_url: str
    address_lines: list[Any]
    open_hours: str
    map_title: str
    map_embed_url: str


class ContactPutRequest(BaseModel):
    data: ContactPageData
