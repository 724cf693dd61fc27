"""
Resource registry and column codec.

Each `ResourceSpec` is the fixed schema of one content table. Its column tuple
is the write allow-list: the statement compiler only ever emits column names
that appear here, whatever keys a caller sends.

Structured columns are stored as jsonb. asyncpg neither encodes Python lists
for json/jsonb parameters nor decodes them on read, so values cross the
storage boundary as JSON text (bound with a `::jsonb` cast).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel

from . import schemas

CONTACT_PAGE_ID = 1


class ColumnKind(str, Enum):
    SCALAR = "scalar"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class Column:
    name: str
    kind: ColumnKind = ColumnKind.SCALAR
    # Used on create when the caller omits the field; all columns are NOT NULL.
    default: Any = ""


@dataclass(frozen=True)
class ResourceSpec:
    name: str
    table: str
    columns: tuple[Column, ...]
    fields_model: type[BaseModel] | None = None
    slugged: bool = False
    required: tuple[str, ...] = ()
    path: str = ""
    _by_name: dict[str, Column] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_name", {c.name: c for c in self.columns})

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.columns)

    def column(self, name: str) -> Column | None:
        return self._by_name.get(name)

    def is_writable(self, name: str) -> bool:
        return name in self._by_name

    def select_list(self, extra: tuple[str, ...] = ()) -> str:
        return ", ".join(("id",) + self.column_names + extra)


def _sort_order() -> Column:
    return Column("sort_order", default=0)


def _is_active() -> Column:
    return Column("is_active", default=True)


PRODUCT_CATEGORIES = ResourceSpec(
    name="product_categories",
    table="product_categories",
    path="product-categories",
    columns=(
        Column("title"),
        Column("slug"),
        _sort_order(),
        _is_active(),
        Column("subcategories", ColumnKind.STRUCTURED, default=()),
    ),
    fields_model=schemas.ProductCategoryFields,
    slugged=True,
)

SERVICE_CATEGORIES = ResourceSpec(
    name="service_categories",
    table="service_categories",
    path="service-categories",
    columns=(
        Column("title"),
        Column("slug"),
        _sort_order(),
        _is_active(),
    ),
    fields_model=schemas.ServiceCategoryFields,
    slugged=True,
)

PRODUCTS = ResourceSpec(
    name="products",
    table="products",
    path="products",
    columns=(
        Column("category"),
        Column("subcategory"),
        Column("name"),
        Column("description"),
        Column("image_url"),
        _sort_order(),
        _is_active(),
        Column("cta_url"),
    ),
    fields_model=schemas.ProductFields,
    required=("category", "name"),
)

SERVICES = ResourceSpec(
    name="services",
    table="services",
    path="services",
    columns=(
        Column("title"),
        Column("description"),
        Column("image_url"),
        _sort_order(),
        _is_active(),
    ),
    fields_model=schemas.ServiceFields,
)

NEWS = ResourceSpec(
    name="news",
    table="news",
    path="news",
    columns=(
        Column("title"),
        Column("content"),
        Column("image_url"),
        _sort_order(),
        _is_active(),
    ),
    fields_model=schemas.NewsFields,
)

CERTIFICATIONS = ResourceSpec(
    name="certifications",
    table="certifications",
    path="certifications",
    columns=(
        Column("title"),
        Column("image_url"),
        _sort_order(),
    ),
    fields_model=schemas.CertificationFields,
)

CUSTOMER_LOGOS = ResourceSpec(
    name="customer_logos",
    table="customer_logos",
    path="customer-logos",
    columns=(
        Column("name"),
        Column("image_url"),
        _sort_order(),
    ),
    fields_model=schemas.CustomerLogoFields,
)

CONTACT_PAGE = ResourceSpec(
    name="contact_page",
    table="contact_page",
    columns=(
        Column("heading"),
        Column("description"),
        Column("email"),
        Column("phone"),
        Column("line_label"),
        Column("line_url"),
        Column("line_icon_url"),
        Column("address_lines", ColumnKind.STRUCTURED, default=()),
        Column("open_hours"),
        Column("map_title"),
        Column("map_embed_url"),
    ),
    fields_model=schemas.ContactPageData,
)

# Collection resources, in the order their routes are mounted.
COLLECTIONS: tuple[ResourceSpec, ...] = (
    PRODUCT_CATEGORIES,
    SERVICE_CATEGORIES,
    PRODUCTS,
    SERVICES,
    NEWS,
    CERTIFICATIONS,
    CUSTOMER_LOGOS,
)

RESOURCES: dict[str, ResourceSpec] = {spec.name: spec for spec in COLLECTIONS + (CONTACT_PAGE,)}


def get_spec(resource: str) -> ResourceSpec:
    try:
        return RESOURCES[resource]
    except KeyError:
        raise KeyError(f"Unknown resource type: {resource!r}") from None


def is_structured(resource: str, field_name: str) -> bool:
    """
    True when `field_name` of `resource` is stored as JSON text.

    Unknown resources and unmapped fields are scalar.
    """
    spec = RESOURCES.get(resource)
    if spec is None:
        return False
    column = spec.column(field_name)
    return column is not None and column.kind is ColumnKind.STRUCTURED


def default_value(column: Column) -> Any:
    # Tuples keep the frozen dataclass hashable; storage wants a fresh list.
    if isinstance(column.default, tuple):
        return list(column.default)
    return column.default


def encode_value(spec: ResourceSpec, field_name: str, value: Any) -> Any:
    if is_structured(spec.name, field_name):
        return json.dumps(value, ensure_ascii=False)
    return value


def decode_value(spec: ResourceSpec, field_name: str, value: Any) -> Any:
    if isinstance(value, str) and is_structured(spec.name, field_name):
        return json.loads(value)
    return value


def decode_row(spec: ResourceSpec, row: dict[str, Any] | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return {key: decode_value(spec, key, value) for key, value in row.items()}
