"""Statement compiler: allow-listed columns, positional binds, jsonb casts, patch outcomes."""

import json

from content import compiler
from content.compiler import PatchStatus
from content.resources import PRODUCT_CATEGORIES, PRODUCTS, SERVICES


def test_compile_patch_touches_only_supplied_columns():
    stmt = compiler.compile_patch(SERVICES, 7, {"title": "New", "is_active": False})
    assert stmt.sql.startswith("UPDATE services SET title = $1, is_active = $2 WHERE id = $3")
    assert "RETURNING id, title, description, image_url, sort_order, is_active" in stmt.sql
    assert stmt.args == ("New", False, 7)


def test_compile_patch_ignores_id_and_unknown_keys():
    payload = {
        "id": 99,
        "title": "x",
        "title = 'pwned' --": "y",
        "password_hash": "z",
    }
    stmt = compiler.compile_patch(SERVICES, 3, payload)
    assert stmt.sql.startswith("UPDATE services SET title = $1 WHERE id = $2")
    assert "pwned" not in stmt.sql
    assert "password_hash" not in stmt.sql
    assert stmt.args == ("x", 3)


def test_compile_patch_with_nothing_applicable_returns_none():
    assert compiler.compile_patch(SERVICES, 1, {}) is None
    assert compiler.compile_patch(SERVICES, 1, {"id": 5, "bogus": 1}) is None


def test_compile_patch_encodes_structured_fields_as_jsonb():
    subs = [{"title": "Pumps", "slug": "pumps"}, {"title": "Valves"}]
    stmt = compiler.compile_patch(PRODUCT_CATEGORIES, 2, {"subcategories": subs})
    assert "subcategories = $1::jsonb" in stmt.sql
    assert json.loads(stmt.args[0]) == subs
    assert stmt.args[1] == 2


def test_compile_patch_orders_assignments_by_schema_not_payload():
    stmt = compiler.compile_patch(PRODUCTS, 1, {"cta_url": "/c", "category": "A"})
    assert "SET category = $1, cta_url = $2 WHERE id = $3" in stmt.sql
    assert stmt.args == ("A", "/c", 1)


def test_compile_insert_binds_all_values():
    stmt = compiler.compile_insert(
        PRODUCT_CATEGORIES,
        {"title": "T", "slug": "t", "sort_order": 0, "is_active": True, "subcategories": []},
    )
    assert stmt.sql.startswith(
        "INSERT INTO product_categories (title, slug, sort_order, is_active, subcategories) "
        "VALUES ($1, $2, $3, $4, $5::jsonb)"
    )
    assert stmt.args == ("T", "t", 0, True, "[]")


async def test_apply_partial_update_no_change_skips_storage(fake_db):
    result = await compiler.apply_partial_update(fake_db, SERVICES, 1, {"id": 1})
    assert result.status is PatchStatus.NO_CHANGE
    assert result.record is None
    assert fake_db.calls == []


async def test_apply_partial_update_not_found(fake_db):
    fake_db.queue(None)
    result = await compiler.apply_partial_update(fake_db, SERVICES, 404, {"title": "x"})
    assert result.status is PatchStatus.NOT_FOUND
    assert len(fake_db.calls) == 1


async def test_apply_partial_update_returns_decoded_record(fake_db):
    fake_db.queue(
        {
            "id": 4,
            "title": "Pumps",
            "slug": "pumps",
            "sort_order": 1,
            "is_active": True,
            "subcategories": '[{"title": "a"}]',
        }
    )
    result = await compiler.apply_partial_update(
        fake_db, PRODUCT_CATEGORIES, 4, {"subcategories": [{"title": "a"}]}
    )
    assert result.status is PatchStatus.UPDATED
    assert result.record["subcategories"] == [{"title": "a"}]
