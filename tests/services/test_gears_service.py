"""Tests for catalog listing with per-list presence."""
from __future__ import annotations

import pytest

from trailpack.db.engine import init_engine_once, reset_for_tests
from trailpack.db.repositories import users_repo
from trailpack.services import gears_service, items_service, lists_service
from trailpack.services.errors import InvalidInputError, NotFoundError


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("TRAILPACK_DB_PATH", ":memory:")
    monkeypatch.delenv("TRAILPACK_DATABASE_URL", raising=False)
    monkeypatch.setenv("TRAILPACK_SEED_STARTER_DATA", "false")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def user_id() -> int:
    return users_repo.create_user("hiker@example.com", "hash").id


def _presence(views):
    return {(view.name, view.category, view.weight): view.in_current_list for view in views}


def test_presence_is_derived_per_list(user_id):
    summer = lists_service.ensure_default_list(user_id).id
    winter = lists_service.create_list(user_id, "Winter").id
    items_service.create_item(user_id, summer, {"name": "Tent", "category": "Shelter", "weight": 1200, "qty": 1})
    items_service.create_item(user_id, winter, {"name": "Parka", "category": "Clothing", "type": "worn", "weight": 800, "qty": 1})

    assert _presence(gears_service.list_gears_for_list(user_id, summer)) == {
        ("Tent", "Shelter", 1200): True,
        ("Parka", "Clothing", 800): False,
    }
    assert _presence(gears_service.list_gears_for_list(user_id, winter)) == {
        ("Tent", "Shelter", 1200): False,
        ("Parka", "Clothing", 800): True,
    }


def test_presence_follows_item_edits_and_deletes(user_id):
    pack = lists_service.ensure_default_list(user_id).id
    tent = items_service.create_item(user_id, pack, {"name": "Tent", "category": "Shelter", "weight": 1200, "qty": 1})

    items_service.update_category(user_id, tent.id, "Camp")
    views = gears_service.list_gears_for_list(user_id, pack)
    assert _presence(views) == {("Tent", "Shelter", 1200): False}

    items_service.update_category(user_id, tent.id, "Shelter")
    assert _presence(gears_service.list_gears_for_list(user_id, pack)) == {("Tent", "Shelter", 1200): True}

    items_service.delete_item(user_id, tent.id)
    assert _presence(gears_service.list_gears_for_list(user_id, pack)) == {("Tent", "Shelter", 1200): False}


def test_query_filters_name_or_description(user_id):
    pack = lists_service.ensure_default_list(user_id).id
    items_service.create_item(user_id, pack, {"name": "Tent", "description": "Silnylon", "weight": 1200, "qty": 1})
    items_service.create_item(user_id, pack, {"name": "Tarp", "description": "Dyneema", "weight": 300, "qty": 1})

    assert [view.name for view in gears_service.list_gears_for_list(user_id, pack, query="silny")] == ["Tent"]
    assert [view.name for view in gears_service.list_gears_for_list(user_id, pack, query=" TARP ")] == ["Tarp"]
    assert len(gears_service.list_gears_for_list(user_id, pack, query="")) == 2


def test_presence_for_foreign_list_is_not_found(user_id):
    other = users_repo.create_user("other@example.com", "hash").id
    their_list = lists_service.ensure_default_list(other).id

    with pytest.raises(NotFoundError):
        gears_service.list_gears_for_list(user_id, their_list)


def test_upsert_and_delete_gear(user_id):
    gear = gears_service.upsert_gear(user_id, {"name": "Knife", "category": "Tools", "weight": 30, "default_qty": 1})
    again = gears_service.upsert_gear(
        user_id, {"name": "Knife", "category": "Tools", "weight": 30, "default_qty": 2, "description": "folding"}
    )

    assert again.id == gear.id
    assert again.default_qty == 2
    assert [g.description for g in gears_service.list_gears(user_id)] == ["folding"]

    with pytest.raises(InvalidInputError):
        gears_service.upsert_gear(user_id, {"name": "", "weight": 30})

    gears_service.delete_gear(user_id, gear.id)
    assert gears_service.list_gears(user_id) == []
    with pytest.raises(NotFoundError):
        gears_service.delete_gear(user_id, gear.id)


def test_deleting_gear_keeps_items(user_id):
    pack = lists_service.ensure_default_list(user_id).id
    items_service.create_item(user_id, pack, {"name": "Tent", "category": "Shelter", "weight": 1200, "qty": 1})
    gear = gears_service.list_gears(user_id)[0]

    gears_service.delete_gear(user_id, gear.id)

    assert [item.name for item in items_service.list_items(user_id, pack)] == ["Tent"]
