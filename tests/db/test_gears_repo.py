"""Tests for gears_repo and items_repo helpers using in-memory SQLite."""
from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from trailpack.db import app_session
from trailpack.db.engine import init_engine_once, reset_for_tests
from trailpack.db.repositories import gears_repo, items_repo, lists_repo, users_repo


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("TRAILPACK_DB_PATH", ":memory:")
    monkeypatch.delenv("TRAILPACK_DATABASE_URL", raising=False)
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def user_id() -> int:
    return users_repo.create_user("hiker@example.com", "hash").id


def _add_stove(user_id: int, **overrides):
    attrs = {"name": "Stove", "category": "Kitchen", "item_type": "base", "weight": 85, "default_qty": 1}
    attrs.update(overrides)
    return gears_repo.add_gear(user_id, **attrs)


def test_natural_key_is_unique_per_user(user_id):
    _add_stove(user_id)
    other = users_repo.create_user("other@example.com", "hash").id
    _add_stove(other)

    with pytest.raises(IntegrityError):
        _add_stove(user_id, default_qty=3)

    assert len(gears_repo.list_gears(user_id)) == 1
    assert len(gears_repo.list_gears(other)) == 1


def test_find_by_key_matches_all_four_fields(user_id):
    stove = _add_stove(user_id)

    assert gears_repo.find_by_key(user_id, ("Stove", "Kitchen", "base", 85)).id == stove.id
    assert gears_repo.find_by_key(user_id, ("Stove", "Kitchen", "base", 86)) is None
    assert gears_repo.find_by_key(user_id, ("Stove", "Cooking", "base", 85)) is None
    assert gears_repo.find_by_key(user_id, ("Stove", "Kitchen", "worn", 85)) is None


def test_distinct_categories(user_id):
    _add_stove(user_id)
    _add_stove(user_id, weight=90)
    _add_stove(user_id, name="Tent", category="Shelter", weight=1200)
    pack = lists_repo.create_list(user_id, "Trip")
    items_repo.add_item(user_id, pack.id, name="Cup", category="Kitchen", item_type="base", weight=10, qty=1)
    items_repo.add_item(user_id, pack.id, name="Map", category="Navigation", item_type="base", weight=60, qty=1)

    assert sorted(gears_repo.distinct_categories(user_id)) == ["Kitchen", "Shelter"]
    assert sorted(items_repo.distinct_categories(user_id)) == ["Kitchen", "Navigation"]


def test_repository_calls_share_an_outer_transaction(user_id):
    with pytest.raises(RuntimeError):
        with app_session() as session:
            pack = lists_repo.create_list(user_id, "Doomed", session=session)
            items_repo.add_item(
                user_id, pack.id, name="Cup", category="Kitchen", item_type="base", weight=10, qty=1, session=session
            )
            raise RuntimeError("abort")

    assert lists_repo.list_lists(user_id) == []
    assert items_repo.list_user_items(user_id) == []


def test_natural_keys_in_list(user_id):
    pack = lists_repo.create_list(user_id, "Trip")
    other = lists_repo.create_list(user_id, "Other")
    items_repo.add_item(user_id, pack.id, name="Cup", category="Kitchen", item_type="base", weight=10, qty=1)
    items_repo.add_item(user_id, pack.id, name="Cup", category="Kitchen", item_type="base", weight=10, qty=2)
    items_repo.add_item(user_id, other.id, name="Map", category="Navigation", item_type="base", weight=60, qty=1)

    assert items_repo.natural_keys_in_list(user_id, pack.id) == {("Cup", "Kitchen", "base", 10)}
