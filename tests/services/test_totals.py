"""Tests for pack weight totals (worn items excluded from carried weight)."""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from trailpack.db.engine import init_engine_once, reset_for_tests
from trailpack.db.repositories import users_repo
from trailpack.services import items_service, lists_service, totals
from trailpack.services.errors import NotFoundError


def _item(category, item_type, weight, qty=1):
    return SimpleNamespace(category=category, item_type=item_type, weight=weight, qty=qty)


def test_worn_items_do_not_count_toward_carried_total():
    items = [
        _item("Shelter", "base", 1200),
        _item("Water", "base", 40, qty=2),
        _item("Food", "consumable", 700, qty=3),
        _item("Clothing", "worn", 300),
    ]

    result = totals.compute_totals(items)

    assert result.carried == 1200 + 80 + 2100
    assert result.base == 1280
    assert result.consumable == 2100
    assert result.worn == 300


def test_empty_list_totals_are_zero():
    result = totals.compute_totals([])

    assert (result.carried, result.base, result.worn, result.consumable) == (0, 0, 0, 0)
    assert totals.category_breakdown([]) == []


def test_category_breakdown_sorted_and_drops_worn_only_categories():
    items = [
        _item("Shelter", "base", 750),
        _item("Kitchen", "base", 125),
        _item("Kitchen", "consumable", 125),
        _item("Clothing", "worn", 400),
    ]

    shares = totals.category_breakdown(items)

    assert [(share.category, share.weight, share.pct) for share in shares] == [
        ("Shelter", 750, 75.0),
        ("Kitchen", 250, 25.0),
    ]


@pytest.fixture
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("TRAILPACK_DB_PATH", ":memory:")
    monkeypatch.delenv("TRAILPACK_DATABASE_URL", raising=False)
    monkeypatch.setenv("TRAILPACK_SEED_STARTER_DATA", "false")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_summarize_list(in_memory_db):
    user_id = users_repo.create_user("hiker@example.com", "hash").id
    pack = lists_service.ensure_default_list(user_id).id
    items_service.create_item(user_id, pack, {"name": "Tent", "category": "Shelter", "weight": 1200, "qty": 1})
    items_service.create_item(user_id, pack, {"name": "Boots", "category": "Clothing", "type": "worn", "weight": 900, "qty": 1})

    summary = totals.summarize_list(user_id, pack)

    assert summary["item_count"] == 2
    assert summary["totals"] == {"carried": 1200, "base": 1200, "worn": 900, "consumable": 0}
    assert summary["categories"] == [{"category": "Shelter", "weight": 1200, "pct": 100.0}]
    with pytest.raises(NotFoundError):
        totals.summarize_list(user_id, 555)
