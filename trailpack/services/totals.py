"""Pack weight totals.

Policy: ``worn`` items are on the hiker, not in the pack, so they never count
toward the carried total. Base weight counts ``base`` items only.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List

from trailpack.db.repositories import items_repo, lists_repo
from trailpack.services.errors import NotFoundError


@dataclass
class PackTotals:
    carried: int
    base: int
    worn: int
    consumable: int


@dataclass
class CategoryShare:
    category: str
    weight: int
    pct: float


def item_total(item) -> int:
    return int(item.weight) * int(item.qty)


def carried_item_total(item) -> int:
    return 0 if item.item_type == "worn" else item_total(item)


def compute_totals(items: Iterable) -> PackTotals:
    carried = base = worn = consumable = 0
    for item in items:
        weight = item_total(item)
        if item.item_type == "worn":
            worn += weight
            continue
        carried += weight
        if item.item_type == "base":
            base += weight
        elif item.item_type == "consumable":
            consumable += weight
    return PackTotals(carried=carried, base=base, worn=worn, consumable=consumable)


def category_breakdown(items: Iterable) -> List[CategoryShare]:
    """Carried weight per category, heaviest first; empty categories dropped."""
    per_category: Dict[str, int] = {}
    for item in items:
        per_category[item.category] = per_category.get(item.category, 0) + carried_item_total(item)
    total = sum(per_category.values()) or 1
    shares = [
        CategoryShare(category=category, weight=weight, pct=round(weight * 100.0 / total, 1))
        for category, weight in per_category.items()
        if weight > 0
    ]
    shares.sort(key=lambda share: (-share.weight, share.category))
    return shares


def summarize_list(user_id: int, list_id: int) -> dict:
    if lists_repo.get_list(user_id, list_id) is None:
        raise NotFoundError("list_missing")
    items = items_repo.list_items(user_id, list_id)
    return {
        "list_id": list_id,
        "item_count": len(items),
        "totals": asdict(compute_totals(items)),
        "categories": [asdict(share) for share in category_breakdown(items)],
    }


__all__ = [
    "PackTotals",
    "CategoryShare",
    "item_total",
    "carried_item_total",
    "compute_totals",
    "category_breakdown",
    "summarize_list",
]
