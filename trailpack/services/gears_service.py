"""Gear catalog listing with per-list presence."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from trailpack.db.models import Gear
from trailpack.db.repositories import gears_repo, items_repo, lists_repo
from trailpack.services import catalog_sync, fields
from trailpack.services.catalog_sync import GearCandidate
from trailpack.services.errors import NotFoundError
from trailpack.utils.logging import get_logger

LOG = get_logger("gears_service")


@dataclass
class GearView:
    id: int
    name: str
    description: str
    category: str
    type: str
    weight: int
    default_qty: int
    in_current_list: bool


def _to_view(gear: Gear, in_list: bool) -> GearView:
    return GearView(
        id=gear.id,
        name=gear.name,
        description=gear.description or "",
        category=gear.category,
        type=gear.item_type,
        weight=gear.weight,
        default_qty=gear.default_qty,
        in_current_list=in_list,
    )


def _matches(gear: Gear, needle: str) -> bool:
    return needle in (gear.name or "").lower() or needle in (gear.description or "").lower()


def list_gears(user_id: int) -> List[Gear]:
    return gears_repo.list_gears(user_id)


def list_gears_for_list(user_id: int, list_id: int, query: Optional[str] = None) -> List[GearView]:
    """Every catalog row with whether the given list already holds that gear.

    Presence is derived on each call from the list's item keys; it is
    never stored.
    """
    if lists_repo.get_list(user_id, list_id) is None:
        raise NotFoundError("list_missing")
    present = items_repo.natural_keys_in_list(user_id, list_id)
    needle = (query or "").strip().lower()
    views: List[GearView] = []
    for gear in gears_repo.list_gears(user_id):
        if needle and not _matches(gear, needle):
            continue
        views.append(_to_view(gear, gear.natural_key in present))
    return views


def upsert_gear(user_id: int, attrs: Mapping[str, Any]) -> Gear:
    candidate = GearCandidate(
        name=fields.clean_name(attrs.get("name")),
        category=fields.clean_category(attrs.get("category")),
        item_type=fields.clean_item_type(attrs.get("type", attrs.get("item_type"))),
        weight=fields.parse_weight(attrs.get("weight")),
        default_qty=fields.parse_quantity(attrs.get("default_qty", attrs.get("qty", 1))),
        description=fields.clean_description(attrs.get("description")),
    )
    return catalog_sync.upsert_catalog_entry(user_id, candidate)


def delete_gear(user_id: int, gear_id: int) -> None:
    """Forget a catalog row. Items already placed in lists stay."""
    if not gears_repo.delete_gear(user_id, gear_id):
        raise NotFoundError("gear_missing")
    LOG.info("Deleted gear user_id=%s gear_id=%s", user_id, gear_id)


__all__ = [
    "GearView",
    "list_gears",
    "list_gears_for_list",
    "upsert_gear",
    "delete_gear",
]
