"""Item edit pipeline.

Category, type and quantity edits touch one row. Weight and description
edits are shared by every copy of the gear and go through
:mod:`trailpack.services.catalog_sync`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from trailpack.db import app_session
from trailpack.db.models import Item
from trailpack.db.repositories import gears_repo, items_repo, lists_repo
from trailpack.services import catalog_sync, fields
from trailpack.services.catalog_sync import GearCandidate
from trailpack.services.errors import InvalidInputError, NotFoundError, SyncFailedError
from trailpack.utils.constants import UNCATEGORIZED
from trailpack.utils.locks import user_lock
from trailpack.utils.logging import get_logger

LOG = get_logger("items_service")


@dataclass
class NewItem:
    name: str
    category: str
    item_type: str
    weight: int
    qty: int
    description: str = ""

    @classmethod
    def from_payload(cls, attrs: Mapping[str, Any]) -> "NewItem":
        return cls(
            name=fields.clean_name(attrs.get("name")),
            category=fields.clean_category(attrs.get("category")),
            item_type=fields.clean_item_type(attrs.get("type", attrs.get("item_type"))),
            weight=fields.parse_weight(attrs.get("weight")),
            qty=fields.parse_quantity(attrs.get("qty", attrs.get("quantity"))),
            description=fields.clean_description(attrs.get("description")),
        )


@dataclass
class ItemUpdate:
    """Partial item edit; only the fields that are not None are applied.

    Present fields are normalized and validated on construction, so an
    invalid value is rejected before anything is written.

    Fields are applied in the order category, type, quantity, description,
    weight, so the shared edits run against the item's final key.
    """

    category: Optional[str] = None
    item_type: Optional[str] = None
    qty: Optional[int] = None
    description: Optional[str] = None
    weight: Optional[int] = None

    def __post_init__(self) -> None:
        if self.category is not None:
            self.category = fields.clean_category(self.category)
        if self.item_type is not None:
            self.item_type = fields.clean_item_type(self.item_type, default=None)
        if self.qty is not None:
            self.qty = fields.parse_quantity(self.qty)
        if self.description is not None:
            self.description = fields.clean_description(self.description)
        if self.weight is not None:
            self.weight = fields.parse_weight(self.weight)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ItemUpdate":
        changes = {}
        if "category" in payload:
            changes["category"] = fields.clean_category(payload["category"])
        if "type" in payload or "item_type" in payload:
            raw = payload["type"] if "type" in payload else payload["item_type"]
            changes["item_type"] = fields.clean_item_type(raw, default=None)
        if "qty" in payload or "quantity" in payload:
            changes["qty"] = fields.parse_quantity(payload["qty"] if "qty" in payload else payload["quantity"])
        if "description" in payload:
            changes["description"] = fields.clean_description(payload["description"])
        if "weight" in payload:
            changes["weight"] = fields.parse_weight(payload["weight"])
        update = cls(**changes)
        if update.is_empty():
            raise InvalidInputError("no_fields")
        return update

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (self.category, self.item_type, self.qty, self.description, self.weight)
        )


def _require_list(user_id: int, list_id: int, session=None) -> None:
    if lists_repo.get_list(user_id, list_id, session=session) is None:
        raise NotFoundError("list_missing")


def list_items(user_id: int, list_id: int) -> List[Item]:
    _require_list(user_id, list_id)
    return items_repo.list_items(user_id, list_id)


def create_item(user_id: int, list_id: int, attrs: Mapping[str, Any]) -> Item:
    """Validate, remember the gear in the catalog and add it to the list."""
    new_item = NewItem.from_payload(attrs)
    try:
        with app_session() as sess:
            _require_list(user_id, list_id, session=sess)
            catalog_sync.upsert_catalog_entry(
                user_id,
                GearCandidate(
                    name=new_item.name,
                    category=new_item.category,
                    item_type=new_item.item_type,
                    weight=new_item.weight,
                    default_qty=new_item.qty,
                    description=new_item.description,
                ),
                session=sess,
            )
            item = items_repo.add_item(
                user_id,
                list_id,
                name=new_item.name,
                description=new_item.description,
                category=new_item.category,
                item_type=new_item.item_type,
                weight=new_item.weight,
                qty=new_item.qty,
                session=sess,
            )
    except SQLAlchemyError as exc:
        LOG.warning("Item create rolled back user_id=%s list_id=%s", user_id, list_id, exc_info=True)
        raise SyncFailedError("item_create_failed") from exc
    LOG.info("Created item user_id=%s list_id=%s item_id=%s key=%s", user_id, list_id, item.id, item.natural_key)
    return item


def add_gear_to_list(user_id: int, gear_id: int, list_id: int, qty: Any = None) -> Item:
    """Place a catalog entry into a list as a new item."""
    gear = gears_repo.get_gear(user_id, gear_id)
    if gear is None:
        raise NotFoundError("gear_missing")
    return create_item(
        user_id,
        list_id,
        {
            "name": gear.name,
            "description": gear.description,
            "category": gear.category,
            "type": gear.item_type,
            "weight": gear.weight,
            "qty": gear.default_qty if qty is None else qty,
        },
    )


def update_category(user_id: int, item_id: int, category: Any) -> Item:
    return update_item(user_id, item_id, ItemUpdate(category=fields.clean_category(category)))


def update_type(user_id: int, item_id: int, item_type: Any) -> Item:
    return update_item(user_id, item_id, ItemUpdate(item_type=fields.clean_item_type(item_type, default=None)))


def update_quantity(user_id: int, item_id: int, qty: Any) -> Item:
    return update_item(user_id, item_id, ItemUpdate(qty=fields.parse_quantity(qty)))


def update_weight(user_id: int, item_id: int, weight: Any) -> Item:
    return catalog_sync.propagate_weight_change(user_id, item_id, weight)


def update_description(user_id: int, item_id: int, description: Any) -> Item:
    return catalog_sync.propagate_description_change(user_id, item_id, description)


def update_item(user_id: int, item_id: int, update: ItemUpdate) -> Item:
    """Apply a partial edit as one transaction and return the fresh row.

    Local fields land first, then the description and weight fan-outs run
    against the item's final key. Any database failure rolls back every
    field and surfaces as ``SyncFailedError``.
    """
    if update.is_empty():
        raise InvalidInputError("no_fields")
    with user_lock(user_id):
        try:
            with app_session() as sess:
                item = items_repo.get_item(user_id, item_id, session=sess)
                if item is None:
                    raise NotFoundError("item_missing")
                local_changes = {}
                if update.category is not None and update.category != item.category:
                    local_changes["category"] = update.category
                if update.item_type is not None and update.item_type != item.item_type:
                    local_changes["item_type"] = update.item_type
                if update.qty is not None and update.qty != item.qty:
                    local_changes["qty"] = update.qty
                for attr, value in local_changes.items():
                    setattr(item, attr, value)
                sess.flush()
                if update.description is not None:
                    catalog_sync.fan_out_description(sess, user_id, item, update.description)
                if update.weight is not None:
                    catalog_sync.fan_out_weight(sess, user_id, item, update.weight)
        except SQLAlchemyError as exc:
            LOG.warning("Item update rolled back user_id=%s item_id=%s", user_id, item_id, exc_info=True)
            raise SyncFailedError("item_update_failed") from exc
    LOG.debug(
        "Updated item user_id=%s item_id=%s local=%s description=%s weight=%s",
        user_id,
        item_id,
        sorted(local_changes),
        update.description is not None,
        update.weight is not None,
    )
    return item


def delete_item(user_id: int, item_id: int) -> None:
    """Remove one item; the catalog keeps remembering the gear."""
    if not items_repo.delete_item(user_id, item_id):
        raise NotFoundError("item_missing")


def clear_list(user_id: int, list_id: int) -> int:
    _require_list(user_id, list_id)
    deleted = items_repo.clear_list(user_id, list_id)
    LOG.info("Cleared list user_id=%s list_id=%s items=%s", user_id, list_id, deleted)
    return deleted


def rename_category(user_id: int, list_id: int, old_category: Any, new_category: Any) -> int:
    """Re-file every item of one list from one category label to another."""
    source = fields.clean_category(old_category)
    target = fields.clean_category(new_category)
    if source == target:
        return 0
    with app_session() as sess:
        _require_list(user_id, list_id, session=sess)
        return items_repo.recategorize(user_id, list_id, source, target, session=sess)


def list_categories(user_id: int) -> List[str]:
    labels = set(items_repo.distinct_categories(user_id))
    labels.update(gears_repo.distinct_categories(user_id))
    labels.discard(UNCATEGORIZED)
    return [UNCATEGORIZED] + sorted(labels)


__all__ = [
    "NewItem",
    "ItemUpdate",
    "list_items",
    "create_item",
    "add_gear_to_list",
    "update_category",
    "update_type",
    "update_quantity",
    "update_weight",
    "update_description",
    "update_item",
    "delete_item",
    "clear_list",
    "rename_category",
    "list_categories",
]
