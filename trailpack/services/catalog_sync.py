"""Catalog synchronizer.

Items are not linked to catalog rows by id. Two rows describe the same gear
when their natural key ``(name, category, type, weight)`` matches; for
descriptions the coarser ``(name, type, weight)`` key is used so the same
gear filed under different categories shares one description.

Every propagation runs as one transaction: item fan-out and catalog merge
commit together or not at all.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trailpack.db import app_session
from trailpack.db.models import Gear, Item
from trailpack.db.repositories import gears_repo, items_repo
from trailpack.services import fields
from trailpack.services.errors import NotFoundError, SyncFailedError
from trailpack.utils.locks import user_lock
from trailpack.utils.logging import get_logger

LOG = get_logger("catalog_sync")


@dataclass
class GearCandidate:
    name: str
    category: str
    item_type: str
    weight: int
    default_qty: int = 1
    description: str = ""

    @property
    def natural_key(self) -> tuple:
        return (self.name, self.category, self.item_type, self.weight)

    @classmethod
    def from_item(cls, item: Item) -> "GearCandidate":
        return cls(
            name=item.name,
            category=item.category,
            item_type=item.item_type,
            weight=item.weight,
            default_qty=item.qty,
            description=item.description or "",
        )


def _merge_candidate(session: Session, user_id: int, candidate: GearCandidate) -> Gear:
    existing = gears_repo.find_by_key(user_id, candidate.natural_key, session=session)
    if existing is None:
        return gears_repo.add_gear(
            user_id,
            name=candidate.name,
            description=candidate.description,
            category=candidate.category,
            item_type=candidate.item_type,
            weight=candidate.weight,
            default_qty=candidate.default_qty,
            session=session,
        )
    if candidate.default_qty > existing.default_qty:
        existing.default_qty = candidate.default_qty
    if existing.description != candidate.description:
        existing.description = candidate.description
    return existing


def upsert_catalog_entry(
    user_id: int,
    candidate: GearCandidate,
    *,
    session: Optional[Session] = None,
) -> Gear:
    """Insert the candidate's catalog row or fold it into the existing one.

    The stored default quantity only grows (``max`` of both) and the
    description is taken from the candidate. When ``session`` is given the
    write joins that transaction and database errors surface to its owner.
    """
    if session is not None:
        return _merge_candidate(session, user_id, candidate)
    try:
        with app_session() as sess:
            return _merge_candidate(sess, user_id, candidate)
    except SQLAlchemyError as exc:
        LOG.warning("Catalog upsert rolled back user_id=%s key=%s", user_id, candidate.natural_key, exc_info=True)
        raise SyncFailedError("catalog_upsert_failed") from exc


def _fold_weight_change(session: Session, user_id: int, item: Item, old_key: tuple, new_weight: int) -> Gear:
    name, category, item_type, _old_weight = old_key
    new_key = (name, category, item_type, new_weight)
    previous = gears_repo.find_by_key(user_id, old_key, session=session)
    target = gears_repo.find_by_key(user_id, new_key, session=session)

    if previous is not None:
        candidate = GearCandidate(
            name=name,
            category=category,
            item_type=item_type,
            weight=new_weight,
            default_qty=previous.default_qty,
            description=previous.description or "",
        )
    else:
        candidate = GearCandidate(
            name=name,
            category=category,
            item_type=item_type,
            weight=new_weight,
            default_qty=item.qty,
            description=item.description or "",
        )

    if target is not None:
        merged = _merge_candidate(session, user_id, candidate)
        if previous is not None and previous.id != merged.id:
            session.delete(previous)
        return merged
    if previous is not None:
        previous.weight = new_weight
        return previous
    # Catalog row was deleted by the user; remember the gear again.
    return _merge_candidate(session, user_id, candidate)


def fan_out_weight(session: Session, user_id: int, item: Item, weight: int) -> Optional[tuple]:
    """Move every copy of ``item``'s gear to ``weight`` inside ``session``.

    Returns ``(old_key, items_touched, gear)`` or None when the weight is
    already current. The caller owns the transaction.
    """
    if item.weight == weight:
        return None
    old_key = item.natural_key
    touched = items_repo.update_weight_by_key(user_id, old_key, weight, session=session)
    gear = _fold_weight_change(session, user_id, item, old_key, weight)
    session.flush()
    session.refresh(item)
    return old_key, touched, gear


def fan_out_description(session: Session, user_id: int, item: Item, description: str) -> tuple:
    """Write ``description`` to every item and catalog row sharing the gear.

    Always runs over the whole ``(name, type, weight)`` group, so copies that
    drifted apart are brought back in line even when ``item`` already holds
    the text. Returns ``(key, items_touched, gears_touched)``.
    """
    key = item.description_key
    touched = items_repo.update_description_by_key(user_id, key, description, session=session)
    gears = gears_repo.update_description_by_key(user_id, key, description, session=session)
    session.flush()
    session.refresh(item)
    return key, touched, gears


def propagate_weight_change(user_id: int, item_id: int, new_weight: Any) -> Item:
    """Change the weight of one gear across every list and the catalog.

    All items of the user sharing the edited item's pre-edit natural key get
    the new weight, and the catalog row follows (merged into an existing row
    for the new key when there is one). Returns the freshly read item.
    """
    weight = fields.parse_weight(new_weight)
    with user_lock(user_id):
        try:
            with app_session() as sess:
                item = items_repo.get_item(user_id, item_id, session=sess)
                if item is None:
                    raise NotFoundError("item_missing")
                outcome = fan_out_weight(sess, user_id, item, weight)
        except SQLAlchemyError as exc:
            LOG.warning("Weight propagation rolled back user_id=%s item_id=%s", user_id, item_id, exc_info=True)
            raise SyncFailedError("weight_sync_failed") from exc
    if outcome is None:
        LOG.debug("Weight unchanged user_id=%s item_id=%s weight=%s", user_id, item_id, weight)
        return item
    old_key, touched, gear = outcome
    LOG.info(
        "Propagated weight user_id=%s key=%s new_weight=%s items=%s gear_id=%s",
        user_id,
        old_key,
        weight,
        touched,
        gear.id,
    )
    return item


def propagate_description_change(user_id: int, item_id: int, new_description: Any) -> Item:
    """Share a description edit with every copy of the same gear.

    Matches on ``(name, type, weight)``: category is ignored so the gear keeps
    one description no matter where it is filed.
    """
    description = fields.clean_description(new_description)
    with user_lock(user_id):
        try:
            with app_session() as sess:
                item = items_repo.get_item(user_id, item_id, session=sess)
                if item is None:
                    raise NotFoundError("item_missing")
                key, touched, gears = fan_out_description(sess, user_id, item, description)
        except SQLAlchemyError as exc:
            LOG.warning("Description propagation rolled back user_id=%s item_id=%s", user_id, item_id, exc_info=True)
            raise SyncFailedError("description_sync_failed") from exc
    LOG.info("Propagated description user_id=%s key=%s items=%s gears=%s", user_id, key, touched, gears)
    return item


__all__ = [
    "GearCandidate",
    "upsert_catalog_entry",
    "fan_out_weight",
    "fan_out_description",
    "propagate_weight_change",
    "propagate_description_change",
]
