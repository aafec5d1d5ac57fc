"""Packing list lifecycle.

Keeps the standing rule that every user owns at least one list: the first
list is created lazily on first access and the last list cannot be deleted.
"""
from __future__ import annotations

from typing import Any, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trailpack import config as app_config
from trailpack.db import app_session
from trailpack.db.models import PackList
from trailpack.db.repositories import items_repo, lists_repo
from trailpack.services import fields
from trailpack.services.catalog_sync import GearCandidate, upsert_catalog_entry
from trailpack.services.errors import CloneFailedError, LastListProtectedError, NotFoundError
from trailpack.services.starter_data import STARTER_GEAR
from trailpack.utils.locks import user_lock
from trailpack.utils.logging import get_logger

LOG = get_logger("lists_service")


def _seed_starter_gear(session: Session, user_id: int, list_id: int) -> int:
    for row in STARTER_GEAR:
        upsert_catalog_entry(
            user_id,
            GearCandidate(
                name=row.name,
                category=row.category,
                item_type=row.item_type,
                weight=row.weight,
                default_qty=row.qty,
                description=row.description,
            ),
            session=session,
        )
        items_repo.add_item(
            user_id,
            list_id,
            name=row.name,
            description=row.description,
            category=row.category,
            item_type=row.item_type,
            weight=row.weight,
            qty=row.qty,
            session=session,
        )
    return len(STARTER_GEAR)


def ensure_default_list(user_id: int) -> PackList:
    """Return the user's first list, creating and seeding it when none exists.

    Also attaches items without a list (rows from the single-list schema) to
    the returned list. Safe to call repeatedly.
    """
    with user_lock(user_id):
        with app_session() as sess:
            default = lists_repo.first_list(user_id, session=sess)
            if default is None:
                default = lists_repo.create_list(user_id, fields.clean_list_name(app_config.default_list_name()), session=sess)
                seeded = 0
                if app_config.seed_starter_data():
                    seeded = _seed_starter_gear(sess, user_id, default.id)
                LOG.info("Created default list user_id=%s list_id=%s seeded=%s", user_id, default.id, seeded)
            repaired = items_repo.attach_orphans(user_id, default.id, session=sess)
            if repaired:
                LOG.info("Attached %s orphaned items to list_id=%s user_id=%s", repaired, default.id, user_id)
            return default


def list_lists(user_id: int) -> List[PackList]:
    ensure_default_list(user_id)
    return lists_repo.list_lists(user_id)


def get_list(user_id: int, list_id: int) -> PackList:
    pack_list = lists_repo.get_list(user_id, list_id)
    if not pack_list:
        raise NotFoundError("list_missing")
    return pack_list


def create_list(user_id: int, name: Any) -> PackList:
    pack_list = lists_repo.create_list(user_id, fields.clean_list_name(name))
    LOG.info("Created list user_id=%s list_id=%s", user_id, pack_list.id)
    return pack_list


def rename_list(user_id: int, list_id: int, name: Any) -> PackList:
    pack_list = lists_repo.rename_list(user_id, list_id, fields.clean_list_name(name))
    if not pack_list:
        raise NotFoundError("list_missing")
    return pack_list


def clone_list(user_id: int, source_list_id: int, name: Any) -> PackList:
    """Copy a list and all of its items into a new list in one transaction.

    The catalog is shared across lists and is left alone.
    """
    clean_name = fields.clean_list_name(name)
    with user_lock(user_id):
        try:
            with app_session() as sess:
                source = lists_repo.get_list(user_id, source_list_id, session=sess)
                if source is None:
                    raise NotFoundError("list_missing")
                clone = lists_repo.create_list(user_id, clean_name, session=sess)
                copied = items_repo.copy_items(user_id, source.id, clone.id, session=sess)
        except SQLAlchemyError as exc:
            LOG.warning("Clone rolled back user_id=%s source_list_id=%s", user_id, source_list_id, exc_info=True)
            raise CloneFailedError("clone_failed") from exc
    LOG.info("Cloned list user_id=%s source=%s clone=%s items=%s", user_id, source_list_id, clone.id, copied)
    return clone


def delete_list(user_id: int, list_id: int) -> List[PackList]:
    """Delete a list with its items; refuses to remove the user's only list.

    Returns the remaining lists in creation order.
    """
    with user_lock(user_id):
        with app_session() as sess:
            pack_list = lists_repo.get_list(user_id, list_id, session=sess)
            if pack_list is None:
                raise NotFoundError("list_missing")
            if lists_repo.count_lists(user_id, session=sess) <= 1:
                raise LastListProtectedError("last_list_protected")
            removed = items_repo.clear_list(user_id, list_id, session=sess)
            lists_repo.delete_list(user_id, list_id, session=sess)
    LOG.info("Deleted list user_id=%s list_id=%s items=%s", user_id, list_id, removed)
    return lists_repo.list_lists(user_id)


__all__ = [
    "ensure_default_list",
    "list_lists",
    "get_list",
    "create_list",
    "rename_list",
    "clone_list",
    "delete_list",
]
