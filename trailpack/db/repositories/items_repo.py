"""Repository helpers for list items.

Bulk helpers matching on the natural key return the number of rows touched
and never consult the catalog.
"""
from __future__ import annotations

from typing import List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from trailpack.db import session_scope
from trailpack.db.models import Item


def list_items(user_id: int, list_id: int, *, session: Optional[Session] = None) -> List[Item]:
    with session_scope(session) as sess:
        return (
            sess.query(Item)
            .filter(Item.user_id == user_id, Item.list_id == list_id)
            .order_by(Item.id.desc())
            .all()
        )


def list_user_items(user_id: int, *, session: Optional[Session] = None) -> List[Item]:
    with session_scope(session) as sess:
        return sess.query(Item).filter(Item.user_id == user_id).order_by(Item.id.asc()).all()


def get_item(user_id: int, item_id: int, *, session: Optional[Session] = None) -> Optional[Item]:
    with session_scope(session) as sess:
        return (
            sess.query(Item)
            .filter(Item.id == item_id, Item.user_id == user_id)
            .one_or_none()
        )


def add_item(
    user_id: int,
    list_id: int,
    *,
    name: str,
    category: str,
    item_type: str,
    weight: int,
    qty: int,
    description: str = "",
    session: Optional[Session] = None,
) -> Item:
    item = Item(
        user_id=user_id,
        list_id=list_id,
        name=name,
        description=description,
        category=category,
        item_type=item_type,
        weight=weight,
        qty=qty,
    )
    with session_scope(session) as sess:
        sess.add(item)
        sess.flush()
    return item


def copy_items(user_id: int, source_list_id: int, target_list_id: int, *, session: Optional[Session] = None) -> int:
    """Insert a fresh copy of every item of one list into another."""
    with session_scope(session) as sess:
        source = (
            sess.query(Item)
            .filter(Item.user_id == user_id, Item.list_id == source_list_id)
            .order_by(Item.id.asc())
            .all()
        )
        for row in source:
            sess.add(
                Item(
                    user_id=user_id,
                    list_id=target_list_id,
                    name=row.name,
                    description=row.description,
                    category=row.category,
                    item_type=row.item_type,
                    weight=row.weight,
                    qty=row.qty,
                )
            )
        sess.flush()
        return len(source)


def update_weight_by_key(
    user_id: int,
    key: Tuple[str, str, str, int],
    new_weight: int,
    *,
    session: Optional[Session] = None,
) -> int:
    name, category, item_type, weight = key
    with session_scope(session) as sess:
        updated = (
            sess.query(Item)
            .filter(
                Item.user_id == user_id,
                Item.name == name,
                Item.category == category,
                Item.item_type == item_type,
                Item.weight == weight,
            )
            .update({Item.weight: new_weight}, synchronize_session=False)
        )
        return int(updated or 0)


def update_description_by_key(
    user_id: int,
    key: Tuple[str, str, int],
    description: str,
    *,
    session: Optional[Session] = None,
) -> int:
    name, item_type, weight = key
    with session_scope(session) as sess:
        updated = (
            sess.query(Item)
            .filter(
                Item.user_id == user_id,
                Item.name == name,
                Item.item_type == item_type,
                Item.weight == weight,
            )
            .update({Item.description: description}, synchronize_session=False)
        )
        return int(updated or 0)


def recategorize(
    user_id: int,
    list_id: int,
    old_category: str,
    new_category: str,
    *,
    session: Optional[Session] = None,
) -> int:
    with session_scope(session) as sess:
        updated = (
            sess.query(Item)
            .filter(
                Item.user_id == user_id,
                Item.list_id == list_id,
                Item.category == old_category,
            )
            .update({Item.category: new_category}, synchronize_session=False)
        )
        return int(updated or 0)


def attach_orphans(user_id: int, list_id: int, *, session: Optional[Session] = None) -> int:
    """Assign items that predate lists to the given list."""
    with session_scope(session) as sess:
        updated = (
            sess.query(Item)
            .filter(Item.user_id == user_id, Item.list_id.is_(None))
            .update({Item.list_id: list_id}, synchronize_session=False)
        )
        return int(updated or 0)


def delete_item(user_id: int, item_id: int, *, session: Optional[Session] = None) -> bool:
    with session_scope(session) as sess:
        item = get_item(user_id, item_id, session=sess)
        if not item:
            return False
        sess.delete(item)
        return True


def clear_list(user_id: int, list_id: int, *, session: Optional[Session] = None) -> int:
    with session_scope(session) as sess:
        deleted = (
            sess.query(Item)
            .filter(Item.user_id == user_id, Item.list_id == list_id)
            .delete(synchronize_session=False)
        )
        return int(deleted or 0)


def natural_keys_in_list(user_id: int, list_id: int, *, session: Optional[Session] = None) -> Set[tuple]:
    with session_scope(session) as sess:
        rows = (
            sess.query(Item.name, Item.category, Item.item_type, Item.weight)
            .filter(Item.user_id == user_id, Item.list_id == list_id)
            .distinct()
            .all()
        )
        return {tuple(row) for row in rows}


def distinct_categories(user_id: int, *, session: Optional[Session] = None) -> List[str]:
    with session_scope(session) as sess:
        rows = sess.query(Item.category).filter(Item.user_id == user_id).distinct().all()
        return [row[0] for row in rows if row[0]]


__all__ = [
    "list_items",
    "list_user_items",
    "get_item",
    "add_item",
    "copy_items",
    "update_weight_by_key",
    "update_description_by_key",
    "recategorize",
    "attach_orphans",
    "delete_item",
    "clear_list",
    "natural_keys_in_list",
    "distinct_categories",
]
