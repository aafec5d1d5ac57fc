"""Repository helpers for the per-user gear catalog."""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from trailpack.db import session_scope
from trailpack.db.models import Gear


def list_gears(user_id: int, *, session: Optional[Session] = None) -> List[Gear]:
    with session_scope(session) as sess:
        return (
            sess.query(Gear)
            .filter(Gear.user_id == user_id)
            .order_by(Gear.updated_at.desc(), Gear.id.desc())
            .all()
        )


def get_gear(user_id: int, gear_id: int, *, session: Optional[Session] = None) -> Optional[Gear]:
    with session_scope(session) as sess:
        return (
            sess.query(Gear)
            .filter(Gear.id == gear_id, Gear.user_id == user_id)
            .one_or_none()
        )


def find_by_key(
    user_id: int,
    key: Tuple[str, str, str, int],
    *,
    session: Optional[Session] = None,
) -> Optional[Gear]:
    name, category, item_type, weight = key
    with session_scope(session) as sess:
        return (
            sess.query(Gear)
            .filter(
                Gear.user_id == user_id,
                Gear.name == name,
                Gear.category == category,
                Gear.item_type == item_type,
                Gear.weight == weight,
            )
            .one_or_none()
        )


def add_gear(
    user_id: int,
    *,
    name: str,
    category: str,
    item_type: str,
    weight: int,
    default_qty: int,
    description: str = "",
    session: Optional[Session] = None,
) -> Gear:
    gear = Gear(
        user_id=user_id,
        name=name,
        description=description,
        category=category,
        item_type=item_type,
        weight=weight,
        default_qty=default_qty,
    )
    with session_scope(session) as sess:
        sess.add(gear)
        sess.flush()
    return gear


def update_description_by_key(
    user_id: int,
    key: Tuple[str, str, int],
    description: str,
    *,
    session: Optional[Session] = None,
) -> int:
    name, item_type, weight = key
    with session_scope(session) as sess:
        rows = (
            sess.query(Gear)
            .filter(
                Gear.user_id == user_id,
                Gear.name == name,
                Gear.item_type == item_type,
                Gear.weight == weight,
            )
            .all()
        )
        for row in rows:
            row.description = description
        return len(rows)


def delete_gear(user_id: int, gear_id: int, *, session: Optional[Session] = None) -> bool:
    with session_scope(session) as sess:
        gear = get_gear(user_id, gear_id, session=sess)
        if not gear:
            return False
        sess.delete(gear)
        return True


def distinct_categories(user_id: int, *, session: Optional[Session] = None) -> List[str]:
    with session_scope(session) as sess:
        rows = sess.query(Gear.category).filter(Gear.user_id == user_id).distinct().all()
        return [row[0] for row in rows if row[0]]


__all__ = [
    "list_gears",
    "get_gear",
    "find_by_key",
    "add_gear",
    "update_description_by_key",
    "delete_gear",
    "distinct_categories",
]
