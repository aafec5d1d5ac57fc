"""Repository helpers for packing lists."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from trailpack.db import session_scope
from trailpack.db.models import PackList


def list_lists(user_id: int, *, session: Optional[Session] = None) -> List[PackList]:
    with session_scope(session) as sess:
        return (
            sess.query(PackList)
            .filter(PackList.user_id == user_id)
            .order_by(PackList.created_at.asc(), PackList.id.asc())
            .all()
        )


def first_list(user_id: int, *, session: Optional[Session] = None) -> Optional[PackList]:
    """Oldest list of the user (creation order, id as tie-breaker)."""
    with session_scope(session) as sess:
        return (
            sess.query(PackList)
            .filter(PackList.user_id == user_id)
            .order_by(PackList.created_at.asc(), PackList.id.asc())
            .first()
        )


def count_lists(user_id: int, *, session: Optional[Session] = None) -> int:
    with session_scope(session) as sess:
        return sess.query(PackList).filter(PackList.user_id == user_id).count()


def get_list(user_id: int, list_id: int, *, session: Optional[Session] = None) -> Optional[PackList]:
    with session_scope(session) as sess:
        return (
            sess.query(PackList)
            .filter(PackList.id == list_id, PackList.user_id == user_id)
            .one_or_none()
        )


def create_list(user_id: int, name: str, *, session: Optional[Session] = None) -> PackList:
    pack_list = PackList(user_id=user_id, name=name)
    with session_scope(session) as sess:
        sess.add(pack_list)
        sess.flush()
    return pack_list


def rename_list(user_id: int, list_id: int, name: str, *, session: Optional[Session] = None) -> Optional[PackList]:
    with session_scope(session) as sess:
        pack_list = get_list(user_id, list_id, session=sess)
        if not pack_list:
            return None
        pack_list.name = name
        return pack_list


def delete_list(user_id: int, list_id: int, *, session: Optional[Session] = None) -> bool:
    with session_scope(session) as sess:
        pack_list = get_list(user_id, list_id, session=sess)
        if not pack_list:
            return False
        sess.delete(pack_list)
        return True


__all__ = [
    "list_lists",
    "first_list",
    "count_lists",
    "get_list",
    "create_list",
    "rename_list",
    "delete_list",
]
