"""Repository helpers for user accounts."""
from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError

from trailpack.db import app_session
from trailpack.db.models import User


class UserEmailTakenError(Exception):
    """Raised when attempting to insert a duplicate email."""


def get_user(user_id: int) -> Optional[User]:
    with app_session() as session:
        return session.query(User).filter(User.id == user_id).one_or_none()


def get_user_by_email(email: str) -> Optional[User]:
    with app_session() as session:
        return session.query(User).filter(User.email == email).one_or_none()


def create_user(email: str, password_hash: str) -> User:
    user = User(email=email, password_hash=password_hash)
    try:
        with app_session() as session:
            session.add(user)
    except IntegrityError as exc:
        raise UserEmailTakenError("User already exists for email") from exc
    return user


__all__ = [
    "UserEmailTakenError",
    "get_user",
    "get_user_by_email",
    "create_user",
]
