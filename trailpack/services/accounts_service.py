"""Account registration.

Only creates the account row and its first list; credential verification and
password resets belong to the authentication layer.
"""
from __future__ import annotations

from typing import Any

from werkzeug.security import generate_password_hash

from trailpack.db.models import User
from trailpack.db.repositories import users_repo
from trailpack.db.repositories.users_repo import UserEmailTakenError
from trailpack.services import lists_service
from trailpack.services.errors import InvalidInputError, NotFoundError, UserExistsError
from trailpack.utils.identity import normalize_email
from trailpack.utils.logging import get_logger

LOG = get_logger("accounts_service")

MIN_PASSWORD_LENGTH = 6


def register_user(email: Any, password: Any) -> User:
    normalized = normalize_email(email)
    if not normalized:
        raise InvalidInputError("email_required")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInputError("password_too_short")
    if users_repo.get_user_by_email(normalized):
        raise UserExistsError("user_exists")
    try:
        user = users_repo.create_user(normalized, generate_password_hash(password))
    except UserEmailTakenError as exc:
        raise UserExistsError("user_exists") from exc
    default = lists_service.ensure_default_list(user.id)
    LOG.info("Registered user_id=%s default_list_id=%s", user.id, default.id)
    return user


def get_user(user_id: int) -> User:
    user = users_repo.get_user(user_id)
    if not user:
        raise NotFoundError("user_missing")
    return user


__all__ = ["MIN_PASSWORD_LENGTH", "register_user", "get_user"]
