"""Tests for account registration and first-list seeding."""
from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from trailpack.db.engine import init_engine_once, reset_for_tests
from trailpack.db.repositories import users_repo
from trailpack.services import accounts_service, gears_service, lists_service
from trailpack.services.errors import InvalidInputError, NotFoundError, UserExistsError
from trailpack.services.starter_data import STARTER_GEAR


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("TRAILPACK_DB_PATH", ":memory:")
    monkeypatch.delenv("TRAILPACK_DATABASE_URL", raising=False)
    monkeypatch.delenv("TRAILPACK_SEED_STARTER_DATA", raising=False)
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_register_user_hashes_password_and_seeds_default_list():
    user = accounts_service.register_user(" Hiker@Example.com ", "secret1")

    assert user.email == "hiker@example.com"
    stored = users_repo.get_user_by_email("hiker@example.com")
    assert stored.password_hash != "secret1"
    assert check_password_hash(stored.password_hash, "secret1")

    lists = lists_service.list_lists(user.id)
    assert len(lists) == 1
    assert len(gears_service.list_gears(user.id)) == len(STARTER_GEAR)


def test_every_account_gets_the_same_starter_set():
    first = accounts_service.register_user("a@example.com", "secret1")
    second = accounts_service.register_user("b@example.com", "secret2")

    def keys(user_id):
        return sorted(gear.natural_key for gear in gears_service.list_gears(user_id))

    assert keys(first.id) == keys(second.id)


def test_register_duplicate_email():
    accounts_service.register_user("hiker@example.com", "secret1")

    with pytest.raises(UserExistsError):
        accounts_service.register_user("HIKER@example.com", "secret2")


@pytest.mark.parametrize("email, password", [("", "secret1"), (None, "secret1"), ("a@example.com", "12345")])
def test_register_validation(email, password):
    with pytest.raises(InvalidInputError):
        accounts_service.register_user(email, password)


def test_get_user():
    user = accounts_service.register_user("hiker@example.com", "secret1")

    assert accounts_service.get_user(user.id).email == "hiker@example.com"
    with pytest.raises(NotFoundError):
        accounts_service.get_user(user.id + 100)
