"""Tests for email normalization and per-user locks."""
from __future__ import annotations

import threading

from trailpack.utils import locks
from trailpack.utils.identity import normalize_email


def test_normalize_email():
    assert normalize_email("  Hiker@Example.COM ") == "hiker@example.com"
    assert normalize_email("   ") is None
    assert normalize_email(42) is None


def test_user_lock_is_reentrant_and_per_user():
    locks.reset_for_tests()
    entered = threading.Event()
    other_done = threading.Event()

    def other_user():
        with locks.user_lock(2):
            entered.set()
        other_done.set()

    with locks.user_lock(1):
        with locks.user_lock(1):
            worker = threading.Thread(target=other_user)
            worker.start()
            assert other_done.wait(timeout=5)
    worker.join(timeout=5)
    assert entered.is_set()


def test_user_lock_serializes_same_user():
    locks.reset_for_tests()
    order = []
    started = threading.Event()

    def contender():
        started.set()
        with locks.user_lock(5):
            order.append("contender")

    with locks.user_lock(5):
        worker = threading.Thread(target=contender)
        worker.start()
        assert started.wait(timeout=5)
        order.append("holder")
    worker.join(timeout=5)

    assert order == ["holder", "contender"]
