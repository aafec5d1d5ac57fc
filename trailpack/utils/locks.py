"""In-process per-user locks.

Serializes multi-step operations of one account inside a single process.
Other processes still rely on the database transaction isolation alone.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator

_LOCK = threading.Lock()
_USER_LOCKS: Dict[int, threading.RLock] = {}


def _lock_for(user_id: int) -> threading.RLock:
    with _LOCK:
        lock = _USER_LOCKS.get(user_id)
        if lock is None:
            lock = threading.RLock()
            _USER_LOCKS[user_id] = lock
        return lock


@contextmanager
def user_lock(user_id: int) -> Iterator[None]:
    lock = _lock_for(int(user_id))
    with lock:
        yield


def reset_for_tests() -> None:
    with _LOCK:
        _USER_LOCKS.clear()


__all__ = ["user_lock", "reset_for_tests"]
