"""Database engine & session management.

One lazily created engine per process. The backend is chosen by URL only
(SQLite by default, PostgreSQL via ``TRAILPACK_DATABASE_URL``); nothing above
this module branches on the driver.
"""
from __future__ import annotations

import os, threading
try:  # POSIX file locking for multi-worker schema bootstrap
    import fcntl  # type: ignore
except ImportError:  # pragma: no cover - non-POSIX fallback
    fcntl = None  # type: ignore
from contextlib import contextmanager
from typing import Optional, Iterator, Callable

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, scoped_session, Session as SASession

from trailpack.utils.logging import get_logger
from trailpack.db.models import Base
from trailpack import config as app_config

_engine: Optional[Engine] = None
_SessionFactory: Optional[Callable[[], SASession]] = None
_scoped: Optional[scoped_session] = None
_LOCK = threading.Lock()

LOG = get_logger("trailpack.db")


def _sqlite_file(url) -> Optional[str]:
    if url.get_backend_name() != "sqlite":
        return None
    database = url.database or ""
    if not database or database == ":memory:":
        return None
    return database


def init_engine_once() -> None:
    global _engine, _SessionFactory, _scoped
    if _engine is not None:
        return
    with _LOCK:
        if _engine is not None:
            return
        url = make_url(app_config.get_database_url())
        LOG.info("Initializing database engine %s", app_config.summarize_runtime_config())
        db_file = _sqlite_file(url)
        lock_dir = None
        if db_file is not None:
            lock_dir = os.path.dirname(os.path.abspath(db_file)) or "."
            os.makedirs(lock_dir, exist_ok=True)
            if not os.access(lock_dir, os.W_OK):
                raise RuntimeError(f"trailpack DB directory not writable: {lock_dir}")
            _engine = create_engine(url, future=True)
        elif url.get_backend_name() == "sqlite":
            _engine = create_engine(url, future=True)
        else:
            _engine = create_engine(url, future=True, pool_pre_ping=True)
        _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False, class_=SASession)
        _scoped = scoped_session(_SessionFactory)
        # Cross-process lock so several workers sharing one SQLite file do not
        # race between the existence check and the DDL emit.
        if lock_dir is not None and fcntl is not None:
            lock_path = os.path.join(lock_dir, ".trailpack_schema.lock")
            with open(lock_path, "w") as lf:
                try:
                    fcntl.flock(lf, fcntl.LOCK_EX)
                    _safe_create_schema()
                finally:
                    fcntl.flock(lf, fcntl.LOCK_UN)
        else:
            _safe_create_schema()
        LOG.debug("trailpack schema ready")


def _upgrade_legacy_items(conn) -> None:
    """Add columns missing from the single-list ``items`` schema.

    Rows upgraded here have no list yet; ``ensure_default_list`` attaches them
    to the owner's first list on next access.
    """
    inspector = inspect(conn)
    if not inspector.has_table("items"):
        return
    col_names = {col["name"] for col in inspector.get_columns("items")}
    if "list_id" not in col_names:
        LOG.info("Applying schema migration: adding items.list_id column")
        conn.execute(text("ALTER TABLE items ADD COLUMN list_id INTEGER"))
    if "description" not in col_names:
        LOG.info("Applying schema migration: adding items.description column")
        conn.execute(text("ALTER TABLE items ADD COLUMN description VARCHAR(80) NOT NULL DEFAULT ''"))


def _safe_create_schema():
    """Run metadata.create_all with handling of concurrent-bootstrap races."""
    from sqlalchemy.exc import OperationalError, ProgrammingError
    if _engine is None:
        return
    try:
        with _engine.begin() as conn:  # type: ignore[assignment]
            _upgrade_legacy_items(conn)
        Base.metadata.create_all(_engine)  # type: ignore[arg-type]
    except (OperationalError, ProgrammingError) as e:  # pragma: no cover - concurrency edge
        msg = str(e).lower()
        if "already exists" in msg:
            LOG.warning("Schema create encountered existing tables (benign race)")
        else:
            raise


def get_engine() -> Engine:
    if _engine is None:
        init_engine_once()
    return _engine  # type: ignore[return-value]


def get_session_factory() -> Callable[[], SASession]:
    if _SessionFactory is None:
        init_engine_once()
    return _SessionFactory  # type: ignore[return-value]


def get_scoped_session() -> scoped_session:
    if _scoped is None:
        init_engine_once()
    if _scoped is None:
        raise RuntimeError("Scoped session could not be initialized.")
    return _scoped  # type: ignore[return-value]


@contextmanager
def app_session() -> Iterator[SASession]:
    """Unit of work: commit on success, roll back and re-raise on failure."""
    scoped = get_scoped_session()
    sess = scoped()
    try:
        yield sess
        sess.commit()
    except Exception:
        sess.rollback()
        raise
    finally:
        sess.close()


@contextmanager
def session_scope(session: Optional[SASession] = None) -> Iterator[SASession]:
    """Join the caller's unit of work when given one, else open a new one."""
    if session is not None:
        yield session
        return
    with app_session() as sess:
        yield sess


def reset_for_tests(drop: bool = False) -> None:
    global _engine, _SessionFactory, _scoped
    with _LOCK:
        if _scoped is not None:
            _scoped.remove()
        if _engine is not None and drop:
            try:
                Base.metadata.drop_all(_engine)
            except Exception:
                LOG.warning("Failed dropping tables during reset", exc_info=True)
        if _engine is not None:
            _engine.dispose()
        _engine = None
        _SessionFactory = None
        _scoped = None


__all__ = [
    "init_engine_once",
    "get_engine",
    "get_session_factory",
    "get_scoped_session",
    "app_session",
    "session_scope",
    "reset_for_tests",
]
