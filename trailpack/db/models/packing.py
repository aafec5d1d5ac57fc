"""ORM models for accounts, packing lists, list items and the gear catalog."""
from __future__ import annotations

import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _iso(value):
    return value.isoformat() if value else None


class User(Base):
    """Account owning every list, item and catalog row below."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)

    def as_dict(self) -> dict:
        return {"id": self.id, "email": self.email, "created_at": _iso(self.created_at)}

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} email={self.email}>"


class PackList(Base):
    """A named trip list. Every user keeps at least one."""

    __tablename__ = "pack_lists"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(40), nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_pack_lists_user_created", "user_id", "created_at"),
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": _iso(self.created_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<PackList id={self.id} user_id={self.user_id} name={self.name!r}>"


class Item(Base):
    """One piece of gear placed in one list.

    Items carry no reference to a catalog row; the association is inferred
    from the natural key ``(name, category, type, weight)``.
    """

    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Nullable for rows written by the single-list schema; ensure_default_list repairs them.
    list_id = Column(Integer, ForeignKey("pack_lists.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(80), nullable=False, default="")
    category = Column(String(20), nullable=False)
    item_type = Column("type", String(16), nullable=False, default="base")
    weight = Column(Integer, nullable=False)
    qty = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_items_natural_key", "user_id", "name", "category", "type", "weight"),
    )

    @property
    def natural_key(self) -> tuple:
        return (self.name, self.category, self.item_type, self.weight)

    @property
    def description_key(self) -> tuple:
        return (self.name, self.item_type, self.weight)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "list_id": self.list_id,
            "name": self.name,
            "description": self.description or "",
            "category": self.category,
            "type": self.item_type,
            "weight": self.weight,
            "qty": self.qty,
            "created_at": _iso(self.created_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return (
            "<Item id={0} list_id={1} name={2!r} category={3!r} type={4} weight={5} qty={6}>".format(
                self.id,
                self.list_id,
                self.name,
                self.category,
                self.item_type,
                self.weight,
                self.qty,
            )
        )


class Gear(Base):
    """Catalog entry: de-duplicated memory of gear the user has entered.

    Each (user_id, name, category, type, weight) combination is unique.
    """

    __tablename__ = "gears"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(80), nullable=False, default="")
    category = Column(String(20), nullable=False)
    item_type = Column("type", String(16), nullable=False, default="base")
    weight = Column(Integer, nullable=False)
    default_qty = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "name", "category", "type", "weight", name="uq_gears_natural_key"),
    )

    @property
    def natural_key(self) -> tuple:
        return (self.name, self.category, self.item_type, self.weight)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description or "",
            "category": self.category,
            "type": self.item_type,
            "weight": self.weight,
            "default_qty": self.default_qty,
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Gear id={self.id} key={self.natural_key!r} default_qty={self.default_qty}>"


__all__ = ["Base", "User", "PackList", "Item", "Gear"]
