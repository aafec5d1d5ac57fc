"""ORM models aggregate exports."""
from .packing import (  # noqa: F401
	Base,
	User,
	PackList,
	Item,
	Gear,
)

__all__ = [
	"Base",
	"User",
	"PackList",
	"Item",
	"Gear",
]
