"""Shared field limits and enumerations for lists, items and catalog rows."""
from __future__ import annotations

ITEM_TYPES = ("base", "worn", "consumable")
DEFAULT_ITEM_TYPE = "base"

UNCATEGORIZED = "Uncategorized"

MAX_LIST_NAME = 40
MAX_DESCRIPTION = 80
MAX_CATEGORY = 20

__all__ = [
    "ITEM_TYPES",
    "DEFAULT_ITEM_TYPE",
    "UNCATEGORIZED",
    "MAX_LIST_NAME",
    "MAX_DESCRIPTION",
    "MAX_CATEGORY",
]
