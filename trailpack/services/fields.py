"""Field normalization shared by the item, catalog and list services."""
from __future__ import annotations

import math
from typing import Any, Optional, Type

from trailpack.services.errors import InvalidInputError, InvalidWeightError
from trailpack.utils.constants import (
    DEFAULT_ITEM_TYPE,
    ITEM_TYPES,
    MAX_CATEGORY,
    MAX_DESCRIPTION,
    MAX_LIST_NAME,
    UNCATEGORIZED,
)


def _text(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def clean_name(raw: Any) -> str:
    name = _text(raw)
    if not name:
        raise InvalidInputError("name_required")
    return name


def clean_description(raw: Any) -> str:
    return _text(raw)[:MAX_DESCRIPTION]


def clean_category(raw: Any) -> str:
    """Trim and cap a category label; blank labels file under UNCATEGORIZED."""
    category = _text(raw)[:MAX_CATEGORY].strip()
    return category or UNCATEGORIZED


def clean_list_name(raw: Any) -> str:
    return _text(raw)[:MAX_LIST_NAME]


def clean_item_type(raw: Any, *, default: Optional[str] = DEFAULT_ITEM_TYPE) -> str:
    candidate = _text(raw).lower()
    if not candidate and default is not None:
        return default
    if candidate not in ITEM_TYPES:
        raise InvalidInputError("invalid_item_type")
    return candidate


def _positive_int(raw: Any, code: str, error: Type[InvalidInputError]) -> int:
    if raw is None or isinstance(raw, bool):
        raise error(code)
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise error(code)
    try:
        number = float(raw)
    except (TypeError, ValueError) as exc:
        raise error(code) from exc
    if not math.isfinite(number):
        raise error(code)
    # Round half up, the way the browser client rounds before sending.
    value = int(math.floor(number + 0.5))
    if value <= 0:
        raise error(code)
    return value


def parse_weight(raw: Any) -> int:
    return _positive_int(raw, "weight_must_be_positive", InvalidWeightError)


def parse_quantity(raw: Any) -> int:
    return _positive_int(raw, "qty_must_be_positive", InvalidInputError)


__all__ = [
    "clean_name",
    "clean_description",
    "clean_category",
    "clean_list_name",
    "clean_item_type",
    "parse_weight",
    "parse_quantity",
]
