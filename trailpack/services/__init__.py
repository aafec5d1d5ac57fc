"""Service exports."""

from .errors import (
    InvalidInputError,
    InvalidWeightError,
    NotFoundError,
    LastListProtectedError,
    SyncFailedError,
    CloneFailedError,
    UserExistsError,
)
from . import (
    accounts_service,
    catalog_sync,
    gears_service,
    items_service,
    lists_service,
    totals,
)

__all__ = [
    "InvalidInputError",
    "InvalidWeightError",
    "NotFoundError",
    "LastListProtectedError",
    "SyncFailedError",
    "CloneFailedError",
    "UserExistsError",
    "accounts_service",
    "catalog_sync",
    "gears_service",
    "items_service",
    "lists_service",
    "totals",
]
