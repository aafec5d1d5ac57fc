"""Error kinds raised by the packing services.

Messages are short snake_case codes so an outer layer can map them to
user-facing text without parsing prose.
"""
from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when a field fails validation; nothing has been written."""


class InvalidWeightError(InvalidInputError):
    """Raised for a non-positive or non-numeric weight."""


class NotFoundError(RuntimeError):
    """Raised when a list, item or catalog row is absent or not owned by the caller."""


class LastListProtectedError(RuntimeError):
    """Raised when deleting the only remaining list of a user."""


class SyncFailedError(RuntimeError):
    """Raised when a catalog/item propagation could not commit; nothing was applied."""


class CloneFailedError(RuntimeError):
    """Raised when a list clone could not commit; nothing was applied."""


class UserExistsError(RuntimeError):
    """Raised when registering an email that already has an account."""


__all__ = [
    "InvalidInputError",
    "InvalidWeightError",
    "NotFoundError",
    "LastListProtectedError",
    "SyncFailedError",
    "CloneFailedError",
    "UserExistsError",
]
