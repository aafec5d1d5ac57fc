"""Utility helpers."""
from .identity import normalize_email
from .locks import user_lock
from . import constants

__all__ = [
    "normalize_email",
    "user_lock",
    "constants",
]
