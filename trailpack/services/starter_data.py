"""Starter gear every new account begins with.

Rows are ``(name, description, category, type, weight_g, qty)``.
"""
from __future__ import annotations

from typing import NamedTuple, Tuple


class StarterGear(NamedTuple):
    name: str
    description: str
    category: str
    item_type: str
    weight: int
    qty: int


STARTER_GEAR: Tuple[StarterGear, ...] = (
    StarterGear("Tent", "Two-person trekking pole shelter", "Shelter", "base", 1200, 1),
    StarterGear("Sleeping bag", "Down, comfort 0 C", "Sleep", "base", 900, 1),
    StarterGear("Sleeping pad", "Inflatable, R 4.2", "Sleep", "base", 450, 1),
    StarterGear("Backpack", "50 L frameless", "Carry", "base", 850, 1),
    StarterGear("Stove", "Canister top burner", "Kitchen", "base", 85, 1),
    StarterGear("Gas canister", "230 g isobutane", "Kitchen", "consumable", 370, 1),
    StarterGear("Water bottle", "1 L", "Water", "base", 40, 2),
    StarterGear("Rain jacket", "", "Clothing", "worn", 300, 1),
    StarterGear("Headlamp", "", "Electronics", "base", 95, 1),
    StarterGear("Trail food", "One day of meals", "Food", "consumable", 700, 3),
)

__all__ = ["StarterGear", "STARTER_GEAR"]
