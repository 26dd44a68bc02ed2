"""Domain model: property schema, value kinds, mob types and definitions."""

from .errors import (
    BeastmasterError,
    CyclicInheritanceError,
    EmptyDropTableError,
    ImmutablePropertyError,
    PropertyValueError,
    UnknownPropertyError,
    UnsupportedSpecialItemError,
)
from .mob_type import MobType, PropertySlot

__all__ = [
    "BeastmasterError",
    "CyclicInheritanceError",
    "EmptyDropTableError",
    "ImmutablePropertyError",
    "MobType",
    "PropertySlot",
    "PropertyValueError",
    "UnknownPropertyError",
    "UnsupportedSpecialItemError",
]
