"""Domain-level exceptions raised by mob type and drop table operations."""
from __future__ import annotations

from typing import Sequence


class BeastmasterError(Exception):
    """Base exception for mob type and drop table operations."""


class UnknownPropertyError(BeastmasterError, KeyError):
    """Raised when a property ID is not part of the property schema."""

    def __init__(self, property_id: str) -> None:
        super().__init__(property_id)
        self.property_id = property_id

    def __str__(self) -> str:
        return f"Unknown property '{self.property_id}'."


class ImmutablePropertyError(BeastmasterError):
    """Raised when a locked property of a predefined mob type is changed."""

    def __init__(self, mob_type_id: str, property_id: str) -> None:
        super().__init__(f"Property '{property_id}' of predefined mob type '{mob_type_id}' cannot be changed.")
        self.mob_type_id = mob_type_id
        self.property_id = property_id


class PropertyValueError(BeastmasterError, ValueError):
    """Raised when a value is not acceptable for a property's value kind."""


class CyclicInheritanceError(BeastmasterError):
    """Raised when a mob type's parent chain loops back on itself."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        super().__init__("Cyclic mob type inheritance: " + " -> ".join(self.cycle))


class EmptyDropTableError(BeastmasterError):
    """Raised when a guaranteed selection is made from a table with no entries."""

    def __init__(self, table_id: str) -> None:
        super().__init__(f"Drop table '{table_id}' has no entries to guarantee a result from.")
        self.table_id = table_id


class UnsupportedSpecialItemError(BeastmasterError):
    """Raised when a special (non-concrete) item is materialized as a drop."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Can't drop special item '{item_id}'.")
        self.item_id = item_id
