"""Service-layer exceptions."""
from __future__ import annotations

from typing import Sequence


class FactoryError(Exception):
    """Raised when an item stack or mob cannot be produced from a definition."""


class CatalogError(Exception):
    """Raised when a catalog edit is rejected."""


class MobTypeInUseError(CatalogError):
    """Raised when removing a mob type that other types inherit from."""

    def __init__(self, mob_type_id: str, child_ids: Sequence[str]) -> None:
        self.mob_type_id = mob_type_id
        self.child_ids = tuple(child_ids)
        super().__init__(
            f"Mob type '{mob_type_id}' is the parent of: {', '.join(self.child_ids)}."
        )
