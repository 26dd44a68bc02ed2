"""Item definition structures."""
from __future__ import annotations

from dataclasses import dataclass, replace

# Items that stand for behaviour rather than a concrete stack: "default" keeps
# whatever the creature would normally have, "nothing" means an empty slot.
SPECIAL_ITEM_IDS = ("default", "nothing")


@dataclass(frozen=True, slots=True)
class ItemStack:
    """A concrete stack of items handed to the game world."""

    item_id: str
    material: str
    amount: int = 1
    display_name: str | None = None

    @classmethod
    def empty(cls) -> "ItemStack":
        """Return the stack that clears an equipment slot."""
        return cls(item_id="nothing", material="air", amount=0)

    @property
    def is_empty(self) -> bool:
        return self.amount == 0 or self.material == "air"

    def with_amount(self, amount: int) -> "ItemStack":
        return replace(self, amount=amount)


@dataclass(slots=True)
class ItemDef:
    """Custom item definition."""

    id: str
    material: str | None = None
    display_name: str | None = None
    special: bool = False

    def is_special(self) -> bool:
        return self.special

    def materialize(self) -> ItemStack | None:
        """Return a single-item stack, or None when the item has no material."""
        if self.material is None:
            return None
        return ItemStack(item_id=self.id, material=self.material, amount=1, display_name=self.display_name)
