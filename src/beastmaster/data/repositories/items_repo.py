"""Items repository."""
from __future__ import annotations

from typing import Dict

from beastmaster.data.errors import DataValidationError
from beastmaster.data.repositories.base import RepositoryBase
from beastmaster.domain.defs import SPECIAL_ITEM_IDS, ItemDef

_ALLOWED_FIELDS = {"material", "name"}


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads and validates custom item definitions.

    The special items are always present, whether or not the file lists them.
    """

    def __init__(self, base_path=None) -> None:
        super().__init__("items.json", base_path, optional=True)

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {
            special_id: ItemDef(id=special_id, special=True) for special_id in SPECIAL_ITEM_IDS
        }
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str):
                raise DataValidationError("Item IDs must be strings.")
            if raw_id in SPECIAL_ITEM_IDS:
                raise DataValidationError(f"item '{raw_id}' is a special item and cannot be redefined.")
            item_data = self._require_mapping(payload, f"item '{raw_id}'")
            unknown = set(item_data.keys()) - _ALLOWED_FIELDS
            if unknown:
                raise DataValidationError(f"item '{raw_id}' has unknown fields: {sorted(unknown)}")
            items[raw_id] = ItemDef(
                id=raw_id,
                material=self._optional_str(item_data.get("material"), f"item '{raw_id}' material"),
                display_name=self._optional_str(item_data.get("name"), f"item '{raw_id}' name"),
            )
        return items
