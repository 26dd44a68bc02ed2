"""Serialization of the catalog back to JSON definition files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from beastmaster.data.json_loader import write_json
from beastmaster.data.paths import get_definitions_path
from beastmaster.domain.defs import DropEntry, DropTable, ItemDef
from beastmaster.domain.mob_type import MobType
from beastmaster.domain.property_schema import is_immutable_on_predefined
from beastmaster.services.catalog import CatalogSnapshot

logger = logging.getLogger(__name__)

DefinitionsPayload = Dict[str, Any]


class CatalogWriter:
    """Writes a snapshot to ``mob_types.json``, ``drop_tables.json`` and ``items.json``.

    Files are written in the same shape the repositories read, so a saved
    catalog loads back into an equal one.
    """

    def __init__(self, base_path: Path | str | None = None) -> None:
        self._base_path = get_definitions_path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base_path

    def save(self, snapshot: CatalogSnapshot) -> None:
        write_json(self._base_path / "mob_types.json", self.serialize_mob_types(snapshot))
        write_json(self._base_path / "drop_tables.json", self.serialize_drop_tables(snapshot))
        write_json(self._base_path / "items.json", self.serialize_items(snapshot))
        logger.info("Saved catalog definitions to %s.", self._base_path)

    def serialize_mob_types(self, snapshot: CatalogSnapshot) -> DefinitionsPayload:
        payload: DefinitionsPayload = {}
        for mob_type in snapshot.mob_types.values():
            properties = self._serialize_properties(mob_type)
            # Predefined types are only written when they carry overrides.
            if mob_type.predefined and not properties:
                continue
            payload[mob_type.id] = {"properties": properties}
        return payload

    def serialize_drop_tables(self, snapshot: CatalogSnapshot) -> DefinitionsPayload:
        return {table.id: self._serialize_table(table) for table in snapshot.drop_tables.values()}

    def serialize_items(self, snapshot: CatalogSnapshot) -> DefinitionsPayload:
        return {
            item.id: self._serialize_item(item)
            for item in snapshot.items.values()
            if not item.is_special()
        }

    @staticmethod
    def _serialize_properties(mob_type: MobType) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        for slot in mob_type.overridden_properties():
            if mob_type.predefined and is_immutable_on_predefined(slot.id):
                continue
            properties[slot.id] = slot.serialize_value()
        return properties

    def _serialize_table(self, table: DropTable) -> Dict[str, Any]:
        return {
            "single": table.single,
            "drops": {entry.key: self._serialize_entry(entry) for entry in table.entries},
        }

    @staticmethod
    def _serialize_entry(entry: DropEntry) -> Dict[str, Any]:
        return {
            "type": entry.kind.value,
            "chance": entry.chance,
            "min": entry.min_qty,
            "max": entry.max_qty,
            "objective": entry.objective,
        }

    @staticmethod
    def _serialize_item(item: ItemDef) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if item.material is not None:
            payload["material"] = item.material
        if item.display_name is not None:
            payload["name"] = item.display_name
        return payload
