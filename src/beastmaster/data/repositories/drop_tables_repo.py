"""Repository for drop tables referenced by mob type properties."""
from __future__ import annotations

from typing import Dict, List

from beastmaster.data.errors import DataValidationError
from beastmaster.data.repositories.base import RepositoryBase
from beastmaster.data.repositories.mob_types_repo import MobTypesRepository
from beastmaster.domain.defs import NOTHING_ID, DropEntry, DropKind, DropTable

_ENTRY_FIELDS = {"chance", "min", "max", "objective", "type"}


class DropTablesRepository(RepositoryBase[DropTable]):
    """Loads drop table definitions.

    Entries are keyed by payload ID and keep their file order. An entry without
    an explicit ``type`` is a mob when its ID names a mob type, nothing when it
    is the ``nothing`` sentinel and an item otherwise.
    """

    def __init__(self, base_path=None, *, mob_types_repo: MobTypesRepository | None = None) -> None:
        super().__init__("drop_tables.json", base_path, optional=True)
        self._mob_types_repo = mob_types_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, DropTable]:
        tables: Dict[str, DropTable] = {}
        for table_id, payload in raw.items():
            context = f"drop_tables['{table_id}']"
            table_map = self._require_mapping(payload, context)
            single = self._require_bool(table_map.get("single", True), f"{context}.single")
            drop_map = self._require_mapping(table_map.get("drops", {}), f"{context}.drops")
            drops: List[DropEntry] = []
            for payload_id, drop_entry in drop_map.items():
                drops.append(self._build_entry(payload_id, drop_entry, f"{context}.drops['{payload_id}']"))
            tables[table_id] = DropTable(id=table_id, entries=tuple(drops), single=single)
        return tables

    def _build_entry(self, payload_id: str, drop_entry: object, drop_ctx: str) -> DropEntry:
        drop_map = self._require_mapping(drop_entry, drop_ctx)
        unknown = set(drop_map.keys()) - _ENTRY_FIELDS
        if unknown:
            raise DataValidationError(f"{drop_ctx} has unknown fields: {sorted(unknown)}")
        chance = self._require_float(drop_map.get("chance", 0.0), f"{drop_ctx}.chance")
        if not (0.0 <= chance <= 1.0):
            raise DataValidationError(f"{drop_ctx}.chance must be between 0 and 1.")
        min_qty = self._require_int(drop_map.get("min", 1), f"{drop_ctx}.min")
        max_qty = self._require_int(drop_map.get("max", max(1, min_qty)), f"{drop_ctx}.max")
        if min_qty < 0 or max_qty < min_qty:
            raise DataValidationError(f"{drop_ctx} quantity range invalid.")
        objective = self._optional_str(drop_map.get("objective"), f"{drop_ctx}.objective")
        kind = self._drop_kind(payload_id, drop_map.get("type"), drop_ctx)
        return DropEntry(
            kind=kind,
            payload_id=None if kind is DropKind.NOTHING else payload_id,
            chance=chance,
            min_qty=min_qty,
            max_qty=max_qty,
            objective=objective,
        )

    def _drop_kind(self, payload_id: str, raw_type: object, drop_ctx: str) -> DropKind:
        if raw_type is not None:
            type_name = self._require_str(raw_type, f"{drop_ctx}.type")
            try:
                kind = DropKind(type_name)
            except ValueError as exc:
                raise DataValidationError(f"{drop_ctx}.type '{type_name}' is invalid.") from exc
            if kind is DropKind.NOTHING and payload_id != NOTHING_ID:
                raise DataValidationError(f"{drop_ctx} nothing drops must use the id '{NOTHING_ID}'.")
            return kind
        if payload_id == NOTHING_ID:
            return DropKind.NOTHING
        if self._mob_types_repo is not None and self._mob_types_repo.contains(payload_id):
            return DropKind.MOB
        return DropKind.ITEM
