"""Process-wide catalog of mob types, drop tables and items.

Readers work on a :class:`CatalogSnapshot`, an immutable view taken once per
operation. Edits go through :class:`Catalog`, which copies the affected entry,
builds a new snapshot under a lock and swaps it in, so a resolution in progress
never sees a half-applied edit.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple

from beastmaster.data.repositories import DropTablesRepository, ItemsRepository, MobTypesRepository
from beastmaster.domain.defs import SPECIAL_ITEM_IDS, DropTable, ItemDef
from beastmaster.domain.entity_types import PREDEFINED_ENTITY_TYPES
from beastmaster.domain.errors import CyclicInheritanceError
from beastmaster.domain.mob_type import MobType, PropertySlot
from beastmaster.services import inheritance
from beastmaster.services.errors import CatalogError, MobTypeInUseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogSnapshot:
    """Consistent read-only view of the catalog.

    Mob types reachable from a snapshot must not be mutated; edit them through
    :meth:`Catalog.set_property` instead.
    """

    mob_types: Mapping[str, MobType]
    drop_tables: Mapping[str, DropTable]
    items: Mapping[str, ItemDef]

    def lookup_mob_type(self, mob_type_id: str | None) -> MobType | None:
        return None if mob_type_id is None else self.mob_types.get(mob_type_id)

    def lookup_drop_table(self, table_id: str | None) -> DropTable | None:
        return None if table_id is None else self.drop_tables.get(table_id)

    def lookup_item(self, item_id: str | None) -> ItemDef | None:
        return None if item_id is None else self.items.get(item_id)

    def get_mob_type(self, mob_type_id: str) -> MobType:
        """Return a mob type by id, raising KeyError when it is unknown."""
        try:
            return self.mob_types[mob_type_id]
        except KeyError as exc:
            raise KeyError(mob_type_id) from exc

    def resolve(self, mob_type: MobType, property_id: str) -> PropertySlot | None:
        return inheritance.resolve_derived(mob_type, property_id, self.lookup_mob_type)

    def derived_value(self, mob_type: MobType, property_id: str) -> object | None:
        return inheritance.derived_value(mob_type, property_id, self.lookup_mob_type)

    def is_friendly_to(self, mob_type: MobType, other: MobType | None) -> bool:
        return inheritance.is_friendly_to(mob_type, other, self.lookup_mob_type)

    def drops_for(self, mob_type: MobType) -> DropTable | None:
        """Return the drop table consulted when ``mob_type`` dies."""
        return self.lookup_drop_table(self.derived_value(mob_type, "drops"))  # type: ignore[arg-type]

    def children_of(self, mob_type_id: str) -> list[MobType]:
        return [mob_type for mob_type in self.mob_types.values() if mob_type.parent_type_id == mob_type_id]

    def custom_mob_types(self) -> list[MobType]:
        return [mob_type for mob_type in self.mob_types.values() if not mob_type.predefined]


def _freeze(mapping: Dict[str, object]) -> Mapping[str, object]:
    return MappingProxyType(dict(mapping))


class Catalog:
    """Owner of the current catalog snapshot and the single writer lock."""

    def __init__(
        self,
        mob_types: Iterable[MobType] | None = None,
        drop_tables: Iterable[DropTable] = (),
        items: Iterable[ItemDef] = (),
    ) -> None:
        if mob_types is None:
            mob_types = [MobType.predefined_type(entity_type) for entity_type in PREDEFINED_ENTITY_TYPES]
        item_map: Dict[str, ItemDef] = {
            special_id: ItemDef(id=special_id, special=True) for special_id in SPECIAL_ITEM_IDS
        }
        item_map.update({item.id: item for item in items})
        self._lock = threading.Lock()
        self._snapshot = CatalogSnapshot(
            mob_types=_freeze({mob_type.id: mob_type for mob_type in mob_types}),
            drop_tables=_freeze({table.id: table for table in drop_tables}),
            items=_freeze(item_map),
        )

    @classmethod
    def load(cls, base_path: Path | str | None = None) -> "Catalog":
        """Build a catalog from the JSON definitions in ``base_path``."""
        catalog = cls()
        catalog.reload(base_path)
        return catalog

    def reload(self, base_path: Path | str | None = None) -> None:
        """Replace the whole catalog with the definitions in ``base_path``.

        Files are read and validated before the swap; a load error leaves the
        current snapshot in place.
        """
        mob_types_repo = MobTypesRepository(base_path=base_path)
        drop_tables_repo = DropTablesRepository(base_path=base_path, mob_types_repo=mob_types_repo)
        items_repo = ItemsRepository(base_path=base_path)
        snapshot = CatalogSnapshot(
            mob_types=_freeze(mob_types_repo.as_dict()),
            drop_tables=_freeze(drop_tables_repo.as_dict()),
            items=_freeze(items_repo.as_dict()),
        )
        with self._lock:
            self._snapshot = snapshot
        logger.info(
            "Loaded %d mob types (%d custom), %d drop tables, %d items.",
            len(snapshot.mob_types),
            len(snapshot.custom_mob_types()),
            len(snapshot.drop_tables),
            len(snapshot.items),
        )
        for cycle in inheritance_cycles(snapshot):
            logger.warning("Mob types inherit from each other in a loop: %s.", " -> ".join(cycle))

    def snapshot(self) -> CatalogSnapshot:
        """Return the current consistent view."""
        return self._snapshot

    def lookup_mob_type(self, mob_type_id: str | None) -> MobType | None:
        return self._snapshot.lookup_mob_type(mob_type_id)

    def lookup_drop_table(self, table_id: str | None) -> DropTable | None:
        return self._snapshot.lookup_drop_table(table_id)

    def lookup_item(self, item_id: str | None) -> ItemDef | None:
        return self._snapshot.lookup_item(item_id)

    # ------------------------------------------------------------------ Mob types
    def add_mob_type(self, mob_type_id: str, parent_type_id: str | None) -> MobType:
        """Create a custom mob type. The parent may not exist (yet).

        Existing types whose dangling parent ID names the new type would start
        inheriting from it; if that closes a loop, CyclicInheritanceError is
        raised and the catalog is left unchanged.
        """
        if not mob_type_id or not mob_type_id.strip():
            raise CatalogError("Mob type IDs must be non-empty.")
        with self._lock:
            current = self._snapshot
            if mob_type_id in current.mob_types:
                raise CatalogError(f"Mob type '{mob_type_id}' already exists.")
            mob_type = MobType(mob_type_id, parent_type_id)
            self._check_acyclic(current, mob_type)
            self._swap_mob_types(current, {mob_type_id: mob_type})
        logger.info("Added mob type %s (parent %s).", mob_type_id, parent_type_id)
        return mob_type

    def remove_mob_type(self, mob_type_id: str) -> None:
        """Remove a custom mob type that no other type inherits from."""
        with self._lock:
            current = self._snapshot
            mob_type = current.lookup_mob_type(mob_type_id)
            if mob_type is None:
                raise CatalogError(f"Mob type '{mob_type_id}' does not exist.")
            if mob_type.predefined:
                raise CatalogError(f"Predefined mob type '{mob_type_id}' cannot be removed.")
            children = [child.id for child in current.children_of(mob_type_id)]
            if children:
                raise MobTypeInUseError(mob_type_id, children)
            mob_types = dict(current.mob_types)
            del mob_types[mob_type_id]
            self._snapshot = CatalogSnapshot(_freeze(mob_types), current.drop_tables, current.items)
        logger.info("Removed mob type %s.", mob_type_id)

    def set_property(self, mob_type_id: str, property_id: str, value: object | None) -> MobType:
        """Set (or clear, with None) a property and return the updated mob type.

        Changing ``parent-type`` so that the chain loops is rejected with
        CyclicInheritanceError and leaves the catalog unchanged.
        """
        with self._lock:
            current = self._snapshot
            original = current.lookup_mob_type(mob_type_id)
            if original is None:
                raise CatalogError(f"Mob type '{mob_type_id}' does not exist.")
            updated = original.copy()
            updated.set_property(property_id, value)
            if property_id == "parent-type":
                self._check_acyclic(current, updated)
            self._swap_mob_types(current, {mob_type_id: updated})
        logger.debug("Set %s.%s = %r.", mob_type_id, property_id, value)
        return updated

    # ---------------------------------------------------------------- Drop tables
    def put_drop_table(self, table: DropTable) -> None:
        """Add or replace a drop table."""
        with self._lock:
            current = self._snapshot
            tables = dict(current.drop_tables)
            tables[table.id] = table
            self._snapshot = CatalogSnapshot(current.mob_types, _freeze(tables), current.items)

    def remove_drop_table(self, table_id: str) -> None:
        with self._lock:
            current = self._snapshot
            if table_id not in current.drop_tables:
                raise CatalogError(f"Drop table '{table_id}' does not exist.")
            tables = dict(current.drop_tables)
            del tables[table_id]
            self._snapshot = CatalogSnapshot(current.mob_types, _freeze(tables), current.items)

    # ------------------------------------------------------------------- Helpers
    def _swap_mob_types(self, current: CatalogSnapshot, changes: Dict[str, MobType]) -> None:
        mob_types = dict(current.mob_types)
        mob_types.update(changes)
        self._snapshot = CatalogSnapshot(_freeze(mob_types), current.drop_tables, current.items)

    @staticmethod
    def _check_acyclic(current: CatalogSnapshot, updated: MobType) -> None:
        def lookup(mob_type_id: str | None) -> MobType | None:
            if mob_type_id == updated.id:
                return updated
            return current.lookup_mob_type(mob_type_id)

        cycle = inheritance.find_inheritance_cycle(updated, lookup)
        if cycle is not None:
            raise CyclicInheritanceError(cycle)


def inheritance_cycles(snapshot: CatalogSnapshot) -> list[Tuple[str, ...]]:
    """Return each distinct parent-type loop in the snapshot once."""
    cycles: list[Tuple[str, ...]] = []
    seen: set[frozenset[str]] = set()
    for mob_type in snapshot.mob_types.values():
        cycle = inheritance.find_inheritance_cycle(mob_type, snapshot.lookup_mob_type)
        if cycle is None or frozenset(cycle) in seen:
            continue
        seen.add(frozenset(cycle))
        cycles.append(cycle)
    return cycles


def snapshot_ids(snapshot: CatalogSnapshot) -> Tuple[str, ...]:
    """Return the IDs of all mob types, predefined first, each group sorted."""
    predefined = sorted(mob_type.id for mob_type in snapshot.mob_types.values() if mob_type.predefined)
    custom = sorted(mob_type.id for mob_type in snapshot.custom_mob_types())
    return tuple(predefined + custom)
