"""Drop selection: turning drop tables into concrete outcomes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from beastmaster.core.rng import RNG
from beastmaster.domain.defs import DropEntry, DropKind, DropTable, ItemStack
from beastmaster.domain.errors import EmptyDropTableError, UnsupportedSpecialItemError
from beastmaster.domain.mob_type import MobType
from beastmaster.services.errors import FactoryError

if TYPE_CHECKING:
    from beastmaster.services.catalog import CatalogSnapshot


def select_one(table: DropTable, guarantee: bool, rng: RNG) -> DropEntry:
    """Choose at most one entry of ``table``.

    Entries are tried in order, each with its own independent chance; the first
    success wins. When every trial fails the result is the synthesized nothing
    entry, unless ``guarantee`` is set: then an entry is picked uniformly from
    the whole table, and an empty table raises EmptyDropTableError.
    """
    for entry in table.entries:
        if rng.chance(entry.chance):
            return entry
    if not guarantee:
        return DropEntry.nothing()
    if not table.entries:
        raise EmptyDropTableError(table.id)
    return rng.choice(table.entries)


def roll_drops(table: DropTable, rng: RNG) -> List[DropEntry]:
    """Return the entries dropped on death.

    Single tables drop at most one entry; other tables roll every entry
    independently. Nothing entries are left out of the result.
    """
    if table.single:
        entries = [select_one(table, False, rng)]
    else:
        entries = [entry for entry in table.entries if rng.chance(entry.chance)]
    return [entry for entry in entries if not entry.is_nothing]


def roll_quantity(entry: DropEntry, rng: RNG) -> int:
    """Return a stack size drawn uniformly from ``[min_qty, max_qty]``."""
    return rng.randint(entry.min_qty, entry.max_qty)


def generate_stack(entry: DropEntry, catalog: "CatalogSnapshot", rng: RNG) -> ItemStack | None:
    """Materialize an item entry as a stack of a random size.

    Returns None when the item has nothing to materialize.
    """
    if entry.kind is not DropKind.ITEM:
        raise FactoryError(f"Drop '{entry.key}' is not an item drop.")
    item = catalog.lookup_item(entry.payload_id)
    if item is None:
        raise FactoryError(f"Item '{entry.payload_id}' not found.")
    if item.is_special():
        raise UnsupportedSpecialItemError(item.id)
    stack = item.materialize()
    if stack is None:
        return None
    return stack.with_amount(roll_quantity(entry, rng))


@dataclass(frozen=True, slots=True)
class LootReference:
    """A property value that names either a drop table or a payload directly."""

    reference_id: str
    table: DropTable | None = None

    @property
    def is_table(self) -> bool:
        return self.table is not None


def resolve_loot_reference(reference_id: str, catalog: "CatalogSnapshot") -> LootReference:
    """Interpret ``reference_id`` as a drop table if one exists, else as a payload ID."""
    return LootReference(reference_id=reference_id, table=catalog.lookup_drop_table(reference_id))


def choose_equipment(reference_id: str, catalog: "CatalogSnapshot", rng: RNG) -> ItemStack | None:
    """Return the stack to equip for a table-or-item reference.

    An empty stack clears the slot; None leaves the creature's default
    equipment untouched (mob drops, the ``default`` item, unknown items).
    """
    reference = resolve_loot_reference(reference_id, catalog)
    if reference.table is not None:
        entry = select_one(reference.table, True, rng)
        if entry.kind is DropKind.NOTHING:
            return ItemStack.empty()
        if entry.kind is DropKind.ITEM:
            return generate_stack(entry, catalog, rng)
        return None

    item = catalog.lookup_item(reference_id)
    if item is None:
        return None
    if item.is_special():
        return ItemStack.empty() if item.id == "nothing" else None
    return item.materialize()


def choose_mob_type(reference_id: str, catalog: "CatalogSnapshot", rng: RNG) -> MobType | None:
    """Return the mob type for a table-or-mob reference, or None."""
    reference = resolve_loot_reference(reference_id, catalog)
    if reference.table is not None:
        entry = select_one(reference.table, True, rng)
        if entry.kind is DropKind.MOB:
            return catalog.lookup_mob_type(entry.payload_id)
        return None
    return catalog.lookup_mob_type(reference_id)
