"""Plain-text descriptions of catalog entries for the CLI."""
from __future__ import annotations

from typing import List

from beastmaster.domain.defs import DropEntry, DropKind, DropTable
from beastmaster.domain.mob_type import MobType
from beastmaster.services.catalog import CatalogSnapshot


def format_percent(chance: float) -> str:
    return f"{chance * 100:g}%"


def format_quantity(entry: DropEntry) -> str:
    if entry.min_qty == entry.max_qty:
        return str(entry.min_qty)
    return f"[{entry.min_qty},{entry.max_qty}]"


def describe_drop(entry: DropEntry, catalog: CatalogSnapshot) -> str:
    """Return a one-line description of a drop: id, objective, chance, count and payload.

    Special items and nothing entries show no count. Items without a stack to
    materialize are described as "nothing".
    """
    parts: List[str] = [f"{entry.key}:"]
    if entry.objective is not None:
        parts.append(f"(objective: {entry.objective})")
    parts.append(format_percent(entry.chance))
    if entry.kind is DropKind.NOTHING:
        parts.append("nothing")
    elif entry.kind is DropKind.MOB:
        mob_type = catalog.lookup_mob_type(entry.payload_id)
        suffix = "" if mob_type is not None else " (unknown mob type)"
        parts.append(f"{format_quantity(entry)} mob {entry.payload_id}{suffix}")
    else:
        item = catalog.lookup_item(entry.payload_id)
        if item is None:
            parts.append(f"{format_quantity(entry)} {entry.payload_id} (unknown item)")
        elif not item.is_special():
            stack = item.materialize()
            if stack is None:
                parts.append(f"{format_quantity(entry)} nothing")
            else:
                label = stack.material if stack.display_name is None else f"{stack.display_name} ({stack.material})"
                parts.append(f"{format_quantity(entry)} {label}")
    return " ".join(parts)


def describe_drop_table(table: DropTable, catalog: CatalogSnapshot) -> list[str]:
    mode = "single" if table.single else "multiple"
    lines = [f"Drop table {table.id} ({mode}, {len(table.entries)} entries)"]
    if not table.entries:
        lines.append("  (empty)")
    lines.extend(f"  {describe_drop(entry, catalog)}" for entry in table.entries)
    return lines


def describe_mob_type(mob_type: MobType, catalog: CatalogSnapshot) -> str:
    """Return the short description used in listings."""
    if mob_type.predefined:
        return mob_type.id
    parent_id = mob_type.parent_type_id
    if parent_id is None:
        parent = "(none)"
    elif catalog.lookup_mob_type(parent_id) is None:
        parent = f"{parent_id} (missing)"
    else:
        parent = parent_id
    return f"id: {mob_type.id}, parent-type: {parent}"


def describe_property(mob_type: MobType, property_id: str, catalog: CatalogSnapshot) -> str:
    """Describe the derived value of a property and the type it comes from."""
    slot = catalog.resolve(mob_type, property_id)
    if slot is None:
        return f"{property_id}: unknown property"
    if not slot.is_set():
        return f"{property_id}: (unset)"
    owner = slot.owner
    if owner is None or owner.id == mob_type.id:
        return f"{property_id}: {slot.format_value()}"
    return f"{property_id}: {slot.format_value()} (inherited from {owner.id})"


def describe_overrides(mob_type: MobType) -> list[str]:
    """Return ``id: value`` lines for the properties the type itself sets."""
    return [f"  {slot.id}: {slot.format_value()}" for slot in mob_type.overridden_properties()]
