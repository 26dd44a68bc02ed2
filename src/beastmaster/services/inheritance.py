"""Derived property resolution over the mob type parent graph."""
from __future__ import annotations

from typing import Callable, List, Tuple

from beastmaster.domain.errors import CyclicInheritanceError
from beastmaster.domain.mob_type import MobType, PropertySlot

MobTypeLookup = Callable[[str | None], "MobType | None"]


def resolve_derived(mob_type: MobType, property_id: str, lookup: MobTypeLookup) -> PropertySlot | None:
    """Return the slot holding the derived value of ``property_id``.

    The result is the slot of the most-derived type in the parent chain
    (``mob_type`` included) whose value is set, or the root ancestor's unset
    slot when no type overrides the property. Unknown property IDs give None.
    A parent ID that does not resolve ends the chain.

    Raises CyclicInheritanceError when the chain revisits a type.
    """
    slot = mob_type.get_property(property_id)
    if slot is None:
        return None

    owner = mob_type
    path: List[str] = [owner.id]
    visited = {owner.id}
    while True:
        if slot.value is not None:
            return slot
        parent = lookup(owner.parent_type_id)
        if parent is None:
            return slot
        if parent.id in visited:
            raise CyclicInheritanceError(path[path.index(parent.id):] + [parent.id])
        path.append(parent.id)
        visited.add(parent.id)
        owner = parent
        # Every mob type carries the full schema.
        slot = parent.get_property(property_id)
        assert slot is not None


def derived_value(mob_type: MobType, property_id: str, lookup: MobTypeLookup) -> object | None:
    slot = resolve_derived(mob_type, property_id, lookup)
    return None if slot is None else slot.value


def ancestry(mob_type: MobType, lookup: MobTypeLookup) -> Tuple[MobType, ...]:
    """Return ``mob_type`` followed by its ancestors, nearest first."""
    chain: List[MobType] = [mob_type]
    visited = {mob_type.id}
    parent = lookup(mob_type.parent_type_id)
    while parent is not None:
        if parent.id in visited:
            ids = [member.id for member in chain]
            raise CyclicInheritanceError(ids[ids.index(parent.id):] + [parent.id])
        chain.append(parent)
        visited.add(parent.id)
        parent = lookup(parent.parent_type_id)
    return tuple(chain)


def find_inheritance_cycle(mob_type: MobType, lookup: MobTypeLookup) -> Tuple[str, ...] | None:
    """Return the cycle reachable from ``mob_type`` as a list of IDs, or None."""
    try:
        ancestry(mob_type, lookup)
    except CyclicInheritanceError as exc:
        return exc.cycle
    return None


def is_friendly_to(mob_type: MobType, other: MobType | None, lookup: MobTypeLookup) -> bool:
    """Return True if ``mob_type`` will not target or damage ``other``.

    Friendly means one of this type's derived friend-groups is among the other
    type's derived groups. Mobs are hostile by default.
    """
    if other is None:
        return False
    friend_groups = derived_value(mob_type, "friend-groups", lookup)
    if not friend_groups:
        return False
    groups = derived_value(other, "groups", lookup)
    if not groups:
        return False
    return not friend_groups.isdisjoint(groups)  # type: ignore[union-attr]
