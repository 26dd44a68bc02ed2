"""The fixed, ordered schema of properties every mob type carries.

Declaration order is the order used by listings and by the configurator when
applying properties to an entity, so it must stay stable.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

from . import value_kinds as kinds
from .value_kinds import ValueKind

# Entity capabilities that property appliers depend on. An entity reports the
# capabilities it has; appliers needing a missing capability are skipped.
CAP_AGEABLE = "ageable"
CAP_ANGERABLE = "angerable"
CAP_ATTRIBUTES = "attributes"
CAP_CHARGEABLE = "chargeable"
CAP_EQUIPMENT = "equipment"
CAP_EXPLOSIVE = "explosive"
CAP_SIZABLE = "sizable"


@dataclass(frozen=True, slots=True)
class PropertySpec:
    """Declaration of one schema property."""

    id: str
    kind: ValueKind
    category: str
    capability: str | None = None


def _category(name: str, *specs: Tuple) -> Tuple[PropertySpec, ...]:
    return tuple(PropertySpec(spec[0], spec[1], name, *spec[2:]) for spec in specs)


_EQUIPMENT_SLOTS = ("helmet", "chest-plate", "leggings", "boots", "main-hand", "off-hand")

_SOUND_PROPERTIES = (
    "spawn-sound",
    "death-sound",
    "projectile-launch-sound",
    "projectile-immunity-sound",
    "projectile-hurt-sound",
    "melee-hurt-sound",
    "melee-attack-sound",
    "teleport-sound",
)

PROPERTY_SCHEMA: Tuple[PropertySpec, ...] = (
    _category(
        "appearance",
        ("parent-type", kinds.STRING),
        ("entity-type", kinds.ENTITY_TYPE),
        ("name", kinds.STRING),
        ("show-name-plate", kinds.BOOLEAN),
        ("disguise", kinds.DISGUISE),
        ("passenger", kinds.LOOT_OR_MOB),
        ("passenger-percent", kinds.PERCENT),
        ("size", kinds.NON_NEGATIVE_INTEGER, CAP_SIZABLE),
        ("burning-percent", kinds.PERCENT),
        ("glowing", kinds.BOOLEAN),
        ("glowing-percent", kinds.PERCENT),
        ("invisible-percent", kinds.PERCENT),
        ("baby-percent", kinds.PERCENT, CAP_AGEABLE),
        ("charged-percent", kinds.PERCENT, CAP_CHARGEABLE),
    )
    + _category(
        "sounds",
        ("silent", kinds.BOOLEAN),
        *((sound_id, kinds.SOUND_EFFECT) for sound_id in _SOUND_PROPERTIES),
    )
    + _category(
        "buffs",
        ("health", kinds.NON_NEGATIVE_DOUBLE, CAP_ATTRIBUTES),
        ("breath-seconds", kinds.NON_NEGATIVE_INTEGER),
        ("speed", kinds.clamped_double(0.0, 1024.0), CAP_ATTRIBUTES),
        ("flying-speed", kinds.clamped_double(0.0, 1024.0), CAP_ATTRIBUTES),
        ("follow-range", kinds.clamped_double(0.0, 2048.0), CAP_ATTRIBUTES),
        ("attack-damage", kinds.clamped_double(0.0, 2048.0), CAP_ATTRIBUTES),
        ("sonic-boom-damage-scale", kinds.NON_NEGATIVE_DOUBLE),
        ("attack-speed", kinds.NON_NEGATIVE_DOUBLE, CAP_ATTRIBUTES),
        ("pick-up-percent", kinds.PERCENT),
        ("potion-buffs", kinds.POTION_SET),
        ("attack-potions", kinds.POTION_SET),
        ("hurt-potions", kinds.POTION_SET),
    )
    + _category(
        "equipment",
        *(
            spec
            for slot in _EQUIPMENT_SLOTS
            for spec in (
                (slot, kinds.LOOT_OR_ITEM, CAP_EQUIPMENT),
                (f"{slot}-drop-percent", kinds.PERCENT, CAP_EQUIPMENT),
            )
        ),
    )
    + _category(
        "drops",
        ("drops", kinds.LOOT),
        ("experience", kinds.NON_NEGATIVE_INTEGER),
    )
    + _category(
        "behaviour",
        ("explosion-radius", kinds.clamped_integer(0, 127), CAP_EXPLOSIVE),
        ("fuse-ticks", kinds.NON_NEGATIVE_INTEGER, CAP_EXPLOSIVE),
        ("ignited-percent", kinds.PERCENT, CAP_EXPLOSIVE),
        ("groups", kinds.TAG_SET),
        ("friend-groups", kinds.TAG_SET),
        ("tags", kinds.TAG_SET),
        ("anger-ticks", kinds.NON_NEGATIVE_INTEGER, CAP_ANGERABLE),
        ("target-damager", kinds.BOOLEAN),
        ("can-despawn", kinds.BOOLEAN),
        ("projectile-mobs", kinds.LOOT_OR_MOB),
        ("projectile-disguise", kinds.DISGUISE),
        ("projectile-removed", kinds.BOOLEAN),
        ("projectile-immunity-percent", kinds.PERCENT),
        ("hurt-teleport-percent", kinds.PERCENT),
        ("slime-can-split", kinds.BOOLEAN),
    )
    + _category(
        "support",
        ("support-mobs", kinds.LOOT_OR_MOB),
        ("support-percent", kinds.PERCENT),
        ("support-health", kinds.NON_NEGATIVE_DOUBLE),
        ("support-health-step", kinds.NON_NEGATIVE_DOUBLE),
    )
)

EQUIPMENT_SLOTS: Tuple[str, ...] = _EQUIPMENT_SLOTS
IMMUTABLE_PREDEFINED_PROPERTIES: FrozenSet[str] = frozenset({"parent-type", "entity-type"})

_SPECS_BY_ID: Dict[str, PropertySpec] = {spec.id: spec for spec in PROPERTY_SCHEMA}
_ALL_IDS: Tuple[str, ...] = tuple(spec.id for spec in PROPERTY_SCHEMA)


def get_spec(property_id: str) -> PropertySpec | None:
    """Return the schema entry for ``property_id`` or None if it is unknown."""
    return _SPECS_BY_ID.get(property_id)


def all_property_ids() -> Tuple[str, ...]:
    """Return every property ID in declaration order."""
    return _ALL_IDS


def sorted_property_ids() -> list[str]:
    """Return every property ID sorted case-insensitively."""
    return sorted(_ALL_IDS, key=str.casefold)


def is_immutable_on_predefined(property_id: str) -> bool:
    return property_id in IMMUTABLE_PREDEFINED_PROPERTIES
