"""Built-in creature kinds that exist as predefined mob types."""
from __future__ import annotations

from typing import Tuple

PREDEFINED_ENTITY_TYPES: Tuple[str, ...] = (
    "bat",
    "bee",
    "blaze",
    "cave_spider",
    "chicken",
    "cow",
    "creeper",
    "drowned",
    "elder_guardian",
    "enderman",
    "endermite",
    "evoker",
    "ghast",
    "guardian",
    "hoglin",
    "horse",
    "husk",
    "iron_golem",
    "magma_cube",
    "phantom",
    "pig",
    "piglin",
    "piglin_brute",
    "pillager",
    "ravager",
    "sheep",
    "shulker",
    "silverfish",
    "skeleton",
    "skeleton_horse",
    "slime",
    "spider",
    "stray",
    "vex",
    "vindicator",
    "warden",
    "witch",
    "wither",
    "wither_skeleton",
    "wolf",
    "zoglin",
    "zombie",
    "zombie_horse",
    "zombie_villager",
    "zombified_piglin",
)

_KNOWN = frozenset(PREDEFINED_ENTITY_TYPES)


def normalize_entity_type(name: str) -> str:
    """Return the canonical lower-case form of an entity type name."""
    return name.strip().lower().replace("-", "_")


def is_entity_type(name: str) -> bool:
    return normalize_entity_type(name) in _KNOWN
