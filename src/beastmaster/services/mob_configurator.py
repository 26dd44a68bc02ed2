"""Applies derived mob type properties to live entities.

The game world is reached only through the :class:`MobEntity` and
:class:`WorldHooks` protocols. Each applier declares the entity capability it
needs in the property schema; appliers whose capability the entity lacks are
skipped. A failing property is logged and recorded, and the remaining
properties are still applied.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Callable, Dict, List, Protocol

from beastmaster.core.rng import RNG
from beastmaster.domain.defs import DropKind, ItemStack
from beastmaster.domain.errors import BeastmasterError
from beastmaster.domain.mob_type import MobType
from beastmaster.domain.property_schema import EQUIPMENT_SLOTS, PROPERTY_SCHEMA
from beastmaster.domain.value_kinds import SoundEffect
from beastmaster.services.catalog import CatalogSnapshot
from beastmaster.services.drop_selector import choose_equipment, choose_mob_type, generate_stack, roll_drops
from beastmaster.services.errors import FactoryError

logger = logging.getLogger(__name__)

MOB_TYPE_METADATA_KEY = "mob-type"
TICKS_PER_SECOND = 20


class MobEntity(Protocol):
    """The subset of a live creature the configurator drives."""

    capabilities: AbstractSet[str]
    location: object

    def set_metadata(self, key: str, value: str) -> None: ...
    def set_custom_name(self, name: str) -> None: ...
    def set_custom_name_visible(self, visible: bool) -> None: ...
    def set_visual_fire(self, burning: bool) -> None: ...
    def set_glowing(self, glowing: bool) -> None: ...
    def set_invisible(self, invisible: bool) -> None: ...
    def set_silent(self, silent: bool) -> None: ...
    def set_can_pick_up_items(self, can_pick_up: bool) -> None: ...
    def set_remove_when_far_away(self, can_despawn: bool) -> None: ...
    def set_air(self, maximum_ticks: int, remaining_ticks: int) -> None: ...
    def add_tags(self, tags: AbstractSet[str]) -> None: ...
    def set_attribute(self, attribute: str, value: float) -> bool: ...
    def set_health(self, health: float) -> None: ...
    def set_size(self, size: int) -> None: ...
    def set_baby(self, baby: bool) -> None: ...
    def set_powered(self, powered: bool) -> None: ...
    def set_explosion_radius(self, radius: int) -> None: ...
    def set_max_fuse_ticks(self, ticks: int) -> None: ...
    def ignite(self) -> None: ...
    def set_anger(self, ticks: int) -> None: ...
    def set_equipment(self, slot: str, stack: ItemStack) -> None: ...
    def set_equipment_drop_chance(self, slot: str, chance: float) -> None: ...
    def add_passenger(self, passenger: "MobEntity") -> None: ...


class WorldHooks(Protocol):
    """Game-world services outside the entity itself."""

    def spawn_mob(self, location: object, mob_type: MobType) -> MobEntity | None: ...
    def apply_disguise(self, entity: MobEntity, encoded_disguise: str) -> None: ...
    def apply_potion_set(self, entity: MobEntity, potion_set_id: str) -> None: ...
    def play_sound(self, location: object, sound: SoundEffect) -> None: ...


@dataclass(slots=True)
class PropertyFailure:
    property_id: str
    message: str


@dataclass(slots=True)
class ConfigureReport:
    """Outcome of configuring one entity."""

    mob_type_id: str
    applied: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failures: List[PropertyFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(slots=True)
class DeathDrops:
    """Materialized loot for a dead mob."""

    items: List[ItemStack] = field(default_factory=list)
    mobs: List[MobType] = field(default_factory=list)
    objectives: List[str] = field(default_factory=list)
    experience: int | None = None


Applier = Callable[["MobConfigurator", MobEntity, MobType, object], None]
_APPLIERS: Dict[str, Applier] = {}


def applies(*property_ids: str) -> Callable[[Applier], Applier]:
    def register(func: Applier) -> Applier:
        for property_id in property_ids:
            _APPLIERS[property_id] = func
        return func

    return register


class MobConfigurator:
    """Configures entities from mob types against one catalog snapshot."""

    def __init__(self, catalog: CatalogSnapshot, world: WorldHooks, rng: RNG) -> None:
        self._catalog = catalog
        self._world = world
        self._rng = rng

    @property
    def catalog(self) -> CatalogSnapshot:
        return self._catalog

    @property
    def world(self) -> WorldHooks:
        return self._world

    @property
    def rng(self) -> RNG:
        return self._rng

    def configure(self, entity: MobEntity, mob_type: MobType) -> ConfigureReport:
        """Apply every derived property of ``mob_type`` to ``entity`` in schema order."""
        entity.set_metadata(MOB_TYPE_METADATA_KEY, mob_type.id)
        report = ConfigureReport(mob_type_id=mob_type.id)
        for spec in PROPERTY_SCHEMA:
            applier = _APPLIERS.get(spec.id)
            if applier is None:
                continue
            if spec.capability is not None and spec.capability not in entity.capabilities:
                report.skipped.append(spec.id)
                continue
            try:
                value = self._catalog.derived_value(mob_type, spec.id)
                if value is None:
                    continue
                applier(self, entity, mob_type, value)
            except (BeastmasterError, FactoryError) as exc:
                logger.warning("Mob type %s: could not apply %s: %s", mob_type.id, spec.id, exc)
                report.failures.append(PropertyFailure(property_id=spec.id, message=str(exc)))
            else:
                report.applied.append(spec.id)
        return report

    def death_drops(self, mob_type: MobType) -> DeathDrops:
        """Roll the derived ``drops`` table of ``mob_type``.

        Entries that cannot be materialized are logged and left out.
        """
        result = DeathDrops(experience=self._catalog.derived_value(mob_type, "experience"))  # type: ignore[arg-type]
        table = self._catalog.drops_for(mob_type)
        if table is None:
            return result
        for entry in roll_drops(table, self._rng):
            if entry.objective is not None:
                result.objectives.append(entry.objective)
            if entry.kind is DropKind.MOB:
                mob = self._catalog.lookup_mob_type(entry.payload_id)
                if mob is None:
                    logger.warning("Drop table %s: unknown mob type %s.", table.id, entry.payload_id)
                else:
                    result.mobs.append(mob)
                continue
            try:
                stack = generate_stack(entry, self._catalog, self._rng)
            except (BeastmasterError, FactoryError) as exc:
                logger.warning("Drop table %s: skipping %s: %s", table.id, entry.key, exc)
                continue
            if stack is not None:
                result.items.append(stack)
        return result

    def roll_percent(self, percent: object) -> bool:
        return self._rng.percent(percent)  # type: ignore[arg-type]


# ---------------------------------------------------------------- Appearance
@applies("name")
def _apply_name(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_custom_name(translate_color_codes(value))  # type: ignore[arg-type]


@applies("show-name-plate")
def _apply_name_plate(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_custom_name_visible(value)  # type: ignore[arg-type]


@applies("disguise")
def _apply_disguise(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    self.world.apply_disguise(entity, value)  # type: ignore[arg-type]


@applies("passenger")
def _apply_passenger(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    # An unset passenger-percent means the passenger always spawns.
    percent = self.catalog.derived_value(mob_type, "passenger-percent")
    if percent is not None and not self.roll_percent(percent):
        return
    passenger_type = choose_mob_type(value, self.catalog, self.rng)  # type: ignore[arg-type]
    if passenger_type is None:
        return
    passenger = self.world.spawn_mob(entity.location, passenger_type)
    if passenger is not None:
        entity.add_passenger(passenger)


@applies("size")
def _apply_size(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_size(value)  # type: ignore[arg-type]


@applies("burning-percent")
def _apply_burning(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_visual_fire(self.roll_percent(value))


@applies("glowing")
def _apply_glowing(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_glowing(value)  # type: ignore[arg-type]


@applies("glowing-percent")
def _apply_glowing_percent(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_glowing(self.roll_percent(value))


@applies("invisible-percent")
def _apply_invisible(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_invisible(self.roll_percent(value))


@applies("baby-percent")
def _apply_baby(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_baby(self.roll_percent(value))


@applies("charged-percent")
def _apply_charged(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_powered(self.roll_percent(value))


# -------------------------------------------------------------------- Sounds
@applies("silent")
def _apply_silent(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_silent(value)  # type: ignore[arg-type]


@applies("spawn-sound")
def _apply_spawn_sound(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    # Configuration happens at spawn time, so this is where the sound plays.
    self.world.play_sound(entity.location, value)  # type: ignore[arg-type]


# --------------------------------------------------------------------- Buffs
_ATTRIBUTES = {
    "speed": "movement_speed",
    "flying-speed": "flying_speed",
    "follow-range": "follow_range",
    "attack-damage": "attack_damage",
    "attack-speed": "attack_speed",
}


@applies("health")
def _apply_health(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    if entity.set_attribute("max_health", value):  # type: ignore[arg-type]
        entity.set_health(value)  # type: ignore[arg-type]


def _attribute_applier(attribute: str) -> Applier:
    def apply(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
        entity.set_attribute(attribute, value)  # type: ignore[arg-type]

    return apply


for _property_id, _attribute in _ATTRIBUTES.items():
    _APPLIERS[_property_id] = _attribute_applier(_attribute)


@applies("breath-seconds")
def _apply_breath(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    ticks = TICKS_PER_SECOND * value  # type: ignore[operator]
    entity.set_air(ticks, ticks)


@applies("pick-up-percent")
def _apply_pick_up(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_can_pick_up_items(self.roll_percent(value))


@applies("potion-buffs")
def _apply_potion_buffs(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    self.world.apply_potion_set(entity, value)  # type: ignore[arg-type]


# ----------------------------------------------------------------- Equipment
def _equipment_applier(slot: str) -> Applier:
    def apply(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
        stack = choose_equipment(value, self.catalog, self.rng)  # type: ignore[arg-type]
        if stack is not None:
            entity.set_equipment(slot, stack)

    return apply


def _drop_chance_applier(slot: str) -> Applier:
    def apply(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
        entity.set_equipment_drop_chance(slot, value / 100)  # type: ignore[operator]

    return apply


for _slot in EQUIPMENT_SLOTS:
    _APPLIERS[_slot] = _equipment_applier(_slot)
    _APPLIERS[f"{_slot}-drop-percent"] = _drop_chance_applier(_slot)


# ----------------------------------------------------------------- Behaviour
@applies("explosion-radius")
def _apply_explosion_radius(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_explosion_radius(value)  # type: ignore[arg-type]


@applies("fuse-ticks")
def _apply_fuse_ticks(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_max_fuse_ticks(value)  # type: ignore[arg-type]


@applies("ignited-percent")
def _apply_ignited(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    if self.roll_percent(value):
        entity.ignite()


@applies("tags")
def _apply_tags(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.add_tags(value)  # type: ignore[arg-type]


@applies("anger-ticks")
def _apply_anger(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_anger(value)  # type: ignore[arg-type]


@applies("can-despawn")
def _apply_can_despawn(self: MobConfigurator, entity: MobEntity, mob_type: MobType, value: object) -> None:
    entity.set_remove_when_far_away(value)  # type: ignore[arg-type]


def translate_color_codes(text: str, marker: str = "&") -> str:
    """Replace ``&x`` color shorthands with section-sign codes."""
    result: List[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == marker and index + 1 < len(text) and text[index + 1].lower() in "0123456789abcdefklmnor":
            result.append("§" + text[index + 1].lower())
            index += 2
            continue
        result.append(char)
        index += 1
    return "".join(result)
