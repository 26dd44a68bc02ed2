"""Mob types repository."""
from __future__ import annotations

import logging
from typing import Dict

from beastmaster.data.errors import DataValidationError
from beastmaster.data.repositories.base import RepositoryBase
from beastmaster.domain.entity_types import PREDEFINED_ENTITY_TYPES
from beastmaster.domain.errors import PropertyValueError
from beastmaster.domain.mob_type import MobType
from beastmaster.domain.property_schema import get_spec, is_immutable_on_predefined

logger = logging.getLogger(__name__)


class MobTypesRepository(RepositoryBase[MobType]):
    """Loads mob types on top of the predefined ones.

    A record whose ID names a predefined type overrides properties of that type;
    any other record creates a custom type. Unknown property IDs are skipped
    with a warning so that files written by newer versions still load.
    """

    def __init__(self, base_path=None) -> None:
        super().__init__("mob_types.json", base_path, optional=True)

    def _build(self, raw: dict[str, object]) -> Dict[str, MobType]:
        mob_types: Dict[str, MobType] = {
            entity_type: MobType.predefined_type(entity_type) for entity_type in PREDEFINED_ENTITY_TYPES
        }
        for raw_id, payload in raw.items():
            if not isinstance(raw_id, str) or not raw_id.strip():
                raise DataValidationError("Mob type IDs must be non-empty strings.")
            record = self._require_mapping(payload, f"mob type '{raw_id}'")
            mob_type = mob_types.get(raw_id) or MobType(raw_id)
            properties = record.get("properties")
            if properties is None:
                if not mob_type.predefined:
                    logger.warning("Mob type %s overrides no properties.", raw_id)
            else:
                property_map = self._require_mapping(properties, f"mob type '{raw_id}' properties")
                self._load_properties(mob_type, property_map)
            mob_types[raw_id] = mob_type
        return mob_types

    def _load_properties(self, mob_type: MobType, property_map: dict[str, object]) -> None:
        for property_id, raw_value in property_map.items():
            context = f"mob type '{mob_type.id}' property '{property_id}'"
            if get_spec(property_id) is None:
                logger.warning("Skipping unknown property %s of mob type %s.", property_id, mob_type.id)
                continue
            if mob_type.predefined and is_immutable_on_predefined(property_id):
                current = mob_type.get_property(property_id)
                if current is not None and raw_value != current.serialize_value():
                    logger.warning("Ignoring %s of predefined mob type %s.", property_id, mob_type.id)
                continue
            try:
                mob_type.set_property(property_id, raw_value)
            except PropertyValueError as exc:
                raise DataValidationError(f"{context}: {exc}") from exc
