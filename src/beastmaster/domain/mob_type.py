"""Mob types and the property slots they own."""
from __future__ import annotations

import weakref
from typing import Dict, Iterator, Tuple

from .errors import ImmutablePropertyError, UnknownPropertyError
from .property_schema import PROPERTY_SCHEMA, PropertySpec, get_spec, is_immutable_on_predefined
from .value_kinds import ValueKind


class PropertySlot:
    """One property of one mob type.

    A value of ``None`` means the mob type does not override the property and
    defers to its ancestors.
    """

    __slots__ = ("_spec", "_value", "_owner")

    def __init__(self, spec: PropertySpec, owner: "MobType") -> None:
        self._spec = spec
        self._value: object | None = None
        self._owner = weakref.ref(owner)

    @property
    def id(self) -> str:
        return self._spec.id

    @property
    def kind(self) -> ValueKind:
        return self._spec.kind

    @property
    def spec(self) -> PropertySpec:
        return self._spec

    @property
    def value(self) -> object | None:
        return self._value

    @property
    def owner(self) -> "MobType | None":
        """The mob type this slot belongs to (None once that type is gone)."""
        return self._owner()

    def is_set(self) -> bool:
        return self._value is not None

    def format_value(self) -> str:
        return "(unset)" if self._value is None else self._spec.kind.format(self._value)

    def serialize_value(self) -> object:
        return None if self._value is None else self._spec.kind.serialize(self._value)

    def __repr__(self) -> str:
        owner = self.owner
        owner_id = owner.id if owner is not None else "?"
        return f"PropertySlot({owner_id}.{self.id}={self._value!r})"


class MobType:
    """A named, inheritable bundle of property overrides.

    Predefined mob types correspond to built-in creature kinds. Their
    ``parent-type`` and ``entity-type`` properties are fixed at construction.
    """

    def __init__(
        self,
        mob_type_id: str,
        parent_type_id: str | None = None,
        *,
        entity_type: str | None = None,
        predefined: bool = False,
    ) -> None:
        self._id = mob_type_id
        self._predefined = predefined
        self._slots: Dict[str, PropertySlot] = {spec.id: PropertySlot(spec, self) for spec in PROPERTY_SCHEMA}
        if parent_type_id is not None:
            self._assign("parent-type", parent_type_id)
        if entity_type is not None:
            self._assign("entity-type", entity_type)

    @classmethod
    def predefined_type(cls, entity_type: str) -> "MobType":
        """Return the predefined mob type for a built-in creature kind."""
        return cls(entity_type, entity_type=entity_type, predefined=True)

    @property
    def id(self) -> str:
        return self._id

    @property
    def predefined(self) -> bool:
        return self._predefined

    @property
    def parent_type_id(self) -> str | None:
        return self._slots["parent-type"].value  # type: ignore[return-value]

    def get_property(self, property_id: str) -> PropertySlot | None:
        """Return this type's own slot, ignoring inheritance."""
        return self._slots.get(property_id)

    def properties(self) -> Tuple[PropertySlot, ...]:
        """Return every slot in schema order."""
        return tuple(self._slots.values())

    def overridden_properties(self) -> Tuple[PropertySlot, ...]:
        return tuple(slot for slot in self._slots.values() if slot.is_set())

    def __iter__(self) -> Iterator[PropertySlot]:
        return iter(self._slots.values())

    def set_property(self, property_id: str, value: object | None) -> None:
        """Override (or with ``None``, stop overriding) a property.

        Raises ImmutablePropertyError for the locked properties of predefined
        types, UnknownPropertyError for IDs outside the schema and
        PropertyValueError when the value kind rejects ``value``.
        """
        if get_spec(property_id) is None:
            raise UnknownPropertyError(property_id)
        if self._predefined and is_immutable_on_predefined(property_id):
            raise ImmutablePropertyError(self._id, property_id)
        self._assign(property_id, value)

    def parse_property(self, property_id: str, text: str) -> object:
        """Parse administrator text into a value for ``property_id``."""
        spec = get_spec(property_id)
        if spec is None:
            raise UnknownPropertyError(property_id)
        return spec.kind.parse(text)

    def copy(self) -> "MobType":
        """Return an independent copy with the same ID, flags and values."""
        clone = MobType(self._id, predefined=self._predefined)
        for property_id, slot in self._slots.items():
            clone._slots[property_id]._value = slot._value
        return clone

    def _assign(self, property_id: str, value: object | None) -> None:
        slot = self._slots[property_id]
        slot._value = None if value is None else slot.kind.coerce(value)

    def __repr__(self) -> str:
        flag = ", predefined" if self._predefined else ""
        return f"MobType({self._id!r}, parent={self.parent_type_id!r}{flag})"
