"""Value kinds for mob type properties.

Every property in the schema declares one value kind. The kind owns all
validation of values assigned to the property:

* ``coerce`` accepts a Python/JSON value (as stored in definition files),
* ``parse`` accepts text typed by an administrator,
* ``serialize`` converts a stored value back to its JSON form,
* ``format`` renders a value for listings.

Invalid values raise :class:`PropertyValueError`. ``None`` is never passed to a
kind; it is handled by the slot as "not overridden".
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Mapping, Tuple

from .entity_types import is_entity_type, normalize_entity_type
from .errors import PropertyValueError

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


class ValueKind:
    """Base class for property value kinds."""

    name = "value"
    references: Tuple[str, ...] = ()

    def coerce(self, raw: object) -> object:
        return raw

    def parse(self, text: str) -> object:
        return self.coerce(text)

    def serialize(self, value: object) -> object:
        return value

    def format(self, value: object) -> str:
        return str(value)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class StringKind(ValueKind):
    def __init__(self, name: str = "string", references: Tuple[str, ...] = ()) -> None:
        self.name = name
        self.references = references

    def coerce(self, raw: object) -> str:
        if not isinstance(raw, str):
            raise PropertyValueError(f"{self.name} value must be a string, not {type(raw).__name__}.")
        if not raw.strip():
            raise PropertyValueError(f"{self.name} value must not be blank.")
        return raw

    def parse(self, text: str) -> str:
        return self.coerce(text.strip())


class BooleanKind(ValueKind):
    name = "boolean"

    def coerce(self, raw: object) -> bool:
        if not isinstance(raw, bool):
            raise PropertyValueError(f"boolean value expected, got {raw!r}.")
        return raw

    def parse(self, text: str) -> bool:
        word = text.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise PropertyValueError(f"'{text}' is not a boolean (use true or false).")

    def format(self, value: object) -> str:
        return "true" if value else "false"


class IntegerKind(ValueKind):
    """Integer in an optional range that either clamps or rejects."""

    def __init__(
        self,
        name: str,
        minimum: int | None = None,
        maximum: int | None = None,
        *,
        clamp: bool = False,
    ) -> None:
        self.name = name
        self.minimum = minimum
        self.maximum = maximum
        self.clamp = clamp

    def coerce(self, raw: object) -> int:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise PropertyValueError(f"{self.name} value must be an integer, got {raw!r}.")
        return self._limit(raw)

    def parse(self, text: str) -> int:
        try:
            value = int(text.strip())
        except ValueError as exc:
            raise PropertyValueError(f"'{text}' is not an integer.") from exc
        return self.coerce(value)

    def _limit(self, value: int) -> int:
        if self.minimum is not None and value < self.minimum:
            if not self.clamp:
                raise PropertyValueError(f"{self.name} value {value} is below {self.minimum}.")
            value = self.minimum
        if self.maximum is not None and value > self.maximum:
            if not self.clamp:
                raise PropertyValueError(f"{self.name} value {value} is above {self.maximum}.")
            value = self.maximum
        return value


class DoubleKind(ValueKind):
    """Floating point number in an optional range that either clamps or rejects."""

    def __init__(
        self,
        name: str,
        minimum: float | None = None,
        maximum: float | None = None,
        *,
        clamp: bool = False,
    ) -> None:
        self.name = name
        self.minimum = minimum
        self.maximum = maximum
        self.clamp = clamp

    def coerce(self, raw: object) -> float:
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise PropertyValueError(f"{self.name} value must be a number, got {raw!r}.")
        return self._limit(float(raw))

    def parse(self, text: str) -> float:
        try:
            value = float(text.strip())
        except ValueError as exc:
            raise PropertyValueError(f"'{text}' is not a number.") from exc
        return self.coerce(value)

    def format(self, value: object) -> str:
        return f"{value:g}"

    def _limit(self, value: float) -> float:
        if value != value:
            raise PropertyValueError(f"{self.name} value must not be NaN.")
        if self.minimum is not None and value < self.minimum:
            if not self.clamp:
                raise PropertyValueError(f"{self.name} value {value:g} is below {self.minimum:g}.")
            value = self.minimum
        if self.maximum is not None and value > self.maximum:
            if not self.clamp:
                raise PropertyValueError(f"{self.name} value {value:g} is above {self.maximum:g}.")
            value = self.maximum
        return value


class PercentKind(DoubleKind):
    def __init__(self) -> None:
        super().__init__("percent", 0.0, 100.0, clamp=False)

    def parse(self, text: str) -> float:
        return super().parse(text.strip().rstrip("%"))

    def format(self, value: object) -> str:
        return f"{value:g}%"


class EntityTypeKind(ValueKind):
    name = "entity_type"

    def coerce(self, raw: object) -> str:
        if not isinstance(raw, str):
            raise PropertyValueError(f"entity type must be a string, got {raw!r}.")
        if not is_entity_type(raw):
            raise PropertyValueError(f"'{raw}' is not a known entity type.")
        return normalize_entity_type(raw)


class TagSetKind(ValueKind):
    """Set of tags; text input is comma and/or whitespace separated."""

    name = "tag_set"

    def coerce(self, raw: object) -> FrozenSet[str]:
        if isinstance(raw, str):
            return self.parse(raw)
        if not isinstance(raw, (list, tuple, set, frozenset)):
            raise PropertyValueError(f"tag set must be a list of strings, got {raw!r}.")
        tags = set()
        for tag in raw:
            if not isinstance(tag, str) or not tag.strip():
                raise PropertyValueError(f"tag set entries must be non-blank strings, got {tag!r}.")
            tags.add(tag.strip())
        return frozenset(tags)

    def parse(self, text: str) -> FrozenSet[str]:
        return frozenset(part for part in text.replace(",", " ").split() if part)

    def serialize(self, value: object) -> list[str]:
        return sorted(value)  # type: ignore[arg-type]

    def format(self, value: object) -> str:
        return ", ".join(sorted(value)) if value else "(none)"  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class SoundEffect:
    """A sound played at a location with a volume and pitch."""

    sound: str
    volume: float = 1.0
    pitch: float = 1.0

    def to_payload(self) -> dict[str, object]:
        return {"sound": self.sound, "volume": self.volume, "pitch": self.pitch}

    def __str__(self) -> str:
        return f"{self.sound} {self.volume:g} {self.pitch:g}"


class SoundEffectKind(ValueKind):
    """Sound effect as ``{"sound", "volume", "pitch"}`` or ``"sound [volume [pitch]]"``."""

    name = "sound_effect"
    MIN_PITCH = 0.5
    MAX_PITCH = 2.0

    def coerce(self, raw: object) -> SoundEffect:
        if isinstance(raw, SoundEffect):
            return raw
        if isinstance(raw, str):
            return self.parse(raw)
        if not isinstance(raw, Mapping):
            raise PropertyValueError(f"sound effect must be an object or string, got {raw!r}.")
        sound = raw.get("sound")
        if not isinstance(sound, str) or not sound.strip():
            raise PropertyValueError("sound effect requires a 'sound' name.")
        return self._build(sound.strip(), raw.get("volume", 1.0), raw.get("pitch", 1.0))

    def parse(self, text: str) -> SoundEffect:
        parts = text.split()
        if not parts or len(parts) > 3:
            raise PropertyValueError("sound effect must be: <sound> [<volume> [<pitch>]].")
        numbers: list[float] = []
        for part in parts[1:]:
            try:
                numbers.append(float(part))
            except ValueError as exc:
                raise PropertyValueError(f"'{part}' is not a number.") from exc
        return self._build(parts[0], *numbers)

    def serialize(self, value: object) -> dict[str, object]:
        return value.to_payload()  # type: ignore[union-attr]

    def _build(self, sound: str, volume: object = 1.0, pitch: object = 1.0) -> SoundEffect:
        for label, number in (("volume", volume), ("pitch", pitch)):
            if isinstance(number, bool) or not isinstance(number, (int, float)):
                raise PropertyValueError(f"sound effect {label} must be a number, got {number!r}.")
        if volume < 0:  # type: ignore[operator]
            raise PropertyValueError("sound effect volume must not be negative.")
        clamped_pitch = min(max(float(pitch), self.MIN_PITCH), self.MAX_PITCH)  # type: ignore[arg-type]
        return SoundEffect(sound=sound, volume=float(volume), pitch=clamped_pitch)  # type: ignore[arg-type]


def clamped_integer(minimum: int, maximum: int) -> IntegerKind:
    """Return an integer kind that silently clamps into [minimum, maximum]."""
    return IntegerKind(f"integer[{minimum},{maximum}]", minimum, maximum, clamp=True)


def clamped_double(minimum: float, maximum: float) -> DoubleKind:
    """Return a number kind that silently clamps into [minimum, maximum]."""
    return DoubleKind(f"double[{minimum:g},{maximum:g}]", minimum, maximum, clamp=True)


STRING = StringKind()
BOOLEAN = BooleanKind()
PERCENT = PercentKind()
NON_NEGATIVE_INTEGER = IntegerKind("non_negative_integer", 0)
NON_NEGATIVE_DOUBLE = DoubleKind("non_negative_double", 0.0)
ENTITY_TYPE = EntityTypeKind()
TAG_SET = TagSetKind()
SOUND_EFFECT = SoundEffectKind()
DISGUISE = StringKind("disguise")
POTION_SET = StringKind("potion_set", references=("potion_set",))
LOOT = StringKind("loot", references=("loot",))
LOOT_OR_ITEM = StringKind("loot_or_item", references=("loot", "item"))
LOOT_OR_MOB = StringKind("loot_or_mob", references=("loot", "mob"))

