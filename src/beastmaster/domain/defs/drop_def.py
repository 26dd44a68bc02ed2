"""Drop table definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

NOTHING_ID = "nothing"


class DropKind(str, Enum):
    NOTHING = "nothing"
    ITEM = "item"
    MOB = "mob"


@dataclass(frozen=True, slots=True)
class DropEntry:
    """One candidate outcome of a drop table.

    ``chance`` is an independent probability in [0, 1], not a weight relative to
    the other entries of the table.
    """

    kind: DropKind
    payload_id: str | None
    chance: float
    min_qty: int = 1
    max_qty: int = 1
    objective: str | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.chance <= 1.0:
            raise ValueError(f"Drop chance must be between 0 and 1, got {self.chance}.")
        if self.min_qty < 0 or self.max_qty < self.min_qty:
            raise ValueError(f"Drop quantity range [{self.min_qty},{self.max_qty}] is invalid.")
        if self.kind is not DropKind.NOTHING and not self.payload_id:
            raise ValueError(f"{self.kind.value} drops need a payload id.")

    @classmethod
    def nothing(cls) -> "DropEntry":
        """Return the "no outcome" entry synthesized when no trial succeeds."""
        return cls(kind=DropKind.NOTHING, payload_id=None, chance=0.0, min_qty=0, max_qty=0)

    @property
    def is_nothing(self) -> bool:
        return self.kind is DropKind.NOTHING

    @property
    def key(self) -> str:
        """The ID this entry is stored under in its table."""
        return self.payload_id if self.payload_id is not None else NOTHING_ID


@dataclass(frozen=True, slots=True)
class DropTable:
    """Ordered drop entries.

    ``single`` tables yield at most one entry when rolled on death; otherwise
    every entry rolls independently.
    """

    id: str
    entries: Tuple[DropEntry, ...] = ()
    single: bool = True

    def __post_init__(self) -> None:
        keys = set()
        for entry in self.entries:
            # Entries are stored keyed by payload ID.
            if entry.key in keys:
                raise ValueError(f"Drop table '{self.id}' lists '{entry.key}' more than once.")
            keys.add(entry.key)

    def get_entry(self, payload_id: str) -> DropEntry | None:
        for entry in self.entries:
            if entry.key == payload_id:
                return entry
        return None
