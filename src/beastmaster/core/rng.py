"""Deterministic RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random
from typing import Sequence, TypeVar

T_co = TypeVar("T_co")


class RNG:
    """Wrapper around random.Random that provides deterministic helpers.

    Passing ``seed=None`` seeds from system entropy; tests always pass a seed.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._random = Random(seed)

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        return self._random.random()

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return self._random.choice(seq)

    def chance(self, probability: float) -> bool:
        """Return True with the given probability in [0.0, 1.0]."""
        return self._random.random() < probability

    def percent(self, percent: float) -> bool:
        """Return True with the given probability expressed in [0, 100]."""
        return self._random.random() * 100 < percent
