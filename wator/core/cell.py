"""
Cells of the Wa-Tor ocean.

Every grid cell holds exactly one of: empty water, a fish, or a shark.
Fish and sharks carry an AnimalStatus with a breeding countdown; sharks
additionally carry an energy countdown that drops while they go hungry.

Cells and statuses are immutable. A tick never edits a cell in place, it
replaces it with a freshly built one (inherited or fresh status).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional

import numpy as np


FISH_BREED_TIME = 3
SHARK_BREED_TIME = 8
MAX_SHARK_ENERGY = 8


class CellKind(IntEnum):
    """Content of a grid cell. Integer values are used by `Grid.kind_array()`."""
    EMPTY = 0
    FISH = 1
    SHARK = 2


_BREED_TIMES = {
    CellKind.FISH: FISH_BREED_TIME,
    CellKind.SHARK: SHARK_BREED_TIME,
}

_SYMBOLS = {
    CellKind.EMPTY: "_",
    CellKind.FISH: "F",
    CellKind.SHARK: "S",
}


@dataclass(frozen=True, slots=True)
class AnimalStatus:
    """
    Per-animal counters.

    Attributes:
        breed_counter: Ticks remaining until the animal has to breed.
        energy: Remaining energy for sharks; None for fish.
    """
    breed_counter: int
    energy: Optional[int] = None

    @classmethod
    def new_fish(cls) -> AnimalStatus:
        """Fresh status for a newly created fish."""
        return cls(breed_counter=FISH_BREED_TIME)

    @classmethod
    def new_shark(cls, rng: np.random.Generator) -> AnimalStatus:
        """Fresh status for a newly created shark, energy uniform in [1, 8)."""
        return cls(
            breed_counter=SHARK_BREED_TIME,
            energy=int(rng.integers(1, SHARK_BREED_TIME)),
        )

    def has_to_breed(self) -> bool:
        return self.breed_counter == 0

    def is_dead(self) -> bool:
        return self.energy is not None and self.energy == 0

    def aged(self, kind: CellKind) -> AnimalStatus:
        """
        Status after one tick of the breeding countdown.

        A counter at 0 is first reset to the species breed time, then the
        counter is decremented unconditionally.
        """
        counter = self.breed_counter
        if counter == 0:
            counter = _BREED_TIMES[kind]
        return replace(self, breed_counter=counter - 1)

    def fed(self) -> AnimalStatus:
        """Energy restored to the maximum. No-op for fish."""
        if self.energy is None:
            return self
        return replace(self, energy=MAX_SHARK_ENERGY)

    def starved(self) -> AnimalStatus:
        """Energy reduced by one. No-op for fish."""
        if self.energy is None:
            return self
        return replace(self, energy=self.energy - 1)


@dataclass(frozen=True, slots=True)
class Cell:
    """
    One grid cell. Its position is implied by where it sits in the grid.

    Attributes:
        kind: What the cell contains.
        status: Animal counters (None for empty cells).
    """
    kind: CellKind
    status: Optional[AnimalStatus] = None

    @classmethod
    def empty(cls) -> Cell:
        return cls(CellKind.EMPTY)

    @classmethod
    def fish(cls, status: Optional[AnimalStatus] = None) -> Cell:
        """A fish cell; a fresh status is created when none is given."""
        return cls(CellKind.FISH, status if status is not None else AnimalStatus.new_fish())

    @classmethod
    def shark(
        cls,
        rng: np.random.Generator,
        status: Optional[AnimalStatus] = None,
    ) -> Cell:
        """A shark cell; a fresh status (random energy) is drawn when none is given."""
        return cls(CellKind.SHARK, status if status is not None else AnimalStatus.new_shark(rng))

    @property
    def is_empty(self) -> bool:
        return self.kind == CellKind.EMPTY

    @property
    def is_fish(self) -> bool:
        return self.kind == CellKind.FISH

    @property
    def is_shark(self) -> bool:
        return self.kind == CellKind.SHARK


def symbol(cell: Cell) -> str:
    """Single-character symbol for a cell: 'F' fish, 'S' shark, '_' empty."""
    return _SYMBOLS[cell.kind]
