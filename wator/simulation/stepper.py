"""
Tick algorithm for the Wa-Tor simulator.

One tick moves every fish, then every shark:

  1. Fish are enumerated row-major from a snapshot taken at tick start and
     processed one by one against the live grid, so a fish can move into a
     cell vacated earlier in the same tick.
  2. Sharks are enumerated row-major from the live grid after all fish have
     moved and likewise processed against the live grid.

Each animal's breeding countdown is reset when it hits 0 and then
decremented. An animal whose countdown was 0 at tick start leaves a fresh
offspring behind in the cell it leaves. Sharks prefer neighboring fish (and
refill their energy by eating); otherwise they lose one energy and die at 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from wator.core.cell import AnimalStatus, Cell, CellKind
from wator.core.errors import SimulationError

if TYPE_CHECKING:
    from wator.core.grid import Grid, Position


logger = logging.getLogger(__name__)

NO_ANIMALS_LEFT = "No fishes or sharks left on the board"


# ---------------------------------------------------------------------------
# Tick statistics
# ---------------------------------------------------------------------------

@dataclass
class TickStats:
    """Counters collected during a single tick."""
    fish_moves: int = 0
    fish_births: int = 0
    shark_moves: int = 0
    shark_births: int = 0
    fish_eaten: int = 0
    sharks_starved: int = 0


# ---------------------------------------------------------------------------
# Tick
# ---------------------------------------------------------------------------

def step(grid: Grid) -> TickStats:
    """
    Execute one tick on `grid` in place.

    Args:
        grid: The grid to advance.

    Returns:
        TickStats for this tick.

    Raises:
        SimulationError: If fish or sharks are extinct at tick start. The
            grid is left untouched in that case.
    """
    fish_count, shark_count = grid.count_animals()
    if fish_count == 0 or shark_count == 0:
        raise SimulationError(NO_ANIMALS_LEFT)

    stats = TickStats()

    snapshot = grid.snapshot()
    for row, column in grid.positions_of(CellKind.FISH, snapshot):
        _move_fish(grid, row, column, snapshot[row][column].status, stats)

    for row, column in grid.positions_of(CellKind.SHARK):
        _move_shark(grid, row, column, grid.cell_at(row, column).status, stats)

    return stats


def _choose(grid: Grid, candidates: list[Position]) -> Position:
    """Pick one candidate uniformly at random."""
    return candidates[int(grid.rng.integers(0, len(candidates)))]


def _relocate(
    grid: Grid,
    old: Position,
    new: Position,
    moved: Cell,
    offspring: Optional[Cell],
) -> None:
    """
    Write a move: the old cell first (offspring or empty), then the destination.

    When the animal stays put the destination write replaces the offspring,
    so no offspring appears.
    """
    grid.place(old[0], old[1], offspring if offspring is not None else Cell.empty())
    grid.place(new[0], new[1], moved)


def _move_fish(
    grid: Grid,
    row: int,
    column: int,
    status: AnimalStatus,
    stats: TickStats,
) -> None:
    breeds = status.has_to_breed()
    new_status = status.aged(CellKind.FISH)

    possible_moves = [
        pos for pos in grid.neighbors(row, column)
        if grid.kind_at(*pos) == CellKind.EMPTY
    ]
    logger.debug(
        "Fish (%d, %d) breed counter %d -> %d",
        row, column, status.breed_counter, new_status.breed_counter,
    )

    if not possible_moves:
        grid.place(row, column, Cell.fish(new_status))
        return

    destination = _choose(grid, possible_moves)
    logger.debug("Fish (%d, %d) moves to %s", row, column, destination)

    offspring = Cell.fish() if breeds else None
    _relocate(grid, (row, column), destination, Cell.fish(new_status), offspring)
    stats.fish_moves += 1
    if breeds:
        stats.fish_births += 1


def _move_shark(
    grid: Grid,
    row: int,
    column: int,
    status: AnimalStatus,
    stats: TickStats,
) -> None:
    breeds = status.has_to_breed()
    new_status = status.aged(CellKind.SHARK)
    logger.debug(
        "Shark (%d, %d) breed counter %d -> %d",
        row, column, status.breed_counter, new_status.breed_counter,
    )

    prioritized_moves: list[Position] = []
    possible_moves: list[Position] = []
    for pos in grid.neighbors(row, column):
        kind = grid.kind_at(*pos)
        if kind == CellKind.FISH:
            prioritized_moves.append(pos)
        elif kind == CellKind.EMPTY:
            possible_moves.append(pos)

    if prioritized_moves:
        destination = _choose(grid, prioritized_moves)
        new_status = new_status.fed()
        logger.debug("Shark (%d, %d) eats fish at %s", row, column, destination)
        stats.fish_eaten += 1
    else:
        new_status = new_status.starved()
        if new_status.is_dead():
            logger.debug("Shark (%d, %d) is dead", row, column)
            grid.place(row, column, Cell.empty())
            stats.sharks_starved += 1
            return

        if not possible_moves:
            grid.place(row, column, Cell.shark(grid.rng, new_status))
            return

        destination = _choose(grid, possible_moves)
        logger.debug("Shark (%d, %d) moves to %s", row, column, destination)

    offspring = Cell.shark(grid.rng) if breeds else None
    _relocate(grid, (row, column), destination, Cell.shark(grid.rng, new_status), offspring)
    stats.shark_moves += 1
    if breeds:
        stats.shark_births += 1
