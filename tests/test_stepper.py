"""
Unit tests for the tick algorithm.

Tests cover:
- Terminal condition (no fish / no sharks) and grid left untouched
- Fish movement: stay when boxed in, move to empty neighbors, toroidal wrap
- Fish processing order against the live grid (vacated cells are reusable)
- Fish breeding: offspring left behind only when moving, fresh offspring status
- Shark feeding priority, energy reset, fish consumption
- Shark starvation and removal, no offspring from a dead shark
- Shark breeding
- Sharks enumerated once per tick even when moving to a later cell
- Uniform choice among candidates (statistical)
- Deterministic replay with a fixed seed
- End-to-end 5x5 scenario
"""

import numpy as np
import pytest

from wator.core.cell import AnimalStatus, Cell, CellKind, MAX_SHARK_ENERGY
from wator.core.errors import SimulationError
from wator.core.grid import Grid
from wator.simulation.stepper import TickStats, step, NO_ANIMALS_LEFT


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class FirstChoiceRng:
    """Stand-in generator: always draws the lowest value (first candidate)."""

    def integers(self, low, high=None):
        return low


def build_grid(
    layout: list[str],
    rng=None,
    seed: int = 0,
    fish_status: AnimalStatus | None = None,
    shark_status: AnimalStatus | None = None,
    statuses: dict | None = None,
) -> Grid:
    """
    Build a grid from rows of 'F' (fish), 'S' (shark) and '_' (empty).

    Fish default to a fresh status, sharks to breed_counter=8 / energy=8.
    `statuses` maps (row, column) to a status overriding the default.
    """
    rows = len(layout)
    columns = len(layout[0])
    grid = Grid(0, 0, rows, columns, rng=rng, seed=seed)
    fish_status = fish_status or AnimalStatus.new_fish()
    shark_status = shark_status or AnimalStatus(breed_counter=8, energy=8)
    statuses = statuses or {}

    for r, line in enumerate(layout):
        for c, ch in enumerate(line):
            status = statuses.get((r, c))
            if ch == "F":
                grid.place(r, c, Cell.fish(status or fish_status))
            elif ch == "S":
                grid.place(r, c, Cell(CellKind.SHARK, status or shark_status))
    return grid


def layout_of(grid: Grid) -> list[str]:
    chars = {CellKind.EMPTY: "_", CellKind.FISH: "F", CellKind.SHARK: "S"}
    return [
        "".join(chars[grid.kind_at(r, c)] for c in range(grid.columns))
        for r in range(grid.rows)
    ]


# ---------------------------------------------------------------------------
# Terminal condition
# ---------------------------------------------------------------------------

class TestTerminalCondition:
    def test_no_sharks_raises(self):
        grid = build_grid(["F__", "___"])
        with pytest.raises(SimulationError, match=NO_ANIMALS_LEFT):
            step(grid)

    def test_no_fish_raises(self):
        grid = build_grid(["S__", "___"])
        with pytest.raises(SimulationError):
            step(grid)

    def test_empty_grid_raises(self):
        grid = Grid(0, 0, 3, 3, seed=1)
        with pytest.raises(SimulationError):
            grid.step()

    def test_grid_unchanged_after_error(self):
        grid = build_grid(["FF_", "_F_"])
        before = grid.snapshot()
        with pytest.raises(SimulationError):
            grid.step()
        assert grid.snapshot() == before

    def test_error_message(self):
        grid = build_grid(["F"])
        with pytest.raises(SimulationError) as exc_info:
            step(grid)
        assert str(exc_info.value) == "No fishes or sharks left on the board"
        assert exc_info.value.message == "No fishes or sharks left on the board"

    def test_returns_tick_stats(self):
        grid = build_grid(["FS"])
        stats = step(grid)
        assert isinstance(stats, TickStats)


# ---------------------------------------------------------------------------
# Fish movement
# ---------------------------------------------------------------------------

class TestFishMovement:
    def test_boxed_in_fish_stays_and_counts_down(self):
        # Middle fish has fish on both sides; row wraps onto itself vertically.
        grid = build_grid(["FFFS"], rng=FirstChoiceRng())
        step(grid)
        cell = grid.cell_at(0, 1)
        assert cell.kind == CellKind.FISH
        assert cell.status.breed_counter == 2

    def test_fish_moves_to_first_empty_neighbor(self):
        grid = build_grid(
            ["___", "_F_", "__S"],
            rng=FirstChoiceRng(),
            statuses={(2, 2): AnimalStatus(breed_counter=8, energy=5)},
        )
        stats = step(grid)
        # North of (1, 1) is (0, 1)
        assert grid.kind_at(0, 1) == CellKind.FISH
        assert grid.kind_at(1, 1) == CellKind.EMPTY
        assert grid.cell_at(0, 1).status == AnimalStatus(breed_counter=2)
        assert stats.fish_moves == 1
        assert stats.fish_births == 0

    def test_fish_wraps_up_from_row_zero(self):
        # Single column: the only empty neighbor of row 0 is row 2 ("up").
        grid = build_grid(["F", "S", "_"], seed=3)
        step(grid)
        # Fish moved to row 2 through the top edge, then the shark below
        # row 1 found it there and ate it.
        assert layout_of(grid) == ["_", "_", "S"]

    def test_fish_wraps_right_from_last_column(self):
        # Single row: the only empty neighbor of column 2 is column 0 ("right").
        grid = build_grid(["_SF"], seed=3)
        stats = step(grid)
        assert layout_of(grid) == ["S__"]
        assert stats.fish_moves == 1
        assert stats.fish_eaten == 1

    def test_later_fish_can_use_cell_vacated_this_tick(self):
        # Fish A (0,0) leaves west to (0,4). Fish B (0,1) then sees (0,0)
        # empty and, picking the first candidate, moves there.
        grid = build_grid(["FF_S_"], rng=FirstChoiceRng())
        step(grid)
        assert grid.kind_at(0, 0) == CellKind.FISH
        assert grid.kind_at(0, 2) == CellKind.EMPTY

    def test_fish_moved_this_tick_is_not_moved_again(self):
        grid = build_grid(
            ["_____", "_____", "__F__", "_____", "S____"],
            rng=FirstChoiceRng(),
        )
        stats = step(grid)
        assert stats.fish_moves == 1
        assert grid.kind_at(1, 2) == CellKind.FISH

    def test_fish_choice_is_uniform(self):
        destinations = set()
        for seed in range(200):
            grid = build_grid(
                ["S____", "_____", "__F__", "_____", "_____"],
                seed=seed,
            )
            step(grid)
            destinations.update(grid.positions_of(CellKind.FISH))
        assert destinations == {(1, 2), (3, 2), (2, 1), (2, 3)}


# ---------------------------------------------------------------------------
# Fish breeding
# ---------------------------------------------------------------------------

class TestFishBreeding:
    def test_breeding_fish_leaves_fresh_offspring(self):
        grid = build_grid(
            ["____", "_F__", "____", "___S"],
            rng=FirstChoiceRng(),
            statuses={
                (1, 1): AnimalStatus(breed_counter=0),
                (3, 3): AnimalStatus(breed_counter=5, energy=5),
            },
        )
        stats = step(grid)
        # Offspring untouched at the old cell
        assert grid.cell_at(1, 1) == Cell(CellKind.FISH, AnimalStatus(breed_counter=3))
        # Mover reset to 3, then decremented
        assert grid.cell_at(0, 1) == Cell(CellKind.FISH, AnimalStatus(breed_counter=2))
        assert stats.fish_births == 1
        assert grid.count_animals()[0] == 2

    def test_breeding_fish_that_cannot_move_has_no_offspring(self):
        grid = build_grid(
            ["FFFS"],
            rng=FirstChoiceRng(),
            statuses={(0, 1): AnimalStatus(breed_counter=0)},
        )
        stats = step(grid)
        assert grid.cell_at(0, 1).status.breed_counter == 2
        assert stats.fish_births == 0

    def test_fish_breed_cycle(self):
        # Fish and shark start 10 steps apart so the shark cannot reach the
        # fish within four ticks.
        layout = ["_" * 11 for _ in range(11)]
        layout[0] = "S" + "_" * 10
        layout[5] = "_" * 5 + "F" + "_" * 5
        grid = build_grid(layout, seed=11)
        fish_counts = []
        for _ in range(4):
            grid.step()
            fish_counts.append(grid.count_animals()[0])
        # 3 -> 2 -> 1 -> 0, then the fourth tick breeds.
        assert fish_counts[:3] == [1, 1, 1]
        assert fish_counts[3] == 2


# ---------------------------------------------------------------------------
# Sharks
# ---------------------------------------------------------------------------

class TestSharkFeeding:
    def test_shark_eats_adjacent_fish(self):
        grid = build_grid(["FS"], seed=5, shark_status=AnimalStatus(breed_counter=4, energy=2))
        stats = step(grid)
        assert layout_of(grid) == ["S_"]
        shark = grid.cell_at(0, 0)
        assert shark.status.energy == MAX_SHARK_ENERGY
        assert shark.status.breed_counter == 3
        assert stats.fish_eaten == 1
        assert grid.count_animals() == (0, 1)

    def test_fish_preferred_over_empty(self):
        # The fish first moves to (0,2); the shark then has (0,0) empty and
        # (0,2) fish. A first-candidate pick among empties would go west.
        grid = build_grid(["FS_"], rng=FirstChoiceRng())
        stats = step(grid)
        assert layout_of(grid) == ["__S"]
        assert stats.fish_eaten == 1

    def test_sated_shark_does_not_lose_energy(self):
        grid = build_grid(["FS"], seed=5, shark_status=AnimalStatus(breed_counter=4, energy=1))
        stats = step(grid)
        assert stats.sharks_starved == 0
        assert grid.cell_at(0, 0).status.energy == MAX_SHARK_ENERGY

    def test_next_step_after_last_fish_eaten_raises(self):
        grid = build_grid(["FS"], seed=5)
        step(grid)
        with pytest.raises(SimulationError):
            step(grid)


class TestSharkStarvation:
    def test_hungry_shark_loses_energy_and_moves(self):
        grid = build_grid(
            ["_____", "_S___", "_____", "___F_", "_____"],
            rng=FirstChoiceRng(),
            statuses={(1, 1): AnimalStatus(breed_counter=5, energy=5)},
        )
        stats = step(grid)
        assert grid.cell_at(0, 1) == Cell(CellKind.SHARK, AnimalStatus(breed_counter=4, energy=4))
        assert grid.kind_at(1, 1) == CellKind.EMPTY
        assert stats.shark_moves == 1

    def test_shark_dies_when_energy_runs_out(self):
        grid = build_grid(
            ["S____", "_____", "_____", "___F_", "_____"],
            rng=FirstChoiceRng(),
            statuses={(0, 0): AnimalStatus(breed_counter=5, energy=1)},
        )
        stats = step(grid)
        assert grid.kind_at(0, 0) == CellKind.EMPTY
        assert grid.count_animals() == (1, 0)
        assert stats.sharks_starved == 1
        assert stats.shark_moves == 0

    def test_dying_breeder_leaves_no_offspring(self):
        grid = build_grid(
            ["S____", "_____", "_____", "___F_", "_____"],
            rng=FirstChoiceRng(),
            statuses={(0, 0): AnimalStatus(breed_counter=0, energy=1)},
        )
        stats = step(grid)
        assert grid.count_animals()[1] == 0
        assert stats.shark_births == 0

    def test_boxed_in_shark_stays_and_starves(self):
        # On a 2x2 torus (0,0) only touches (1,0) and (0,1), both sharks.
        grid = build_grid(
            ["SS", "SF"],
            seed=4,
            statuses={(0, 0): AnimalStatus(breed_counter=5, energy=5)},
        )
        step(grid)
        assert grid.cell_at(0, 0) == Cell(CellKind.SHARK, AnimalStatus(breed_counter=4, energy=4))
        # (0,1) ate the boxed-in fish
        assert grid.kind_at(1, 1) == CellKind.SHARK
        assert grid.count_animals() == (0, 3)


class TestSharkBreeding:
    def test_breeding_shark_leaves_fresh_offspring(self):
        grid = build_grid(
            ["_____", "_S___", "_____", "___F_", "_____"],
            rng=FirstChoiceRng(),
            statuses={(1, 1): AnimalStatus(breed_counter=0, energy=5)},
        )
        stats = step(grid)
        # Fresh shark: breed 8, energy drawn from [1, 8) (stub draws 1)
        assert grid.cell_at(1, 1) == Cell(CellKind.SHARK, AnimalStatus(breed_counter=8, energy=1))
        assert grid.cell_at(0, 1) == Cell(CellKind.SHARK, AnimalStatus(breed_counter=7, energy=4))
        assert stats.shark_births == 1

    def test_feeding_shark_breeds(self):
        grid = build_grid(["FS"], seed=9, shark_status=AnimalStatus(breed_counter=0, energy=3))
        stats = step(grid)
        assert layout_of(grid) == ["SS"]
        offspring = grid.cell_at(0, 1).status
        assert offspring.breed_counter == 8
        assert 1 <= offspring.energy < 8
        assert grid.cell_at(0, 0).status == AnimalStatus(breed_counter=7, energy=MAX_SHARK_ENERGY)
        assert stats.shark_births == 1


class TestSharkOrder:
    def test_shark_moving_to_later_cell_is_not_processed_twice(self):
        grid = build_grid(
            ["_S__", "_S__", "___F", "____"],
            rng=FirstChoiceRng(),
        )
        stats = step(grid)
        # Shark from (0,1) wraps north to (3,1); shark from (1,1) then moves
        # north into the vacated (0,1).
        assert grid.kind_at(3, 1) == CellKind.SHARK
        assert grid.kind_at(0, 1) == CellKind.SHARK
        assert grid.kind_at(2, 1) == CellKind.EMPTY
        assert stats.shark_moves == 2


# ---------------------------------------------------------------------------
# Determinism and end-to-end
# ---------------------------------------------------------------------------

def _run_trajectory(seed: int, ticks: int) -> list:
    grid = Grid(30, 10, 10, 10, seed=seed)
    grid.generate_random_animals()
    trajectory = [grid.snapshot()]
    for _ in range(ticks):
        try:
            grid.step()
        except SimulationError:
            break
        trajectory.append(grid.snapshot())
    return trajectory


class TestDeterminism:
    def test_same_seed_same_trajectory(self):
        assert _run_trajectory(1234, 30) == _run_trajectory(1234, 30)

    def test_different_seed_different_trajectory(self):
        assert _run_trajectory(1, 10) != _run_trajectory(2, 10)

    def test_explicit_generators_replay(self):
        a = Grid(10, 5, 5, 5, rng=np.random.default_rng(77))
        b = Grid(10, 5, 5, 5, rng=np.random.default_rng(77))
        a.generate_random_animals()
        b.generate_random_animals()
        for _ in range(10):
            try:
                a.step()
            except SimulationError:
                with pytest.raises(SimulationError):
                    b.step()
                break
            b.step()
            assert a.snapshot() == b.snapshot()


class TestEndToEnd:
    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4, 5, 6, 7])
    def test_small_ocean_fifty_ticks(self, seed):
        grid = Grid(10, 5, 5, 5, seed=seed)
        grid.generate_random_animals()
        assert grid.count_animals() == (10, 5)

        for _ in range(50):
            try:
                grid.step()
            except SimulationError:
                fish, sharks = grid.count_animals()
                assert fish == 0 or sharks == 0
                break
            fish, sharks = grid.count_animals()
            assert fish >= 0 and sharks >= 0
            assert fish + sharks <= 25

    def test_breed_counters_never_negative(self):
        grid = Grid(40, 10, 10, 10, seed=21)
        grid.generate_random_animals()
        for _ in range(60):
            try:
                grid.step()
            except SimulationError:
                break
            for _, cell in grid:
                if not cell.is_empty:
                    assert cell.status.breed_counter >= 0
                if cell.is_shark:
                    assert 1 <= cell.status.energy <= MAX_SHARK_ENERGY
