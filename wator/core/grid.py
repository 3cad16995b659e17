"""
Grid (ocean) for the Wa-Tor simulator.

Owns the 2D toroidal array of cells and every piece of mutable simulation
state. Provides read access for neighbor queries, a small mutation API used
by the stepper, random seeding of the initial population and population
counting for display and metrics collaborators.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from wator.core.cell import Cell, CellKind
from wator.simulation.stepper import TickStats, step as advance
from wator.utils.spatial import von_neumann_neighbors


logger = logging.getLogger(__name__)

Position = tuple[int, int]
Cells = list[list[Cell]]


class Grid:
    """
    A fixed-size toroidal ocean of fish, sharks and empty cells.

    Cells are indexed as cells[row][column]. Dimensions never change after
    construction. Every random draw (seeding, shark energy, move choices)
    goes through the grid's own generator, so a fixed seed replays the same
    trajectory.

    Attributes:
        fish_count: Number of fish placed by `generate_random_animals()`.
        shark_count: Number of sharks placed by `generate_random_animals()`.
        rng: Seeded random generator.
    """

    def __init__(
        self,
        fish_count: int,
        shark_count: int,
        rows: int,
        columns: int,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        """
        Create an all-empty grid.

        Args:
            fish_count: Initial number of fish.
            shark_count: Initial number of sharks.
            rows, columns: Grid dimensions.
            rng: Random generator to use. Takes precedence over `seed`.
            seed: Seed for a new generator when `rng` is None.

        Raises:
            ValueError: If the dimensions are not positive, a count is
                negative, or the animals do not fit on the grid.
        """
        if rows < 1 or columns < 1:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{columns}")
        if fish_count < 0 or shark_count < 0:
            raise ValueError(
                f"Animal counts must be >= 0, got fish={fish_count}, sharks={shark_count}"
            )
        if fish_count + shark_count > rows * columns:
            raise ValueError(
                "The amount of fishes and sharks is bigger than the amount of fields "
                f"({fish_count} + {shark_count} > {rows}x{columns})"
            )

        self.fish_count = fish_count
        self.shark_count = shark_count
        self._rows = rows
        self._columns = columns
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._cells: Cells = self._empty_cells()

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def shape(self) -> tuple[int, int]:
        """(rows, columns)."""
        return (self._rows, self._columns)

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self._rows * self._columns

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def generate_random_animals(self) -> None:
        """
        Reset the grid and place the initial fish, then the initial sharks.

        Positions are drawn uniformly over the whole grid and redrawn while
        the drawn cell is occupied. Every placed animal gets a fresh status.
        """
        cells = self._empty_cells()

        for _ in range(self.fish_count):
            row, column = self._random_empty_position(cells)
            cells[row][column] = Cell.fish()

        for _ in range(self.shark_count):
            row, column = self._random_empty_position(cells)
            cells[row][column] = Cell.shark(self.rng)

        self._cells = cells
        logger.debug(
            "Seeded %dx%d grid with %d fish and %d sharks",
            self._rows, self._columns, self.fish_count, self.shark_count,
        )

    def _random_empty_position(self, cells: Cells) -> Position:
        row = int(self.rng.integers(0, self._rows))
        column = int(self.rng.integers(0, self._columns))
        while not cells[row][column].is_empty:
            row = int(self.rng.integers(0, self._rows))
            column = int(self.rng.integers(0, self._columns))
        return row, column

    def _empty_cells(self) -> Cells:
        return [[Cell.empty() for _ in range(self._columns)] for _ in range(self._rows)]

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def cell_at(self, row: int, column: int) -> Cell:
        """Cell at (row, column). Coordinates must be in bounds."""
        return self._cells[row][column]

    def kind_at(self, row: int, column: int) -> CellKind:
        return self._cells[row][column].kind

    def place(self, row: int, column: int, cell: Cell) -> None:
        """Replace the cell at (row, column)."""
        self._cells[row][column] = cell

    def neighbors(self, row: int, column: int) -> list[Position]:
        """North, south, west and east neighbors with toroidal wrap."""
        return von_neumann_neighbors(row, column, self._rows, self._columns)

    def snapshot(self) -> tuple[tuple[Cell, ...], ...]:
        """
        Read-only copy of the current cells.

        Cells are immutable, so copying the row structure isolates the
        snapshot from later `place()` calls.
        """
        return tuple(tuple(row) for row in self._cells)

    def positions_of(
        self,
        kind: CellKind,
        cells: Optional[Sequence[Sequence[Cell]]] = None,
    ) -> list[Position]:
        """
        Row-major positions of all cells of a kind.

        Args:
            kind: Kind to look for.
            cells: Cell rows to scan (e.g. a snapshot). None = live grid.
        """
        if cells is None:
            cells = self._cells
        return [
            (r, c)
            for r, row in enumerate(cells)
            for c, cell in enumerate(row)
            if cell.kind == kind
        ]

    def __iter__(self):
        """Iterate ((row, column), cell) in row-major order."""
        for r, row in enumerate(self._cells):
            for c, cell in enumerate(row):
                yield (r, c), cell

    # ------------------------------------------------------------------
    # Counting
    # ------------------------------------------------------------------

    def count_animals(self) -> tuple[int, int]:
        """
        Count living animals with a full scan.

        Returns:
            (fish, sharks) currently on the grid.
        """
        kinds = self.kind_array()
        fish = int(np.count_nonzero(kinds == CellKind.FISH))
        sharks = int(np.count_nonzero(kinds == CellKind.SHARK))
        return fish, sharks

    @property
    def empty_count(self) -> int:
        """Number of empty cells."""
        fish, sharks = self.count_animals()
        return self.size - fish - sharks

    def kind_array(self) -> NDArray[np.int8]:
        """Cell kinds as a (rows, columns) int8 array (0 empty, 1 fish, 2 shark)."""
        return np.array(
            [[int(cell.kind) for cell in row] for row in self._cells],
            dtype=np.int8,
        )

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def step(self) -> TickStats:
        """
        Advance the simulation by one tick.

        Returns:
            TickStats for this tick.

        Raises:
            SimulationError: If no fish or no sharks are left on the board.
        """
        return advance(self)

    # ------------------------------------------------------------------
    # Representation
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        fish, sharks = self.count_animals()
        return f"Grid(size={self._rows}x{self._columns}, fish={fish}, sharks={sharks})"
