"""
Unit tests for plain-text board rendering.
"""

import pytest

from wator.core.cell import AnimalStatus, Cell, CellKind
from wator.core.grid import Grid
from wator.ui.text_view import render_grid, render_counts


@pytest.fixture
def grid() -> Grid:
    g = Grid(0, 0, 2, 3)
    g.place(0, 0, Cell.fish())
    g.place(1, 2, Cell(CellKind.SHARK, AnimalStatus(breed_counter=8, energy=4)))
    return g


class TestRenderGrid:
    def test_layout(self, grid):
        assert render_grid(grid) == (
            "  0  1  2\n"
            "0 F, _, _,\n"
            "1 _, _, S,"
        )

    def test_one_line_per_row_plus_header(self):
        text = render_grid(Grid(0, 0, 4, 2))
        assert len(text.splitlines()) == 5

    def test_empty_grid_symbols(self):
        lines = render_grid(Grid(0, 0, 1, 4)).splitlines()
        assert lines[1] == "0 _, _, _, _,"


class TestRenderCounts:
    def test_format(self, grid):
        assert render_counts(grid, 12) == "Tick   12 | Fish:      1 | Sharks:      1"
