"""
Spatial utilities for the Wa-Tor simulator.

Provides toroidal (wrap-around) grid math on (row, column) coordinates:
coordinate wrapping and von Neumann neighbor enumeration.

All functions assume a 2D grid with dimensions (rows, columns) where
coordinates wrap: row % rows, column % columns.
"""

from __future__ import annotations


# Neighbor order used everywhere: north (up), south (down), west (left), east (right)
DIRECTIONS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def toroidal_wrap(row: int, column: int, rows: int, columns: int) -> tuple[int, int]:
    """
    Wrap (row, column) coordinates to stay within grid bounds.

    Args:
        row, column: Raw coordinates (may be negative or >= dimensions).
        rows, columns: Grid dimensions.

    Returns:
        Wrapped (row, column) tuple within [0, rows) and [0, columns).
    """
    return row % rows, column % columns


def von_neumann_neighbors(
    row: int, column: int,
    rows: int, columns: int,
) -> list[tuple[int, int]]:
    """
    Enumerate the four orthogonal neighbors of a cell on a torus.

    Order is north, south, west, east. Row 0's north neighbor is row
    ``rows - 1`` and the last column's east neighbor is column 0.

    Args:
        row, column: Center position.
        rows, columns: Grid dimensions.

    Returns:
        List of four (row, column) tuples. On grids with a dimension of 1 or 2
        the same cell may appear more than once.
    """
    return [
        toroidal_wrap(row + d_row, column + d_col, rows, columns)
        for d_row, d_col in DIRECTIONS
    ]
