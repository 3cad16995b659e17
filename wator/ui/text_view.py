"""
Plain-text board rendering for terminal display.

Each cell is drawn with its single-character symbol ('F' fish, 'S' shark,
'_' empty). The first line lists column numbers, every following line starts
with its row number.
"""

from __future__ import annotations

from wator.core.cell import symbol
from wator.core.grid import Grid


def render_grid(grid: Grid) -> str:
    """
    Render the whole grid as text.

    Args:
        grid: Grid to draw.

    Returns:
        Multi-line string, one header line plus one line per row.
    """
    header = "  " + "  ".join(str(c) for c in range(grid.columns))
    lines = [header]
    for r in range(grid.rows):
        cells = ", ".join(symbol(grid.cell_at(r, c)) for c in range(grid.columns))
        lines.append(f"{r} {cells},")
    return "\n".join(lines)


def render_counts(grid: Grid, tick: int) -> str:
    """One-line population status, e.g. 'Tick 12 | Fish: 40 | Sharks: 9'."""
    fish, sharks = grid.count_animals()
    return f"Tick {tick:4d} | Fish: {fish:6d} | Sharks: {sharks:6d}"
