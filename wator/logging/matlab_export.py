"""
MATLAB export of a population history.

Writes a small .m script holding the fish and shark counts per tick and the
plotting commands for them, so the run can be charted without any plotting
dependency on this side.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

MATLAB_FILENAME = "simulation.m"


def format_matlab_script(fish: Sequence[int], sharks: Sequence[int]) -> str:
    """
    Build the MATLAB script text.

    Args:
        fish: Fish count per tick.
        sharks: Shark count per tick (same length as `fish`).

    Raises:
        ValueError: If the two histories differ in length.
    """
    if len(fish) != len(sharks):
        raise ValueError(
            f"fish and shark histories differ in length ({len(fish)} != {len(sharks)})"
        )

    n = len(fish)
    lines = [
        f"y_fishes = [{', '.join(str(int(v)) for v in fish)}];",
        f"y_sharks = [{', '.join(str(int(v)) for v in sharks)}];",
        "figure",
        "hold on",
        f"plot(1:{n}, y_fishes, 'r')",
        f"plot(1:{n}, y_sharks, 'b')",
        "hold off",
        "legend('Fishes', 'Sharks')",
    ]
    return "\n".join(lines) + "\n"


def write_matlab_script(
    path: str | Path,
    fish: Sequence[int],
    sharks: Sequence[int],
) -> Path:
    """
    Write the MATLAB script to `path`. Parent directories are created.

    Returns:
        Path to the written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(format_matlab_script(fish, sharks))
    return path
