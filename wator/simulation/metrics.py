"""
Population metrics for the Wa-Tor simulator.

MetricsCollector gathers per-tick Key Performance Indicators (KPIs) from the
grid and the tick statistics. It produces a flat dictionary per tick suitable
for CSV export, MATLAB export and analysis.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd

from wator.core.grid import Grid
from wator.simulation.stepper import TickStats


# ---------------------------------------------------------------------------
# MetricsCollector
# ---------------------------------------------------------------------------

class MetricsCollector:
    """
    Collects and computes KPIs per tick.

    Usage:
      1. After each tick (or before the first), call `collect(grid, tick, stats)`
      2. Resulting dict is appended to `history`
      3. Call `to_dataframe()` or `summary()` to analyze the run

    Attributes:
        history: List of KPI dicts, one per collected tick.
    """

    def __init__(self):
        self.history: list[dict] = []

    def collect(
        self,
        grid: Grid,
        tick: int,
        tick_stats: Optional[TickStats] = None,
    ) -> dict:
        """
        Compute all KPIs for the current grid state and append to history.

        Args:
            grid: Current grid state.
            tick: Tick number the state belongs to.
            tick_stats: Counters of the tick that produced this state
                        (None for the initial state).

        Returns:
            Dict of KPI_name -> value.
        """
        if tick_stats is None:
            tick_stats = TickStats()

        fish, sharks = grid.count_animals()
        cells = grid.size

        kpis: dict = {}
        kpis["tick"] = tick
        kpis["fish_count"] = fish
        kpis["shark_count"] = sharks
        kpis["empty_count"] = cells - fish - sharks
        kpis["fish_fraction"] = fish / cells
        kpis["shark_fraction"] = sharks / cells

        kpis["fish_births"] = tick_stats.fish_births
        kpis["shark_births"] = tick_stats.shark_births
        kpis["fish_eaten"] = tick_stats.fish_eaten
        kpis["sharks_starved"] = tick_stats.sharks_starved

        self.history.append(kpis)
        return kpis

    @staticmethod
    def kpi_names() -> list[str]:
        """Ordered list of all KPI column names."""
        return [
            "tick",
            "fish_count",
            "shark_count",
            "empty_count",
            "fish_fraction",
            "shark_fraction",
            "fish_births",
            "shark_births",
            "fish_eaten",
            "sharks_starved",
        ]

    def to_dataframe(self) -> pd.DataFrame:
        """History as a DataFrame with one row per tick and `kpi_names()` columns."""
        return pd.DataFrame(self.history, columns=self.kpi_names())

    def summary(self) -> dict:
        """
        Aggregate population statistics over the history.

        Returns:
            Dict with min/max/mean for fish and sharks plus the tick of each
            peak (first one on ties). Empty history gives zeros.
        """
        frame = self.to_dataframe()
        result: dict = {"ticks_recorded": len(frame)}
        for prefix, column in (("fish", "fish_count"), ("shark", "shark_count")):
            counts = frame[column]
            if counts.empty:
                result.update({
                    f"{prefix}_min": 0, f"{prefix}_max": 0,
                    f"{prefix}_mean": 0.0, f"{prefix}_peak_tick": 0,
                })
                continue
            result[f"{prefix}_min"] = int(counts.min())
            result[f"{prefix}_max"] = int(counts.max())
            result[f"{prefix}_mean"] = float(counts.mean())
            result[f"{prefix}_peak_tick"] = int(frame.at[counts.idxmax(), "tick"])
        return result
