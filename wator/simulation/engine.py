"""
Simulation Engine — tick loop for the Wa-Tor simulator.

Builds the grid from a configuration, seeds it, and repeatedly advances it
until either species dies out (the grid raises SimulationError) or a tick
limit is reached. Population counts are recorded before every tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Optional, Callable

from wator.core.config import SimConfig
from wator.core.errors import SimulationError
from wator.core.grid import Grid
from wator.simulation.stepper import TickStats


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Run result
# ---------------------------------------------------------------------------

@dataclass
class RunResult:
    """Result of a complete simulation run."""
    config: SimConfig
    seed: Optional[int]
    total_ticks: int = 0
    final_fish: int = 0
    final_sharks: int = 0
    terminated: bool = False
    termination_tick: Optional[int] = None
    termination_reason: Optional[str] = None
    fish_history: list[int] = field(default_factory=list)
    shark_history: list[int] = field(default_factory=list)
    tick_stats_history: list[TickStats] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Simulation Engine
# ---------------------------------------------------------------------------

class SimulationEngine:
    """
    Core simulation engine.

    Attributes:
        config: Simulation configuration.
        grid: The simulated ocean.
        tick_count: Number of completed ticks.
        tick_stats: Statistics of the most recent tick.
        terminated: Whether a step failed because a species died out.
        on_tick: Optional callback invoked after each tick(tick_number, engine).
    """

    def __init__(self, config: SimConfig, seed: Optional[int] = None):
        """
        Create a simulation engine.

        Args:
            config: Simulation configuration.
            seed: Random seed override. None = use config.grid.seed.

        Raises:
            ValueError: If the configured animals do not fit on the grid.
        """
        self.config = config

        if seed is not None:
            self.config.grid.seed = seed

        self.grid = Grid(
            fish_count=config.population.fish,
            shark_count=config.population.sharks,
            rows=config.grid.rows,
            columns=config.grid.columns,
            seed=config.grid.seed,
        )

        self.tick_count: int = 0
        self.tick_stats = TickStats()
        self.terminated: bool = False
        self.termination_reason: Optional[str] = None
        self._tick_stats_history: list[TickStats] = []

        self.on_tick: Optional[Callable[[int, "SimulationEngine"], None]] = None

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Place the initial fish and sharks at random positions."""
        self.grid.generate_random_animals()
        self.tick_count = 0
        self.terminated = False
        self.termination_reason = None
        self._tick_stats_history = []
        fish, sharks = self.grid.count_animals()
        logger.info(
            "Initialized %dx%d ocean: %d fish, %d sharks (seed=%s)",
            self.grid.rows, self.grid.columns, fish, sharks, self.config.grid.seed,
        )

    # ------------------------------------------------------------------
    # Core tick
    # ------------------------------------------------------------------

    def tick(self) -> TickStats:
        """
        Execute one simulation tick.

        Returns:
            TickStats for this tick.

        Raises:
            SimulationError: If fish or sharks have died out. The engine is
                marked as terminated before the error propagates.
        """
        try:
            stats = self.grid.step()
        except SimulationError as err:
            self.terminated = True
            self.termination_reason = err.message
            logger.info("Simulation ended after %d ticks: %s", self.tick_count, err)
            raise

        self.tick_count += 1
        self.tick_stats = stats
        self._tick_stats_history.append(stats)

        if self.on_tick is not None:
            self.on_tick(self.tick_count, self)

        return stats

    # ------------------------------------------------------------------
    # Multi-tick run
    # ------------------------------------------------------------------

    def run(self, max_ticks: Optional[int] = None) -> RunResult:
        """
        Run the simulation until a species dies out or `max_ticks` is reached.

        Counts are recorded before every attempted tick, so the histories
        hold one entry per tick started (including the one that ended the run).

        Args:
            max_ticks: Maximum number of ticks. None = use config.run.max_ticks;
                if that is also None, run until termination.

        Returns:
            RunResult with population histories and termination details.
        """
        if max_ticks is None:
            max_ticks = self.config.run.max_ticks

        result = RunResult(config=self.config, seed=self.config.grid.seed)

        ticks_run = 0
        while max_ticks is None or ticks_run < max_ticks:
            fish, sharks = self.grid.count_animals()
            result.fish_history.append(fish)
            result.shark_history.append(sharks)

            try:
                self.tick()
            except SimulationError as err:
                result.terminated = True
                result.termination_tick = self.tick_count
                result.termination_reason = err.message
                break

            ticks_run += 1

        result.total_ticks = ticks_run
        result.final_fish, result.final_sharks = self.grid.count_animals()
        result.tick_stats_history = list(self._tick_stats_history)

        return result

    # ------------------------------------------------------------------
    # Accumulated statistics helpers
    # ------------------------------------------------------------------

    def get_accumulated_stats(self) -> dict[str, int]:
        """
        Sum all tick stats since initialization.

        Returns:
            Dict of stat_name -> total_value. Every counter is present,
            zero when no tick has completed.
        """
        totals = {f.name: 0 for f in fields(TickStats)}
        for stats in self._tick_stats_history:
            for name in totals:
                totals[name] += getattr(stats, name)
        return totals

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def current_tick(self) -> int:
        """Current tick number."""
        return self.tick_count

    @property
    def fish_count(self) -> int:
        return self.grid.count_animals()[0]

    @property
    def shark_count(self) -> int:
        return self.grid.count_animals()[1]

    @property
    def is_terminated(self) -> bool:
        """Whether a step has failed because a species died out."""
        return self.terminated

    def __repr__(self) -> str:
        fish, sharks = self.grid.count_animals()
        return (
            f"SimulationEngine(tick={self.current_tick}, "
            f"fish={fish}, sharks={sharks}, "
            f"terminated={self.terminated})"
        )
