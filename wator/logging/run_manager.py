"""
Output directory of a recorded Wa-Tor run.

Every `--mode record` run gets its own folder under the configured output
directory:

    {output_dir}/{run_name}/
        config.json      configuration the run was started with
        metrics.csv      one KPI row per recorded tick (tick 0 included)
        simulation.m     MATLAB script plotting fish and sharks per tick
        summary.json     end-of-run totals and population statistics
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from wator.core.config import SimConfig, save_config
from wator.logging.matlab_export import MATLAB_FILENAME, write_matlab_script


CONFIG_FILENAME = "config.json"
METRICS_FILENAME = "metrics.csv"
SUMMARY_FILENAME = "summary.json"


class RunManager:
    """
    Owns the folder of one recorded run.

    The configuration is stored as soon as the manager is created, so a run
    that crashes halfway still documents what it was started with.

    Attributes:
        run_dir: Folder receiving this run's files.
    """

    def __init__(
        self,
        config: SimConfig,
        base_dir: Optional[str | Path] = None,
        run_name: Optional[str] = None,
    ):
        """
        Args:
            config: Configuration of the run.
            base_dir: Parent folder. None = config.output.output_dir.
            run_name: Folder name. None = start time plus seed,
                e.g. '20240101_120000_seed42'.
        """
        parent = Path(base_dir if base_dir is not None else config.output.output_dir)
        if run_name is None:
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            run_name = f"{stamp}_seed{config.grid.seed}"

        self.run_dir = parent / run_name
        self.run_dir.mkdir(parents=True, exist_ok=True)
        save_config(config, self.config_path)

    @property
    def config_path(self) -> Path:
        return self.run_dir / CONFIG_FILENAME

    @property
    def metrics_path(self) -> Path:
        return self.run_dir / METRICS_FILENAME

    @property
    def matlab_path(self) -> Path:
        return self.run_dir / MATLAB_FILENAME

    @property
    def summary_path(self) -> Path:
        return self.run_dir / SUMMARY_FILENAME

    def write_metrics(self, frame: pd.DataFrame) -> Path:
        """Write the per-tick KPI table (see `MetricsCollector.to_dataframe`)."""
        frame.to_csv(self.metrics_path, index=False)
        return self.metrics_path

    def export_matlab(self, fish: Sequence[int], sharks: Sequence[int]) -> Path:
        """Write the fish and shark histories as a MATLAB plot script."""
        return write_matlab_script(self.matlab_path, fish, sharks)

    def finalize(self, summary: dict) -> Path:
        """Write the end-of-run summary as JSON."""
        with open(self.summary_path, "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2)
        return self.summary_path

    def __repr__(self) -> str:
        return f"RunManager(run_dir='{self.run_dir}')"
