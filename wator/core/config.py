"""
Configuration system for the Wa-Tor simulator.

Provides a hierarchical dataclass-based config with JSON serialization,
validation, and defaults matching the classic 40x40 ocean with 200 fish
and 100 sharks.
"""

from __future__ import annotations

import json
import warnings
from copy import deepcopy
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Optional


# ---------------------------------------------------------------------------
# Sub-config dataclasses (grouped by domain)
# ---------------------------------------------------------------------------

@dataclass
class GridConfig:
    """Ocean dimensions and random seed."""
    rows: int = 40
    columns: int = 40
    seed: Optional[int] = 42  # None = fresh entropy on every run

    def validate(self) -> list[str]:
        errors = []
        if self.rows < 1:
            errors.append(f"grid.rows must be >= 1, got {self.rows}")
        if self.columns < 1:
            errors.append(f"grid.columns must be >= 1, got {self.columns}")
        if self.rows > 10_000:
            errors.append(f"grid.rows must be <= 10000, got {self.rows}")
        if self.columns > 10_000:
            errors.append(f"grid.columns must be <= 10000, got {self.columns}")
        if self.seed is not None and self.seed < 0:
            errors.append(f"grid.seed must be >= 0 or null, got {self.seed}")
        return errors


@dataclass
class PopulationConfig:
    """Initial population settings."""
    fish: int = 200
    sharks: int = 100

    def validate(self) -> list[str]:
        errors = []
        if self.fish < 0:
            errors.append(f"population.fish must be >= 0, got {self.fish}")
        if self.sharks < 0:
            errors.append(f"population.sharks must be >= 0, got {self.sharks}")
        return errors


@dataclass
class RunConfig:
    """Tick loop settings."""
    max_ticks: Optional[int] = 200       # None = run until fish or sharks die out
    display_every_n_ticks: int = 1
    delay_ms: int = 50                   # pause between frames in animate mode

    def validate(self) -> list[str]:
        errors = []
        if self.max_ticks is not None and self.max_ticks < 1:
            errors.append(f"run.max_ticks must be >= 1 or null, got {self.max_ticks}")
        if self.display_every_n_ticks < 1:
            errors.append(f"run.display_every_n_ticks must be >= 1, got {self.display_every_n_ticks}")
        if self.delay_ms < 0:
            errors.append(f"run.delay_ms must be >= 0, got {self.delay_ms}")
        return errors


@dataclass
class OutputConfig:
    """Run output settings."""
    output_dir: str = "runs"
    write_csv: bool = True
    write_matlab: bool = True

    def validate(self) -> list[str]:
        errors = []
        if not self.output_dir:
            errors.append("output.output_dir must not be empty")
        return errors


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

@dataclass
class SimConfig:
    """
    Top-level simulation configuration.

    Nested dataclasses group related settings.
    Load from JSON with `load_config()`, validate with `validate()`.
    """
    grid: GridConfig = field(default_factory=GridConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    run: RunConfig = field(default_factory=RunConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def validate(self) -> list[str]:
        """Validate all config sections. Returns list of error messages (empty = valid)."""
        errors = []
        for f in fields(self):
            sub = getattr(self, f.name)
            if hasattr(sub, "validate"):
                errors.extend(sub.validate())

        cells = self.grid.rows * self.grid.columns
        animals = self.population.fish + self.population.sharks
        if animals > cells:
            errors.append(
                f"population.fish + population.sharks ({animals}) exceeds "
                f"grid cells ({self.grid.rows}x{self.grid.columns} = {cells})"
            )
        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dict for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimConfig:
        """Create SimConfig from nested dict, merging with defaults."""
        config = cls()
        _merge_into_dataclass(config, data)
        return config

    def copy(self) -> SimConfig:
        """Deep copy of this config."""
        return deepcopy(self)


# ---------------------------------------------------------------------------
# JSON I/O helpers
# ---------------------------------------------------------------------------

def _merge_into_dataclass(target: Any, source: dict[str, Any]) -> None:
    """
    Recursively merge a dict into a dataclass instance.
    Unknown keys emit a warning but don't raise.
    """
    if not isinstance(source, dict):
        return

    known_fields = {f.name for f in fields(target)}
    for key, value in source.items():
        if key not in known_fields:
            warnings.warn(
                f"Unknown config key '{key}' in section {type(target).__name__}, ignored.",
                UserWarning,
                stacklevel=3,
            )
            continue

        current = getattr(target, key)

        if hasattr(current, "__dataclass_fields__") and isinstance(value, dict):
            _merge_into_dataclass(current, value)
        else:
            setattr(target, key, value)


def load_config(path: str | Path, validate: bool = True) -> SimConfig:
    """
    Load config from a JSON file. Missing fields use defaults.

    Args:
        path: Path to JSON config file.
        validate: Reject invalid values. Pass False when overrides are
            applied afterwards and the caller validates the result.

    Returns:
        SimConfig instance (validated unless `validate` is False).

    Raises:
        FileNotFoundError: If path doesn't exist.
        json.JSONDecodeError: If JSON is malformed.
        ValueError: If `validate` is set and config values are invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = SimConfig.from_dict(data)

    errors = config.validate() if validate else []
    if errors:
        msg = "Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(msg)

    return config


def save_config(config: SimConfig, path: str | Path) -> None:
    """Save config to JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)


def get_default_config() -> SimConfig:
    """Return a fresh default config (all defaults, validated)."""
    config = SimConfig()
    errors = config.validate()
    assert not errors, f"Default config is invalid: {errors}"
    return config


def apply_param_override(config: SimConfig, dotted_key: str, value: Any) -> None:
    """
    Apply a single parameter override using dot notation.

    Example:
        apply_param_override(config, "grid.rows", 25)
        apply_param_override(config, "population.sharks", 5)

    Args:
        config: SimConfig to modify in-place.
        dotted_key: Dot-separated path like "grid.rows" or "run.max_ticks".
        value: New value to set.

    Raises:
        KeyError: If the path doesn't exist.
    """
    parts = dotted_key.split(".")
    obj = config
    for part in parts[:-1]:
        if not hasattr(obj, part):
            raise KeyError(f"Config path '{dotted_key}' invalid: '{part}' not found in {type(obj).__name__}")
        obj = getattr(obj, part)

    final_key = parts[-1]
    if not hasattr(obj, final_key):
        raise KeyError(f"Config path '{dotted_key}' invalid: '{final_key}' not found in {type(obj).__name__}")

    setattr(obj, final_key, value)
