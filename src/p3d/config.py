"""
Central configuration for the p3d solver.

Classes:
    Verbosity:     console output level, passed explicitly to reporters
    FitnessMode:   which cube measure the evolution search maximises
    SolverConfig:  all tuneable parameters for one run

Configuration files are YAML mappings whose keys match SolverConfig
fields; command line flags override file values.

Example file:
    generations: 500
    population: 200
    seed: 7
    fitness: coverage
    verbosity: normal
"""

from __future__ import annotations

from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ConfigError(Exception):
    """Configuration file missing, unreadable or invalid."""


# ─────────────────────────────────────────────────────────────────────────────
# Enumerations
# ─────────────────────────────────────────────────────────────────────────────

class Verbosity(IntEnum):
    """Console output level; each level includes the ones below it."""

    QUIET = 0
    SPARSE = 1
    NORMAL = 2
    VERBOSE = 3

    @classmethod
    def from_count(cls, count: int) -> "Verbosity":
        """Map a repeated -v flag count onto a level, saturating at VERBOSE."""
        return cls(max(cls.QUIET, min(count, cls.VERBOSE)))


class FitnessMode(str, Enum):
    """
    Cube measure used as fitness.

    CONFLICTS counts cells claimed by more than one piece; COVERAGE counts
    every occupied cell.
    """

    CONFLICTS = "conflicts"
    COVERAGE = "coverage"


# ─────────────────────────────────────────────────────────────────────────────
# Solver configuration
# ─────────────────────────────────────────────────────────────────────────────

class SolverConfig(BaseModel):
    """All tuneable parameters for a single solver run."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    # Evolution
    generations: int = Field(default=1000, ge=1)
    population: int = Field(default=1000, ge=2)
    num_individuals_per_parents: int = Field(default=3, ge=2)
    selection_ratio: float = Field(default=0.7, gt=0.0, le=1.0)
    mutation_rate: float = Field(default=0.05, ge=0.0, le=1.0)
    reinsertion_ratio: float = Field(default=0.7, ge=0.0, le=1.0)
    seed: int | None = None
    fitness: FitnessMode = FitnessMode.CONFLICTS

    # Output
    verbosity: Verbosity = Verbosity.QUIET
    results_dir: Path = Path("results")
    save_results: bool = True
    notify: bool = False

    @field_validator("verbosity", mode="before")
    @classmethod
    def _parse_verbosity(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return Verbosity[value.strip().upper()]
            except KeyError:
                raise ValueError(
                    f"Unknown verbosity '{value}'. "
                    f"Available: {[v.name.lower() for v in Verbosity]}"
                ) from None
        return value

    def to_dict(self) -> dict[str, Any]:
        d = self.model_dump()
        d["fitness"] = self.fitness.value
        d["verbosity"] = self.verbosity.name.lower()
        d["results_dir"] = str(self.results_dir)
        return d


def load_config(path: Path | str | None = None, **overrides: Any) -> SolverConfig:
    """
    Build a SolverConfig from an optional YAML file plus overrides.

    Args:
        path: YAML file to read; None uses defaults only.
        **overrides: Field values that take precedence over the file.
            Overrides whose value is None are ignored.

    Returns:
        Validated SolverConfig.

    Raises:
        ConfigError: file missing, not valid YAML, not a mapping, or
            containing invalid values.
    """
    data: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        try:
            with path.open() as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        data.update(loaded)

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return SolverConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
