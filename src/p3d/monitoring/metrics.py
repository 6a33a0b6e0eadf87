"""Metrics tracking and export for evolution runs.

Provides dataclasses for tracking per-generation and per-run metrics and
utilities for exporting results to JSON and CSV formats.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

GENERATION_FIELDS = [
    "generation", "average_fitness", "best_fitness", "duration_seconds",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GenerationMetrics:
    """Metrics for a single generation.

    Attributes:
        generation: Generation number, starting at 1.
        average_fitness: Rounded mean fitness of the evaluated population.
        best_fitness: Fitness of the best genome seen so far.
        duration_seconds: Wall time spent on this generation.
    """

    generation: int
    average_fitness: int
    best_fitness: int
    duration_seconds: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Example:
            >>> gm = GenerationMetrics(3, 12, 20, 0.25)
            >>> gm.to_dict()["best_fitness"]
            20
        """
        return asdict(self)


@dataclass
class EvolutionMetrics:
    """Aggregate metrics for an entire evolution run.

    Attributes:
        run_id: Unique identifier for the run.
        fitness_mode: Name of the fitness measure that was maximised.
        population: Population size.
        max_generations: Generation limit.
        generations_run: Generations actually completed.
        best_fitness: Best fitness reached.
        best_generation: Generation in which best_fitness was first reached.
        best_combinations: Combination index per piece of the best genome.
        stop_reason: Why the run ended (None while running).
        runtime_seconds: Total runtime in seconds.
        started_at: Run start timestamp.
        completed_at: Run completion timestamp (None if running).
        generation_metrics: Per-generation metrics.
    """

    run_id: str
    fitness_mode: str
    population: int
    max_generations: int
    generations_run: int = 0
    best_fitness: int = 0
    best_generation: int = 0
    best_combinations: list[int] = field(default_factory=list)
    stop_reason: str | None = None
    runtime_seconds: float = 0.0
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: datetime | None = None
    generation_metrics: list[GenerationMetrics] = field(default_factory=list)

    def add_generation(self, generation: GenerationMetrics) -> None:
        """Add a generation's metrics to the run.

        Example:
            >>> em = EvolutionMetrics("run_001", "conflicts", 10, 100)
            >>> em.add_generation(GenerationMetrics(1, 4, 9, 0.1))
            >>> em.generations_run, em.best_fitness, em.best_generation
            (1, 9, 1)
        """
        self.generation_metrics.append(generation)
        self.generations_run = generation.generation
        if generation.best_fitness > self.best_fitness or not self.best_generation:
            self.best_fitness = generation.best_fitness
            self.best_generation = generation.generation

    def mark_complete(self, stop_reason: str) -> None:
        """Mark run as complete and calculate final runtime."""
        self.stop_reason = stop_reason
        self.completed_at = _utcnow()
        self.runtime_seconds = (self.completed_at - self.started_at).total_seconds()

    @property
    def average_fitness_trend(self) -> list[int]:
        return [g.average_fitness for g in self.generation_metrics]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO timestamps."""
        d = asdict(self)
        d["started_at"] = self.started_at.isoformat()
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        d["generation_metrics"] = [g.to_dict() for g in self.generation_metrics]
        return d

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to summary dictionary without per-generation details."""
        d = self.to_dict()
        del d["generation_metrics"]
        return d


def export_to_json(metrics: EvolutionMetrics, output_path: Path | str, include_generations: bool = True) -> None:
    """Export run metrics to a JSON file.

    Args:
        metrics: EvolutionMetrics instance to export.
        output_path: Path to output JSON file.
        include_generations: If True, include per-generation metrics. If False, summary only.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = metrics.to_dict() if include_generations else metrics.to_summary_dict()

    with output_path.open("w") as f:
        json.dump(data, f, indent=2)


def export_to_csv(metrics: EvolutionMetrics, output_path: Path | str) -> None:
    """Export per-generation metrics to a CSV file (headers only when empty)."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=GENERATION_FIELDS)
        writer.writeheader()
        for generation in metrics.generation_metrics:
            writer.writerow(generation.to_dict())


def print_summary(metrics: EvolutionMetrics) -> str:
    """Generate human-readable summary of run metrics.

    Example:
        >>> em = EvolutionMetrics("run_001", "conflicts", 10, 100)
        >>> em.mark_complete("Generation limit reached")
        >>> "Run: run_001" in print_summary(em)
        True
    """
    lines = [
        "=" * 60,
        f"Run: {metrics.run_id}",
        f"Fitness: {metrics.fitness_mode}",
        "=" * 60,
        f"Population: {metrics.population}",
        f"Generations: {metrics.generations_run}/{metrics.max_generations}",
        "",
        f"Best fitness: {metrics.best_fitness} (generation {metrics.best_generation})",
        f"Stop reason: {metrics.stop_reason or 'In Progress'}",
        "",
        f"Runtime: {metrics.runtime_seconds:.1f} seconds ({metrics.runtime_seconds / 60:.1f} minutes)",
        f"Started:   {metrics.started_at.isoformat()}",
        f"Completed: {metrics.completed_at.isoformat() if metrics.completed_at else 'In Progress'}",
        "=" * 60,
    ]
    return "\n".join(lines)
