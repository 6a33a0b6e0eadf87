"""Search algorithms built on the placement model."""

from .evolution import (
    HIGHEST_FITNESS,
    LOWEST_FITNESS,
    Evolution,
    EvolutionResult,
    Genome,
    StepResult,
    as_cube,
    build_genome,
    fitness_of,
)

__all__ = [
    "Evolution",
    "EvolutionResult",
    "StepResult",
    "Genome",
    "HIGHEST_FITNESS",
    "LOWEST_FITNESS",
    "as_cube",
    "build_genome",
    "fitness_of",
]
