"""
Genetic evolution search over piece placements.

Genotype:  a Genome, one Piece per identity (position i holds identity i).
Phenotype: the Cube obtained by depositing every piece of the genome.
Fitness:   a cell count of that cube, see FitnessMode.

Each generation:
    1. Roulette-wheel selection picks parent groups by fitness
    2. Single-point crossover breeds one child per parent in a group
    3. Mutation moves genes to their next valid combination
    4. Elitist reinsertion builds the next population from the best
       offspring and the best of the current population

The run stops when the best fitness reaches HIGHEST_FITNESS or the
generation limit is hit.  Only pieces in a valid configuration ever enter
a genome, so depositing them can not leave the cube.
"""

from __future__ import annotations

import math
import random
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from p3d.config import FitnessMode, SolverConfig
from p3d.core.cube import Cube
from p3d.core.enumerator import first_valid, next_valid_wrapping
from p3d.core.piece import Piece, encode_combination
from p3d.core.shapes import CUBE_SIZE, NUM_PIECES, NUM_ROTATIONS

Genome = list[Piece]

HIGHEST_FITNESS = CUBE_SIZE ** 3
LOWEST_FITNESS = 0

STOP_FITNESS_LIMIT = "Fitness limit reached"
STOP_GENERATION_LIMIT = "Generation limit reached"


# ─────────────────────────────────────────────────────────────────────────────
# Phenotype and fitness
# ─────────────────────────────────────────────────────────────────────────────

def as_cube(genome: Sequence[Piece]) -> Cube:
    """Deposit every piece of *genome*, in order, into a fresh cube."""
    cube = Cube.create_empty()
    for piece in genome:
        piece.deposit_into(cube)
    return cube


def fitness_of(genome: Sequence[Piece], mode: FitnessMode = FitnessMode.CONFLICTS) -> int:
    cube = as_cube(genome)
    if mode == FitnessMode.COVERAGE:
        return cube.occupied_count()
    return cube.conflict_count()


def average_fitness(values: Sequence[int]) -> int:
    """Mean fitness rounded half up."""
    if not values:
        return LOWEST_FITNESS
    return int(math.floor(sum(values) / len(values) + 0.5))


# ─────────────────────────────────────────────────────────────────────────────
# Genome construction and operators
# ─────────────────────────────────────────────────────────────────────────────

def random_piece(identity: int, rng: random.Random) -> Piece:
    """A piece of *identity* at the first valid combination after a random start."""
    piece = Piece(identity)
    piece.assign_combination(encode_combination(
        rng.randrange(CUBE_SIZE),
        rng.randrange(CUBE_SIZE),
        rng.randrange(CUBE_SIZE),
        rng.randrange(NUM_ROTATIONS),
    ))
    if not first_valid(piece):
        piece.assign_combination(None)
        first_valid(piece)
    return piece


def build_genome(rng: random.Random) -> Genome:
    return [random_piece(identity, rng) for identity in range(NUM_PIECES)]


def mutate_piece(piece: Piece) -> Piece:
    """Copy of *piece* moved to its next valid combination."""
    mutated = piece.copy()
    next_valid_wrapping(mutated)
    return mutated


def mutate_genome(genome: Genome, rate: float, rng: random.Random) -> Genome:
    return [mutate_piece(p) if rng.random() < rate else p for p in genome]


def single_point_crossover(parents: Sequence[Genome], rng: random.Random) -> list[Genome]:
    """
    Breed one child per parent.

    Child k takes the genes before a random cut point from parent k and
    the rest from parent k+1 (wrapping around).
    """
    cut = rng.randrange(1, NUM_PIECES)
    children = []
    for k, head in enumerate(parents):
        tail = parents[(k + 1) % len(parents)]
        children.append([p.copy() for p in head[:cut]] + [p.copy() for p in tail[cut:]])
    return children


def roulette_wheel_select(
    population: Sequence[Genome],
    fitnesses: Sequence[int],
    selection_ratio: float,
    individuals_per_parents: int,
    rng: random.Random,
) -> list[list[Genome]]:
    """
    Pick parent groups with probability proportional to fitness.

    An all-zero fitness population is sampled uniformly.
    """
    num_groups = max(1, int(len(population) * selection_ratio) // individuals_per_parents)
    weights = list(fitnesses) if any(fitnesses) else None
    return [
        rng.choices(population, weights=weights, k=individuals_per_parents)
        for _ in range(num_groups)
    ]


def elitist_reinsert(
    population: Sequence[Genome],
    fitnesses: Sequence[int],
    offspring: Sequence[Genome],
    offspring_fitnesses: Sequence[int],
    reinsertion_ratio: float,
    size: int,
) -> tuple[list[Genome], list[int]]:
    """
    Keep the best offspring up to reinsertion_ratio of *size*, then fill up
    with the best of the current population.
    """
    num_offspring = min(len(offspring), int(round(size * reinsertion_ratio)))
    ranked_offspring = sorted(
        range(len(offspring)), key=lambda i: offspring_fitnesses[i], reverse=True,
    )[:num_offspring]
    ranked_parents = sorted(
        range(len(population)), key=lambda i: fitnesses[i], reverse=True,
    )[: size - num_offspring]

    new_population = [offspring[i] for i in ranked_offspring] + [population[i] for i in ranked_parents]
    new_fitnesses = [offspring_fitnesses[i] for i in ranked_offspring] + [fitnesses[i] for i in ranked_parents]
    return new_population, new_fitnesses


# ─────────────────────────────────────────────────────────────────────────────
# Simulation
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class StepResult:
    """Outcome of one generation."""

    generation: int
    average_fitness: int
    best_fitness: int
    best_generation: int
    best_genome: Genome
    duration_seconds: float


@dataclass
class EvolutionResult:
    """Outcome of a full run."""

    stop_reason: str
    last_step: StepResult
    processing_seconds: float

    @property
    def best_genome(self) -> Genome:
        return self.last_step.best_genome

    @property
    def best_fitness(self) -> int:
        return self.last_step.best_fitness

    def best_cube(self) -> Cube:
        return as_cube(self.best_genome)


class Evolution:
    """
    Generational genetic algorithm over piece placements.

    Usage:
        evolution = Evolution(SolverConfig(population=50, generations=20, seed=1))
        result = evolution.run()
        print(result.best_cube())
    """

    def __init__(self, config: SolverConfig, rng: random.Random | None = None):
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self.population: list[Genome] = []
        self.fitnesses: list[int] = []
        self.generation = 0
        self._best_genome: Genome = []
        self._best_fitness = LOWEST_FITNESS - 1
        self._best_generation = 0

    def evaluate(self, genome: Genome) -> int:
        return fitness_of(genome, self.config.fitness)

    def initialize(self) -> None:
        self.population = [build_genome(self.rng) for _ in range(self.config.population)]
        self.fitnesses = [self.evaluate(g) for g in self.population]
        self.generation = 0
        self._best_fitness = LOWEST_FITNESS - 1
        self._track_best()

    def step(self) -> StepResult:
        """Breed, mutate, evaluate and reinsert one generation."""
        if not self.population:
            self.initialize()

        t_start = time.perf_counter()
        groups = roulette_wheel_select(
            self.population,
            self.fitnesses,
            self.config.selection_ratio,
            self.config.num_individuals_per_parents,
            self.rng,
        )
        offspring: list[Genome] = []
        for parents in groups:
            for child in single_point_crossover(parents, self.rng):
                offspring.append(mutate_genome(child, self.config.mutation_rate, self.rng))
        offspring_fitnesses = [self.evaluate(g) for g in offspring]

        self.population, self.fitnesses = elitist_reinsert(
            self.population,
            self.fitnesses,
            offspring,
            offspring_fitnesses,
            self.config.reinsertion_ratio,
            self.config.population,
        )
        self.generation += 1
        self._track_best()

        return StepResult(
            generation=self.generation,
            average_fitness=average_fitness(self.fitnesses),
            best_fitness=self._best_fitness,
            best_generation=self._best_generation,
            best_genome=[p.copy() for p in self._best_genome],
            duration_seconds=time.perf_counter() - t_start,
        )

    def stop_reason(self) -> str | None:
        if self._best_fitness >= HIGHEST_FITNESS:
            return STOP_FITNESS_LIMIT
        if self.generation >= self.config.generations:
            return STOP_GENERATION_LIMIT
        return None

    def run(self, on_step: Callable[[StepResult], None] | None = None) -> EvolutionResult:
        """Step until a stop condition holds; *on_step* sees every generation."""
        t_start = time.perf_counter()
        self.initialize()
        while True:
            result = self.step()
            if on_step is not None:
                on_step(result)
            reason = self.stop_reason()
            if reason is not None:
                return EvolutionResult(
                    stop_reason=reason,
                    last_step=result,
                    processing_seconds=time.perf_counter() - t_start,
                )

    def _track_best(self) -> None:
        best_index = max(range(len(self.fitnesses)), key=lambda i: self.fitnesses[i])
        if self.fitnesses[best_index] > self._best_fitness:
            self._best_fitness = self.fitnesses[best_index]
            self._best_genome = [p.copy() for p in self.population[best_index]]
            self._best_generation = self.generation
