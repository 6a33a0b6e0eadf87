"""
Tests for the genetic evolution search.

Covers:
- Genome construction: one valid piece per identity, in identity order
- Fitness: conflict count (default) or occupied count of the phenotype cube
- Operators: mutation, crossover, roulette selection, elitist reinsertion
- Determinism and stop conditions of the simulation
"""

import random

import pytest

from p3d.algorithms.evolution import (
    HIGHEST_FITNESS,
    STOP_FITNESS_LIMIT,
    STOP_GENERATION_LIMIT,
    Evolution,
    as_cube,
    average_fitness,
    build_genome,
    elitist_reinsert,
    fitness_of,
    mutate_genome,
    mutate_piece,
    random_piece,
    roulette_wheel_select,
    single_point_crossover,
)
from p3d.config import FitnessMode
from p3d.core.piece import Piece, encode_combination
from p3d.core.shapes import NUM_PIECES


@pytest.fixture
def rng():
    return random.Random(3)


@pytest.fixture
def genome(rng):
    return build_genome(rng)


# ---------------------------------------------------------------------------
# 1. Genomes and fitness
# ---------------------------------------------------------------------------

class TestGenome:
    def test_one_valid_piece_per_identity(self, genome):
        assert [p.identity for p in genome] == list(range(NUM_PIECES))
        assert all(p.is_valid_configuration() for p in genome)

    def test_random_piece_is_valid(self, rng):
        for identity in (0, 8, 16, 22):
            assert random_piece(identity, rng).is_valid_configuration()

    def test_seeded_builds_are_identical(self):
        first = build_genome(random.Random(5))
        second = build_genome(random.Random(5))
        assert [p.encode_combination() for p in first] == [p.encode_combination() for p in second]


class TestFitness:
    def test_default_fitness_is_conflict_count(self, genome):
        assert fitness_of(genome) == as_cube(genome).conflict_count()

    def test_coverage_fitness_is_occupied_count(self, genome):
        assert fitness_of(genome, FitnessMode.COVERAGE) == as_cube(genome).occupied_count()

    def test_stacked_pieces(self):
        # Three free pieces on top of each other at the zero combination
        genome = [Piece(22), Piece(23), Piece(24)]
        assert fitness_of(genome) == 5
        assert fitness_of(genome, FitnessMode.COVERAGE) == 5

    def test_disjoint_pieces(self):
        genome = [Piece(22), Piece(23)]
        genome[1].assign_combination(encode_combination(0, 0, 2, 0))
        assert fitness_of(genome) == 0
        assert fitness_of(genome, FitnessMode.COVERAGE) == 10

    @pytest.mark.parametrize(
        "values, expected",
        [([1, 2], 2), ([1, 1, 2], 1), ([4], 4), ([], 0)],
    )
    def test_average_rounds_half_up(self, values, expected):
        assert average_fitness(values) == expected


# ---------------------------------------------------------------------------
# 2. Operators
# ---------------------------------------------------------------------------

class TestOperators:
    def test_mutate_piece_moves_to_next_valid(self):
        piece = Piece(0)
        mutated = mutate_piece(piece)
        assert mutated is not piece
        assert mutated.encode_combination() == encode_combination(0, 0, 0, 1)
        assert piece.encode_combination() == 0

    def test_mutate_genome_rate_zero_keeps_genes(self, genome, rng):
        assert mutate_genome(genome, 0.0, rng) == genome
        assert [p.encode_combination() for p in mutate_genome(genome, 0.0, rng)] == [
            p.encode_combination() for p in genome
        ]

    def test_mutate_genome_rate_one_changes_genes(self, genome, rng):
        mutated = mutate_genome(genome, 1.0, rng)
        assert all(m.is_valid_configuration() for m in mutated)
        assert [m.encode_combination() for m in mutated] != [p.encode_combination() for p in genome]

    def test_crossover_keeps_identity_order(self, rng):
        parents = [build_genome(random.Random(seed)) for seed in (1, 2, 3)]
        children = single_point_crossover(parents, rng)
        assert len(children) == 3
        for child in children:
            assert [p.identity for p in child] == list(range(NUM_PIECES))

    def test_crossover_mixes_parents(self):
        parents = [[Piece(i) for i in range(NUM_PIECES)] for _ in range(2)]
        for p in parents[1]:
            p.assign_combination(None)
            p.advance()
        children = single_point_crossover(parents, random.Random(0))
        rotations = [p.rotation for p in children[0]]
        assert rotations[0] == 0
        assert rotations[-1] == 1

    def test_roulette_groups(self, rng):
        population = [[Piece(0)] for _ in range(10)]
        groups = roulette_wheel_select(population, [0] * 10, 0.7, 3, rng)
        assert len(groups) == 2
        assert all(len(group) == 3 for group in groups)

    def test_roulette_never_picks_zero_weight(self, rng):
        population = [[Piece(0)], [Piece(1)], [Piece(2)]]
        groups = roulette_wheel_select(population, [0, 5, 0], 1.0, 3, rng)
        assert all(genome is population[1] for group in groups for genome in group)

    def test_elitist_reinsert(self):
        old = [["o0"], ["o1"], ["o2"], ["o3"]]
        new = [["n0"], ["n1"], ["n2"]]
        population, fitnesses = elitist_reinsert(old, [1, 9, 3, 7], new, [2, 8, 5], 0.5, 4)
        assert population == [["n1"], ["n2"], ["o1"], ["o3"]]
        assert fitnesses == [8, 5, 9, 7]


# ---------------------------------------------------------------------------
# 3. Simulation
# ---------------------------------------------------------------------------

class TestEvolution:
    def test_runs_to_generation_limit(self, small_config):
        result = Evolution(small_config).run()
        assert result.stop_reason == STOP_GENERATION_LIMIT
        assert result.last_step.generation == small_config.generations
        assert len(result.best_genome) == NUM_PIECES
        assert result.best_cube().conflict_count() == result.best_fitness

    def test_population_size_is_kept(self, small_config):
        evolution = Evolution(small_config)
        evolution.initialize()
        evolution.step()
        assert len(evolution.population) == small_config.population
        assert len(evolution.fitnesses) == small_config.population

    def test_best_fitness_never_decreases(self, small_config):
        steps = []
        Evolution(small_config).run(on_step=steps.append)
        best = [s.best_fitness for s in steps]
        assert best == sorted(best)

    def test_seeded_runs_are_deterministic(self, small_config):
        first = Evolution(small_config).run()
        second = Evolution(small_config).run()
        assert first.best_fitness == second.best_fitness
        assert [p.encode_combination() for p in first.best_genome] == [
            p.encode_combination() for p in second.best_genome
        ]

    def test_fitness_limit_stops(self, small_config):
        evolution = Evolution(small_config)
        evolution.initialize()
        evolution._best_fitness = HIGHEST_FITNESS
        assert evolution.stop_reason() == STOP_FITNESS_LIMIT
