"""Shared fixtures for the p3d test suite."""

import os
import sys

import pytest

# Ensure the src/ layout resolves without an editable install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from p3d.config import SolverConfig  # noqa: E402
from p3d.core.cube import Cube  # noqa: E402
from p3d.core.piece import Piece  # noqa: E402

BASE_FOOTPRINT = ((0, 0, 0), (1, 0, 0), (2, 0, 0), (2, 1, 0), (3, 1, 0))


@pytest.fixture
def empty_cube():
    """Fresh empty cube."""
    return Cube.create_empty()


@pytest.fixture
def corner_piece():
    """Piece 'a', anchored at (0, 0, 0)."""
    return Piece(0)


@pytest.fixture
def free_piece():
    """Piece 'w', no anchor."""
    return Piece(22)


@pytest.fixture
def small_config(tmp_path):
    """Tiny, seeded evolution config that writes into a temp directory."""
    return SolverConfig(
        generations=3,
        population=6,
        seed=11,
        results_dir=tmp_path / "results",
    )
