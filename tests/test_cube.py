"""
Tests for the occupancy grid.

Covers:
- Empty cube state and counts
- Deposit semantics: empty cells take the occupant, claimed cells conflict
- Out-of-range deposits raise instead of wrapping around
- Text rendering and the cell-to-character mapping
"""

import numpy as np
import pytest

from p3d.core.cube import CONFLICT, EMPTY, Cube, index_to_char
from conftest import BASE_FOOTPRINT


def render_char(cube: Cube, x: int, y: int, z: int) -> str:
    """Character shown for cell (x, y, z) in the rendered text."""
    lines = cube.render().split("\n")
    return lines[1 + 6 * x + y][z]


# ---------------------------------------------------------------------------
# 1. Empty cube
# ---------------------------------------------------------------------------

class TestEmptyCube:
    def test_all_cells_empty(self, empty_cube):
        assert empty_cube.values.shape == (5, 5, 5)
        assert np.all(empty_cube.values == EMPTY)

    def test_counts_are_zero(self, empty_cube):
        assert empty_cube.conflict_count() == 0
        assert empty_cube.occupied_count() == 0
        assert empty_cube.is_empty()

    def test_values_is_a_copy(self, empty_cube):
        values = empty_cube.values
        values[0, 0, 0] = 3
        assert empty_cube.cell(0, 0, 0) == EMPTY

    def test_fresh_cubes_are_equal(self):
        assert Cube() == Cube.create_empty()


# ---------------------------------------------------------------------------
# 2. Deposit
# ---------------------------------------------------------------------------

class TestDeposit:
    def test_deposit_marks_cells_with_occupant(self, empty_cube):
        empty_cube.deposit(BASE_FOOTPRINT, 7)
        for point in BASE_FOOTPRINT:
            assert empty_cube.cell(*point) == 7
        assert empty_cube.occupied_count() == 5
        assert empty_cube.conflict_count() == 0

    def test_disjoint_footprints_do_not_conflict(self, empty_cube):
        empty_cube.deposit(BASE_FOOTPRINT, 0)
        shifted = [(x, y, z + 1) for x, y, z in BASE_FOOTPRINT]
        empty_cube.deposit(shifted, 1)
        assert empty_cube.conflict_count() == 0
        assert empty_cube.occupied_count() == 10

    def test_shared_cell_becomes_conflict(self, empty_cube):
        empty_cube.deposit(BASE_FOOTPRINT, 0)
        shifted = [(x + 1, y, z) for x, y, z in BASE_FOOTPRINT]
        empty_cube.deposit(shifted, 1)
        # (1,0,0), (2,0,0) and (3,1,0) are claimed twice
        assert empty_cube.conflict_count() == 3
        assert empty_cube.cell(1, 0, 0) == CONFLICT
        assert empty_cube.cell(0, 0, 0) == 0
        assert empty_cube.cell(4, 1, 0) == 1

    def test_conflict_stays_conflict(self, empty_cube):
        for occupant in (0, 1, 2):
            empty_cube.deposit([(2, 2, 2)], occupant)
        assert empty_cube.cell(2, 2, 2) == CONFLICT
        assert empty_cube.conflict_count() == 1

    def test_same_occupant_twice_is_a_conflict(self, empty_cube):
        empty_cube.deposit([(0, 0, 0)], 4)
        empty_cube.deposit([(0, 0, 0)], 4)
        assert empty_cube.cell(0, 0, 0) == CONFLICT

    @pytest.mark.parametrize("point", [(5, 0, 0), (0, 5, 0), (0, 0, 5), (-1, 0, 0), (0, 0, -1)])
    def test_out_of_range_point_raises(self, empty_cube, point):
        with pytest.raises(IndexError):
            empty_cube.deposit([point], 0)
        assert empty_cube.is_empty()

    def test_failed_deposit_writes_nothing(self, empty_cube):
        with pytest.raises(IndexError):
            empty_cube.deposit([(0, 0, 0), (1, 0, 0), (5, 0, 0)], 3)
        assert empty_cube.is_empty()
        assert empty_cube.cell(0, 0, 0) == EMPTY

    @pytest.mark.parametrize("occupant", [-1, 25, 100, True, "a"])
    def test_occupant_outside_identity_range_rejected(self, empty_cube, occupant):
        with pytest.raises(ValueError):
            empty_cube.deposit([(0, 0, 0)], occupant)
        assert empty_cube.is_empty()
        assert empty_cube.conflict_count() == 0


# ---------------------------------------------------------------------------
# 3. Rendering
# ---------------------------------------------------------------------------

class TestRender:
    def test_empty_cube_renders_25_dot_rows(self, empty_cube):
        text = empty_cube.render()
        lines = text.split("\n")
        rows = [line for line in lines if line]
        assert len(rows) == 25
        assert all(row == "....." for row in rows)

    def test_render_is_framed_by_blank_lines(self, empty_cube):
        lines = empty_cube.render().split("\n")
        assert lines[0] == ""
        assert lines[-1] == ""
        # one blank separator after every block of five rows
        assert [i for i, line in enumerate(lines) if not line] == [0, 6, 12, 18, 24, 30]

    def test_str_matches_render(self, empty_cube):
        assert str(empty_cube) == empty_cube.render()

    def test_occupant_and_conflict_characters(self, empty_cube):
        empty_cube.deposit(BASE_FOOTPRINT, 0)
        empty_cube.deposit([(3, 1, 0), (4, 4, 4)], 24)
        assert render_char(empty_cube, 0, 0, 0) == "a"
        assert render_char(empty_cube, 2, 1, 0) == "a"
        assert render_char(empty_cube, 3, 1, 0) == "#"
        assert render_char(empty_cube, 4, 4, 4) == "y"
        assert render_char(empty_cube, 1, 1, 1) == "."


class TestIndexToChar:
    @pytest.mark.parametrize(
        "value, expected",
        [(0, "a"), (7, "h"), (15, "p"), (24, "y"), (EMPTY, "."), (CONFLICT, "#"), (-5, "#"), (100, "#")],
    )
    def test_mapping(self, value, expected):
        assert index_to_char(value) == expected
