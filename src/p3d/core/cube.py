"""
Cube: occupancy grid of the 5×5×5 packing volume.

Every cell holds one of three states:

    EMPTY            nothing deposited yet
    0 .. 24          identity of the single piece occupying the cell
    CONFLICT         two or more pieces claimed the cell

The grid is only mutated through deposit(), which raises IndexError for
cells outside the cube; callers gate on Piece.is_valid_configuration().

Usage:
    cube = Cube.create_empty()
    piece.deposit_into(cube)
    print(cube.render())
    score = cube.conflict_count()
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from p3d.core.shapes import CUBE_SIZE, MAX_IDENTITY, Point

EMPTY = -1
CONFLICT = MAX_IDENTITY + 1


def index_to_char(value: int) -> str:
    """
    Map a cell value to its display character.

    Identities 0-24 become 'a'-'y', EMPTY becomes '.', anything else
    (conflicts, out-of-range values) becomes '#'.
    """
    if value == EMPTY:
        return "."
    if 0 <= value <= MAX_IDENTITY:
        return chr(ord("a") + value)
    return "#"


class Cube:
    """
    Occupancy grid of CUBE_SIZE³ cells.

    Internally a numpy int8 array indexed [x, y, z].
    """

    __slots__ = ("_cells",)

    def __init__(self) -> None:
        self._cells: np.ndarray = np.full(
            (CUBE_SIZE, CUBE_SIZE, CUBE_SIZE), EMPTY, dtype=np.int8,
        )

    @classmethod
    def create_empty(cls) -> "Cube":
        return cls()

    # ── State mutation ───────────────────────────────────────────────────

    def deposit(self, footprint: Iterable[Point], occupant_id: int) -> None:
        """
        Write *occupant_id* into every cell of *footprint*.

        An empty cell takes the occupant; any other cell, including one that
        is already in conflict, becomes CONFLICT.  Nothing is written unless
        every point is inside the cube.

        Raises:
            ValueError: occupant_id is not an identity in 0-24.
            IndexError: a point lies outside the cube.
        """
        if isinstance(occupant_id, bool) or not isinstance(occupant_id, int):
            raise ValueError(f"Occupant must be an int identity, got {occupant_id!r}")
        if not 0 <= occupant_id <= MAX_IDENTITY:
            raise ValueError(f"Occupant must be 0-{MAX_IDENTITY}, got {occupant_id}")
        points = [self._check_point(point) for point in footprint]
        for x, y, z in points:
            if self._cells[x, y, z] == EMPTY:
                self._cells[x, y, z] = occupant_id
            else:
                self._cells[x, y, z] = CONFLICT

    # ── Queries ──────────────────────────────────────────────────────────

    def cell(self, x: int, y: int, z: int) -> int:
        x, y, z = self._check_point((x, y, z))
        return int(self._cells[x, y, z])

    @property
    def values(self) -> np.ndarray:
        """Read-only copy of the grid."""
        return self._cells.copy()

    def conflict_count(self) -> int:
        """Number of cells claimed by more than one piece (0-125)."""
        return int(np.count_nonzero(self._cells == CONFLICT))

    def occupied_count(self) -> int:
        """Number of cells that are not empty (0-125), conflicts included."""
        return int(np.count_nonzero(self._cells != EMPTY))

    def is_empty(self) -> bool:
        return self.occupied_count() == 0

    # ── Representation ───────────────────────────────────────────────────

    def render(self) -> str:
        """
        Text form of the cube.

        A blank line first, then one block per x: five lines (one per y)
        of five characters (one per z), each block followed by a blank line.
        """
        lines = [""]
        for i in range(CUBE_SIZE):
            for j in range(CUBE_SIZE):
                lines.append("".join(index_to_char(int(v)) for v in self._cells[i, j]))
            lines.append("")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"Cube(occupied={self.occupied_count()}/{CUBE_SIZE ** 3}, "
            f"conflicts={self.conflict_count()})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cube):
            return NotImplemented
        return bool(np.array_equal(self._cells, other._cells))

    __hash__ = None  # type: ignore[assignment]

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _check_point(point: Point) -> Point:
        """Reject points outside the cube; numpy would wrap negative indices."""
        x, y, z = point
        if not (0 <= x < CUBE_SIZE and 0 <= y < CUBE_SIZE and 0 <= z < CUBE_SIZE):
            raise IndexError(f"Cell {tuple(point)} is outside the {CUBE_SIZE}³ cube")
        return x, y, z
