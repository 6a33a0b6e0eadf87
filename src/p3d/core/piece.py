"""
Piece: one candidate placement of a five-cell piece in the cube.

A placement is addressed by a 16-bit combination index:

    +-------+-------+-------+-----------+-----+
    | 0 1 2 | 3 4 5 | 6 7 8 | 9 A B C D | E F |
    | x-offs| y-offs| z-offs| rotation  | 0 0 |
    +-------+-------+-------+-----------+-----+

The footprint (five absolute cells) is derived from the rotation pattern
plus the offset.  It is recomputed whenever it is read after the rotation
or offset changed, so it is never stale.

A placement is a valid configuration when all footprint cells are inside
the cube and, for anchored identities, one of them is the anchor cell.
"""

from __future__ import annotations

from functools import total_ordering
from typing import Optional, Tuple

from p3d.core.cube import Cube
from p3d.core.shapes import (
    ANCHORS,
    CUBE_SIZE,
    MAX_IDENTITY,
    NUM_ROTATIONS,
    ROTATIONS,
    Pattern,
    Point,
)

AXIS_BITS = 3
AXIS_MASK = 0x7
ROTATION_SHIFT = 3 * AXIS_BITS
ROTATION_MASK = 0x1F
MAX_COMBINATION = (1 << (ROTATION_SHIFT + 5)) - 1  # 0x3FFF


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────

class PieceError(Exception):
    """Base class for piece construction and addressing errors."""


class InvalidPieceError(PieceError, ValueError):
    """Piece identity outside 0-24."""


class InvalidCombinationError(PieceError, ValueError):
    """Combination index that does not address a rotation/offset."""


# ─────────────────────────────────────────────────────────────────────────────
# Combination index
# ─────────────────────────────────────────────────────────────────────────────

def encode_combination(x: int, y: int, z: int, rotation: int) -> int:
    """
    Pack offset and rotation into a combination index.

    Raises:
        InvalidCombinationError: a field does not fit its bit width
            (x, y, z in 0-7, rotation in 0-31).
    """
    if not (0 <= x <= AXIS_MASK and 0 <= y <= AXIS_MASK and 0 <= z <= AXIS_MASK):
        raise InvalidCombinationError(
            f"Offset ({x}, {y}, {z}) does not fit the 3-bit offset fields"
        )
    if not 0 <= rotation <= ROTATION_MASK:
        raise InvalidCombinationError(
            f"Rotation {rotation} does not fit the 5-bit rotation field"
        )
    return x | (y << AXIS_BITS) | (z << (2 * AXIS_BITS)) | (rotation << ROTATION_SHIFT)


def decode_combination(combination: int) -> Tuple[int, int, int, int]:
    """
    Unpack a combination index into (x, y, z, rotation).

    Raises:
        InvalidCombinationError: value outside 0-0x3FFF.
    """
    if not 0 <= combination <= MAX_COMBINATION:
        raise InvalidCombinationError(
            f"Combination must be 0-{MAX_COMBINATION:#06x}, got {combination}"
        )
    x = combination & AXIS_MASK
    y = (combination >> AXIS_BITS) & AXIS_MASK
    z = (combination >> (2 * AXIS_BITS)) & AXIS_MASK
    rotation = (combination >> ROTATION_SHIFT) & ROTATION_MASK
    return x, y, z, rotation


# ─────────────────────────────────────────────────────────────────────────────
# Piece
# ─────────────────────────────────────────────────────────────────────────────

@total_ordering
class Piece:
    """
    A piece identity together with its current rotation and offset.

    Pieces compare, hash and sort by identity only.
    """

    __slots__ = ("_identity", "_rotation", "_x", "_y", "_z", "_footprint", "_stale")

    def __init__(self, identity: int) -> None:
        if isinstance(identity, bool) or not isinstance(identity, int):
            raise InvalidPieceError(f"Piece identity must be an int, got {identity!r}")
        if not 0 <= identity <= MAX_IDENTITY:
            raise InvalidPieceError(f"Impossible piece identity {identity}")
        self._identity = identity
        self._rotation = 0
        self._x = 0
        self._y = 0
        self._z = 0
        self._footprint: Tuple[Point, ...] = ()
        self._stale = True
        self.recompute_footprint()

    # ── Attributes ───────────────────────────────────────────────────────

    @property
    def identity(self) -> int:
        return self._identity

    @property
    def rotation(self) -> int:
        return self._rotation

    @property
    def offset(self) -> Point:
        return (self._x, self._y, self._z)

    @property
    def pattern(self) -> Pattern:
        return ROTATIONS[self._rotation]

    @property
    def anchor(self) -> Optional[Point]:
        return ANCHORS[self._identity]

    @property
    def footprint(self) -> Tuple[Point, ...]:
        """The five absolute cells covered at the current combination."""
        if self._stale:
            self.recompute_footprint()
        return self._footprint

    @property
    def label(self) -> str:
        """Display character of this piece ('a' - 'y')."""
        return chr(ord("a") + self._identity)

    # ── Combination index ────────────────────────────────────────────────

    def encode_combination(self) -> int:
        return encode_combination(self._x, self._y, self._z, self._rotation)

    def assign_combination(self, combination: Optional[int]) -> None:
        """
        Overwrite rotation and offset.

        None resets everything to zero.

        Raises:
            InvalidCombinationError: index out of range or rotation >= 24.
        """
        if combination is None:
            self._set(0, 0, 0, 0)
            return
        x, y, z, rotation = decode_combination(combination)
        if rotation >= NUM_ROTATIONS:
            raise InvalidCombinationError(
                f"Combination {combination} addresses rotation {rotation}, "
                f"only 0-{NUM_ROTATIONS - 1} exist"
            )
        self._set(x, y, z, rotation)

    def advance(self) -> bool:
        """
        Step to the next combination: rotation fastest, then x, y, z.

        Returns False once z has run past the last layer, i.e. the whole
        space of combinations has been walked.
        """
        rotation, x, y, z = self._rotation + 1, self._x, self._y, self._z
        if rotation >= NUM_ROTATIONS:
            rotation = 0
            x += 1
        if x >= CUBE_SIZE:
            x = 0
            y += 1
        if y >= CUBE_SIZE:
            y = 0
            z += 1
        self._set(x, y, z, rotation)
        return z < CUBE_SIZE

    # ── Geometry ─────────────────────────────────────────────────────────

    def recompute_footprint(self) -> Tuple[Point, ...]:
        self._footprint = tuple(
            (px + self._x, py + self._y, pz + self._z)
            for px, py, pz in ROTATIONS[self._rotation]
        )
        self._stale = False
        return self._footprint

    def fits_in_bounds(self) -> bool:
        return all(
            0 <= c < CUBE_SIZE for point in self.footprint for c in point
        )

    def fits_anchor_constraint(self) -> bool:
        anchor = ANCHORS[self._identity]
        if anchor is None:
            return True
        return anchor in self.footprint

    def is_valid_configuration(self) -> bool:
        """Recompute the footprint, then check bounds and anchor."""
        self.recompute_footprint()
        return self.fits_in_bounds() and self.fits_anchor_constraint()

    def deposit_into(self, cube: Cube) -> None:
        """Write the footprint into *cube*, tagged with this identity."""
        cube.deposit(self.footprint, self._identity)

    # ── Copy / comparison ────────────────────────────────────────────────

    def copy(self) -> "Piece":
        clone = Piece(self._identity)
        clone._set(self._x, self._y, self._z, self._rotation)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return self._identity == other._identity

    def __lt__(self, other: "Piece") -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return self._identity < other._identity

    def __hash__(self) -> int:
        return hash(self._identity)

    def __repr__(self) -> str:
        # Past the end of the space the offset may no longer be encodable
        if max(self._x, self._y, self._z) <= AXIS_MASK:
            combination = str(self.encode_combination())
        else:
            combination = "none"
        return (
            f"Piece(id={self._identity} '{self.label}', rot={self._rotation}, "
            f"offset=({self._x}, {self._y}, {self._z}), "
            f"combination={combination})"
        )

    # ── Helpers ──────────────────────────────────────────────────────────

    def _set(self, x: int, y: int, z: int, rotation: int) -> None:
        self._x, self._y, self._z, self._rotation = x, y, z, rotation
        self._stale = True
