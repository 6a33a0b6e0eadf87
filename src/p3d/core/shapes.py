"""
Static piece geometry: the rotation catalog and the anchor table.

Every piece has the same five-cell shape:

    ++        +++
  +++   or  ++

laid flat in one of the three axis planes.  The catalog lists the 24
orientations as relative offsets from an origin cell; the origin is
always the first point.  Entries are grouped per plane:

     0 -  7   x-y plane
     8 - 15   x-z plane
    16 - 23   y-z plane

Within a plane the first four entries run along the first axis and the
last four along the second axis; the last two of each quartet step
sideways in the negative direction.

The anchor table binds piece identities to the absolute cube cell their
footprint must cover:

     0 -  7   cube corners          ('a' - 'h')
     8 - 15   inner corners         ('i' - 'p')
    16 - 21   face centres          ('q' - 'v')
    22 - 24   free, no anchor       ('w' - 'y')
"""

from __future__ import annotations

from typing import Optional, Tuple

Point = Tuple[int, int, int]
Pattern = Tuple[Point, Point, Point, Point, Point]

CUBE_SIZE = 5
SHAPE_POINTS = 5
NUM_ROTATIONS = 24
NUM_PIECES = 25
MAX_IDENTITY = NUM_PIECES - 1


# ─────────────────────────────────────────────────────────────────────────────
# Rotation catalog
# ─────────────────────────────────────────────────────────────────────────────

ROTATIONS: Tuple[Pattern, ...] = (
    # x - y plane
    ((0, 0, 0), (1, 0, 0), (2, 0, 0), (2, 1, 0), (3, 1, 0)),
    ((0, 0, 0), (1, 0, 0), (1, 1, 0), (2, 1, 0), (3, 1, 0)),
    ((0, 0, 0), (1, 0, 0), (2, 0, 0), (2, -1, 0), (3, -1, 0)),
    ((0, 0, 0), (1, 0, 0), (1, -1, 0), (2, -1, 0), (3, -1, 0)),
    ((0, 0, 0), (0, 1, 0), (0, 2, 0), (1, 2, 0), (1, 3, 0)),
    ((0, 0, 0), (0, 1, 0), (1, 1, 0), (1, 2, 0), (1, 3, 0)),
    ((0, 0, 0), (0, 1, 0), (0, 2, 0), (-1, 2, 0), (-1, 3, 0)),
    ((0, 0, 0), (0, 1, 0), (-1, 1, 0), (-1, 2, 0), (-1, 3, 0)),
    # x - z plane
    ((0, 0, 0), (1, 0, 0), (2, 0, 0), (2, 0, 1), (3, 0, 1)),
    ((0, 0, 0), (1, 0, 0), (1, 0, 1), (2, 0, 1), (3, 0, 1)),
    ((0, 0, 0), (1, 0, 0), (2, 0, 0), (2, 0, -1), (3, 0, -1)),
    ((0, 0, 0), (1, 0, 0), (1, 0, -1), (2, 0, -1), (3, 0, -1)),
    ((0, 0, 0), (0, 0, 1), (0, 0, 2), (1, 0, 2), (1, 0, 3)),
    ((0, 0, 0), (0, 0, 1), (1, 0, 1), (1, 0, 2), (1, 0, 3)),
    ((0, 0, 0), (0, 0, 1), (0, 0, 2), (-1, 0, 2), (-1, 0, 3)),
    ((0, 0, 0), (0, 0, 1), (-1, 0, 1), (-1, 0, 2), (-1, 0, 3)),
    # y - z plane
    ((0, 0, 0), (0, 1, 0), (0, 2, 0), (0, 2, 1), (0, 3, 1)),
    ((0, 0, 0), (0, 1, 0), (0, 1, 1), (0, 2, 1), (0, 3, 1)),
    ((0, 0, 0), (0, 1, 0), (0, 2, 0), (0, 2, -1), (0, 3, -1)),
    ((0, 0, 0), (0, 1, 0), (0, 1, -1), (0, 2, -1), (0, 3, -1)),
    ((0, 0, 0), (0, 0, 1), (0, 0, 2), (0, 1, 2), (0, 1, 3)),
    ((0, 0, 0), (0, 0, 1), (0, 1, 1), (0, 1, 2), (0, 1, 3)),
    ((0, 0, 0), (0, 0, 1), (0, 0, 2), (0, -1, 2), (0, -1, 3)),
    ((0, 0, 0), (0, 0, 1), (0, -1, 1), (0, -1, 2), (0, -1, 3)),
)


# ─────────────────────────────────────────────────────────────────────────────
# Anchor constraints
# ─────────────────────────────────────────────────────────────────────────────

ANCHORS: Tuple[Optional[Point], ...] = (
    # corners
    (0, 0, 0), (0, 4, 0), (0, 0, 4), (0, 4, 4),
    (4, 0, 0), (4, 4, 0), (4, 0, 4), (4, 4, 4),
    # inner corners
    (1, 1, 1), (1, 3, 1), (1, 1, 3), (1, 3, 3),
    (3, 1, 1), (3, 3, 1), (3, 1, 3), (3, 3, 3),
    # face centres
    (0, 2, 2), (2, 0, 2), (2, 2, 0),
    (4, 2, 2), (2, 4, 2), (2, 2, 4),
    # free pieces
    None, None, None,
)


def get_pattern(rotation: int) -> Pattern:
    """Relative offsets of orientation *rotation* (0-23)."""
    if not 0 <= rotation < NUM_ROTATIONS:
        raise ValueError(f"Rotation index must be 0-{NUM_ROTATIONS - 1}, got {rotation}")
    return ROTATIONS[rotation]


def get_anchor(identity: int) -> Optional[Point]:
    """Absolute cell that piece *identity* must cover, or None if it is free."""
    if not 0 <= identity <= MAX_IDENTITY:
        raise ValueError(f"Piece identity must be 0-{MAX_IDENTITY}, got {identity}")
    return ANCHORS[identity]
