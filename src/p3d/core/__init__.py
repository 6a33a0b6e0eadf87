"""Placement and occupancy model: cube, piece geometry and enumeration."""

from .cube import CONFLICT, EMPTY, Cube, index_to_char
from .enumerator import (
    COMBINATION_SPACE,
    count_valid_combinations,
    first_valid,
    iter_combinations,
    iter_valid_combinations,
    next_valid,
    next_valid_wrapping,
    valid_combinations,
)
from .piece import (
    InvalidCombinationError,
    InvalidPieceError,
    Piece,
    PieceError,
    decode_combination,
    encode_combination,
)
from .shapes import (
    ANCHORS,
    CUBE_SIZE,
    MAX_IDENTITY,
    NUM_PIECES,
    NUM_ROTATIONS,
    ROTATIONS,
    SHAPE_POINTS,
    get_anchor,
    get_pattern,
)

__all__ = [
    # Cube
    "Cube",
    "EMPTY",
    "CONFLICT",
    "index_to_char",
    # Piece
    "Piece",
    "PieceError",
    "InvalidPieceError",
    "InvalidCombinationError",
    "encode_combination",
    "decode_combination",
    # Enumeration
    "COMBINATION_SPACE",
    "first_valid",
    "next_valid",
    "next_valid_wrapping",
    "iter_combinations",
    "iter_valid_combinations",
    "valid_combinations",
    "count_valid_combinations",
    # Static tables
    "ROTATIONS",
    "ANCHORS",
    "CUBE_SIZE",
    "SHAPE_POINTS",
    "NUM_ROTATIONS",
    "NUM_PIECES",
    "MAX_IDENTITY",
    "get_pattern",
    "get_anchor",
]
