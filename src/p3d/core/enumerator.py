"""
Walks the combination space of a piece in its fixed order.

The space holds CUBE_SIZE³ × NUM_ROTATIONS = 3000 combinations; rotation
varies fastest, then x, y and z.  Every helper here drives Piece.advance()
and Piece.is_valid_configuration(), so no combination is skipped or
visited twice.
"""

from __future__ import annotations

from typing import Iterator, List

from p3d.core.piece import Piece
from p3d.core.shapes import CUBE_SIZE, NUM_ROTATIONS

COMBINATION_SPACE = CUBE_SIZE ** 3 * NUM_ROTATIONS


def first_valid(piece: Piece) -> bool:
    """
    Settle *piece* on the first valid combination at or after its current one.

    Returns False if the end of the space is reached without a match.
    """
    if piece.is_valid_configuration():
        return True
    return next_valid(piece)


def next_valid(piece: Piece) -> bool:
    """
    Advance *piece* to the next valid combination strictly after the current one.

    Returns False if the end of the space is reached without a match.
    """
    while piece.advance():
        if piece.is_valid_configuration():
            return True
    return False


def next_valid_wrapping(piece: Piece) -> bool:
    """
    Like next_valid(), but restart once from combination zero on exhaustion.

    Returns False only if the piece has no valid combination at all.
    """
    if next_valid(piece):
        return True
    piece.assign_combination(None)
    return first_valid(piece)


def iter_combinations(piece: Piece) -> Iterator[int]:
    """Yield every combination from the current one to the end of the space."""
    yield piece.encode_combination()
    while piece.advance():
        yield piece.encode_combination()


def iter_valid_combinations(piece: Piece) -> Iterator[int]:
    """Yield the valid combinations from the current one onwards."""
    for combination in iter_combinations(piece):
        if piece.is_valid_configuration():
            yield combination


def valid_combinations(identity: int) -> List[int]:
    """All valid combinations of *identity*, in enumeration order."""
    return list(iter_valid_combinations(Piece(identity)))


def count_valid_combinations(identity: int) -> int:
    return sum(1 for _ in iter_valid_combinations(Piece(identity)))
