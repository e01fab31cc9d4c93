"""Randomized piece allocation: which piece types a side may move this turn."""

from __future__ import annotations

import logging
import random
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol

from chessroll.core.board import Board
from chessroll.core.enums import Color, PieceType

_LOGGER = logging.getLogger(__name__)

TRIPLE_THRESHOLD = 3

# Relative draw weights for the weighted sampler (percentages).
PIECE_WEIGHTS: Mapping[PieceType, int] = {
    PieceType.KING: 15,
    PieceType.QUEEN: 10,
    PieceType.ROOK: 18,
    PieceType.BISHOP: 18,
    PieceType.KNIGHT: 18,
    PieceType.PAWN: 21,
}


class RandomSource(Protocol):
    """Anything that yields floats uniformly in ``[0, 1)``.

    :class:`random.Random` satisfies it; tests supply a scripted sequence.
    """

    def random(self) -> float: ...


_SYSTEM_RANDOM: RandomSource = random.Random()


@dataclass(frozen=True, slots=True)
class Allocation:
    """Result of one roll."""

    pieces: tuple[PieceType, ...]
    triple_type: PieceType | None = None

    @property
    def has_triple(self) -> bool:
        return self.triple_type is not None

    def counts(self) -> Counter[PieceType]:
        return Counter(self.pieces)


def available_piece_types(board: Board, color: Color) -> list[PieceType]:
    """Piece types *color* still has on the board, in ascending type order."""
    present = {piece.piece_type for _, piece in board.pieces_of(color)}
    return sorted(present)


def find_triple(pieces: Iterable[PieceType]) -> PieceType | None:
    """First type to be drawn :data:`TRIPLE_THRESHOLD` times, if any."""
    seen: Counter[PieceType] = Counter()
    for piece_type in pieces:
        seen[piece_type] += 1
        if seen[piece_type] == TRIPLE_THRESHOLD:
            return piece_type
    return None


def _draw_uniform(choices: list[PieceType], rng: RandomSource) -> PieceType:
    index = int(rng.random() * len(choices))
    return choices[min(index, len(choices) - 1)]


def _draw_weighted(
    choices: list[PieceType], weights: Mapping[PieceType, int], rng: RandomSource
) -> PieceType:
    total = sum(weights.get(pt, 0) for pt in choices)
    if total <= 0:
        return _draw_uniform(choices, rng)
    ticket = rng.random() * total
    for piece_type in choices:
        ticket -= weights.get(piece_type, 0)
        if ticket < 0:
            return piece_type
    return choices[-1]


def roll_pieces(
    board: Board,
    color: Color,
    count: int = 3,
    rng: RandomSource | None = None,
    weights: Mapping[PieceType, int] | None = None,
) -> Allocation:
    """Draw *count* piece types for *color*, with replacement.

    Only types with at least one live piece are offered, but a type may be
    drawn more often than it has pieces: the roll grants availability, not
    specific pieces. Pass *weights* (e.g. :data:`PIECE_WEIGHTS`) for the
    non-uniform variant.
    """
    rng = rng or _SYSTEM_RANDOM
    choices = available_piece_types(board, color)
    if not choices:
        # Unreachable while a king stands; never counts as a bonus triple.
        _LOGGER.warning("No %s pieces on board; offering the king", color)
        return Allocation((PieceType.KING,) * count)
    if weights is None:
        pieces = tuple(_draw_uniform(choices, rng) for _ in range(count))
    else:
        pieces = tuple(_draw_weighted(choices, weights, rng) for _ in range(count))

    allocation = Allocation(pieces, find_triple(pieces))
    _LOGGER.debug(
        "Rolled %s for %s%s",
        ", ".join(str(pt) for pt in pieces),
        color,
        f" (triple {allocation.triple_type})" if allocation.has_triple else "",
    )
    return allocation
