"""Allocation-aware rules: which moves the mover may actually make."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping

from chessroll.core.board import Board
from chessroll.core.enums import Color, PieceType
from chessroll.core.movement import is_legal_move
from chessroll.core.piece import Piece
from chessroll.core.types import ALL_POSITIONS, Position

AllowedMove = tuple[Position, Position, Piece]


def allocation_counts(selected_pieces: Iterable[PieceType]) -> Counter[PieceType]:
    """How many moves each piece type is granted by the allocation."""
    return Counter(selected_pieces)


def can_use_piece_type(
    piece_type: PieceType,
    selected_pieces: Iterable[PieceType],
    used_pieces_count: Mapping[PieceType, int],
) -> bool:
    """Whether one more move of *piece_type* fits the current allocation."""
    granted = allocation_counts(selected_pieces)[piece_type]
    return used_pieces_count.get(piece_type, 0) < granted


def iter_allowed_moves(
    board: Board,
    color: Color,
    selected_pieces: Iterable[PieceType],
    used_pieces_count: Mapping[PieceType, int],
    en_passant_target: Position | None = None,
) -> Iterator[AllowedMove]:
    """Yield every legal move of *color* whose piece type is still allocated.

    Order is source square row-major, then destination row-major.
    """
    granted = allocation_counts(selected_pieces)
    for from_pos, piece in board.pieces_of(color):
        if used_pieces_count.get(piece.piece_type, 0) >= granted[piece.piece_type]:
            continue
        for to_pos in ALL_POSITIONS:
            if is_legal_move(board, from_pos, to_pos, en_passant_target):
                yield from_pos, to_pos, piece


def can_make_valid_move(
    board: Board,
    color: Color,
    selected_pieces: Iterable[PieceType],
    used_pieces_count: Mapping[PieceType, int],
    en_passant_target: Position | None = None,
) -> bool:
    """Whether *color* has any legal move within its allocation.

    Unlike plain chess legality this honours the piece restriction, so a
    side may have legal chess moves and still answer ``False``.
    """
    selected = tuple(selected_pieces)
    if not selected:
        return False
    moves = iter_allowed_moves(
        board, color, selected, used_pieces_count, en_passant_target
    )
    return next(moves, None) is not None
