"""Attack geometry and check detection.

Attack tests are purely geometric: they never ask whether the attacker
could legally move (that would recurse back into king-safety checks).
"""

from __future__ import annotations

import logging

from chessroll.core.board import Board
from chessroll.core.enums import Color, PieceType
from chessroll.core.piece import Piece
from chessroll.core.types import Position

_LOGGER = logging.getLogger(__name__)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def is_path_clear(board: Board, from_pos: Position, to_pos: Position) -> bool:
    """Whether every square strictly between the two squares is empty.

    The squares must share a row, column or diagonal; the end squares
    themselves are not inspected.
    """
    row_step = _sign(to_pos.row - from_pos.row)
    col_step = _sign(to_pos.col - from_pos.col)
    current = from_pos.offset(row_step, col_step)
    while current != to_pos:
        if not current.is_on_board or board[current] is not None:
            return False
        current = current.offset(row_step, col_step)
    return True


def is_straight_line(row_diff: int, col_diff: int) -> bool:
    return (row_diff == 0) != (col_diff == 0)


def is_diagonal(row_diff: int, col_diff: int) -> bool:
    return row_diff != 0 and abs(row_diff) == abs(col_diff)


def is_knight_jump(row_diff: int, col_diff: int) -> bool:
    return {abs(row_diff), abs(col_diff)} == {1, 2}


def can_attack_square(
    board: Board, from_pos: Position, to_pos: Position, piece: Piece
) -> bool:
    """Whether *piece* standing on *from_pos* attacks *to_pos*."""
    row_diff = to_pos.row - from_pos.row
    col_diff = to_pos.col - from_pos.col
    if row_diff == 0 and col_diff == 0:
        return False

    piece_type = piece.piece_type
    if piece_type == PieceType.PAWN:
        return row_diff == piece.color.pawn_direction and abs(col_diff) == 1
    if piece_type == PieceType.KNIGHT:
        return is_knight_jump(row_diff, col_diff)
    if piece_type == PieceType.KING:
        return abs(row_diff) <= 1 and abs(col_diff) <= 1
    return is_slider_move(board, from_pos, to_pos, piece_type)


def is_slider_move(
    board: Board, from_pos: Position, to_pos: Position, piece_type: PieceType
) -> bool:
    """Line geometry plus path clearance for bishops, rooks and queens."""
    row_diff = to_pos.row - from_pos.row
    col_diff = to_pos.col - from_pos.col
    if piece_type == PieceType.BISHOP:
        geometry_ok = is_diagonal(row_diff, col_diff)
    elif piece_type == PieceType.ROOK:
        geometry_ok = is_straight_line(row_diff, col_diff)
    elif piece_type == PieceType.QUEEN:
        geometry_ok = is_straight_line(row_diff, col_diff) or is_diagonal(
            row_diff, col_diff
        )
    else:
        return False
    return geometry_ok and is_path_clear(board, from_pos, to_pos)


def attackers_of(board: Board, target: Position, attacker_color: Color) -> list[Position]:
    """Squares of *attacker_color*'s pieces that attack *target*."""
    return [
        pos
        for pos, piece in board.pieces_of(attacker_color)
        if can_attack_square(board, pos, target, piece)
    ]


def count_attackers(board: Board, target: Position, attacker_color: Color) -> int:
    return len(attackers_of(board, target, attacker_color))


def is_square_attacked(board: Board, target: Position, attacker_color: Color) -> bool:
    return any(
        can_attack_square(board, pos, target, piece)
        for pos, piece in board.pieces_of(attacker_color)
    )


def is_in_check(board: Board, color: Color) -> bool:
    """Whether *color*'s king is attacked. A missing king is never in check."""
    king_pos = board.king_position(color)
    if king_pos is None:
        _LOGGER.debug("No %s king on board", color)
        return False
    in_check = is_square_attacked(board, king_pos, color.opposite)
    if in_check:
        _LOGGER.debug("%s king on %s is in check", color, king_pos)
    return in_check
