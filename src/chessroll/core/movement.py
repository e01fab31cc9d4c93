"""Move legality and move application.

:func:`is_valid_move` answers the geometric question plus king safety for
king moves only. Callers moving any other piece must pair it with a
post-move check test, which :func:`is_legal_move` does.
"""

from __future__ import annotations

from chessroll.core.attacks import (
    is_in_check,
    is_knight_jump,
    is_slider_move,
)
from chessroll.core.board import Board
from chessroll.core.enums import Color, PieceType
from chessroll.core.piece import Piece
from chessroll.core.types import ALL_POSITIONS, Position

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

_KING_START_COL = 4
_KINGSIDE_ROOK_COL = 7
_QUEENSIDE_ROOK_COL = 0


def _pawn_start_row(color: Color) -> int:
    return 6 if color == Color.WHITE else 1


def promotion_row(color: Color) -> int:
    """Farthest row for *color*'s pawns."""
    return 0 if color == Color.WHITE else 7


# -- Legality ----------------------------------------------------------------


def is_valid_move(
    board: Board | None,
    from_pos: Position | None,
    to_pos: Position | None,
    piece: Piece | None,
    en_passant_target: Position | None = None,
) -> bool:
    """Whether *piece* on *from_pos* may move to *to_pos*.

    Never raises: malformed or off-board input is simply not a valid move.
    """
    if board is None or from_pos is None or to_pos is None or piece is None:
        return False
    if not from_pos.is_on_board or not to_pos.is_on_board or from_pos == to_pos:
        return False

    target = board[to_pos]
    if target is not None and (
        target.color == piece.color or target.piece_type == PieceType.KING
    ):
        return False

    piece_type = piece.piece_type
    if piece_type == PieceType.PAWN:
        return _is_valid_pawn_move(board, from_pos, to_pos, piece, en_passant_target)
    if piece_type == PieceType.KNIGHT:
        return is_knight_jump(to_pos.row - from_pos.row, to_pos.col - from_pos.col)
    if piece_type == PieceType.KING:
        if not _is_valid_king_step(board, from_pos, to_pos, piece):
            return False
        return not is_in_check(apply_move(board, from_pos, to_pos), piece.color)
    return is_slider_move(board, from_pos, to_pos, piece_type)


def _is_valid_pawn_move(
    board: Board,
    from_pos: Position,
    to_pos: Position,
    piece: Piece,
    en_passant_target: Position | None,
) -> bool:
    direction = piece.color.pawn_direction
    row_diff = to_pos.row - from_pos.row
    col_diff = to_pos.col - from_pos.col

    if col_diff == 0:
        if board[to_pos] is not None:
            return False
        if row_diff == direction:
            return True
        return (
            row_diff == 2 * direction
            and from_pos.row == _pawn_start_row(piece.color)
            and board[from_pos.offset(direction, 0)] is None
        )

    if abs(col_diff) != 1 or row_diff != direction:
        return False
    if board[to_pos] is not None:
        return True
    return to_pos == en_passant_target and _en_passant_victim(board, to_pos, piece)


def _en_passant_victim(board: Board, to_pos: Position, pawn: Piece) -> bool:
    victim = board[to_pos.offset(-pawn.color.pawn_direction, 0)]
    return victim is not None and victim.is_a(pawn.color.opposite, PieceType.PAWN)


def _is_valid_king_step(
    board: Board, from_pos: Position, to_pos: Position, king: Piece
) -> bool:
    row_diff = to_pos.row - from_pos.row
    col_diff = to_pos.col - from_pos.col
    if abs(row_diff) <= 1 and abs(col_diff) <= 1:
        return True
    if row_diff == 0 and abs(col_diff) == 2:
        return can_castle(board, from_pos, to_pos, king)
    return False


def can_castle(board: Board, from_pos: Position, to_pos: Position, king: Piece) -> bool:
    """Castling gate: unmoved king and rook, empty path, no attacked square.

    The king may not castle out of check, through an attacked square, or
    into check. Each square on the way is tested by placing the king there.
    """
    if king.piece_type != PieceType.KING or king.has_moved:
        return False
    if from_pos != Position(king.color.home_row, _KING_START_COL):
        return False
    if to_pos.row != from_pos.row or abs(to_pos.col - from_pos.col) != 2:
        return False

    kingside = to_pos.col > from_pos.col
    rook_col = _KINGSIDE_ROOK_COL if kingside else _QUEENSIDE_ROOK_COL
    rook = board[Position(from_pos.row, rook_col)]
    if rook is None or not rook.is_a(king.color, PieceType.ROOK) or rook.has_moved:
        return False

    low, high = sorted((from_pos.col, rook_col))
    for col in range(low + 1, high):
        if board[Position(from_pos.row, col)] is not None:
            return False

    if is_in_check(board, king.color):
        return False

    step = 1 if kingside else -1
    for col in range(from_pos.col + step, to_pos.col + step, step):
        probe = board.replace({from_pos: None, Position(from_pos.row, col): king})
        if is_in_check(probe, king.color):
            return False
    return True


def is_legal_move(
    board: Board,
    from_pos: Position,
    to_pos: Position,
    en_passant_target: Position | None = None,
    promotion: PieceType | None = None,
) -> bool:
    """Full chess legality of moving the piece on *from_pos*: geometry plus
    the guarantee that the mover's own king is not left in check."""
    piece = board[from_pos]
    if piece is None:
        return False
    if not is_valid_move(board, from_pos, to_pos, piece, en_passant_target):
        return False
    after = apply_move(board, from_pos, to_pos, promotion)
    return not is_in_check(after, piece.color)


def legal_destinations(
    board: Board, from_pos: Position, en_passant_target: Position | None = None
) -> list[Position]:
    """Every square the piece on *from_pos* may legally move to, scan order."""
    if not from_pos.is_on_board or board[from_pos] is None:
        return []
    return [
        to_pos
        for to_pos in ALL_POSITIONS
        if is_legal_move(board, from_pos, to_pos, en_passant_target)
    ]


# -- Move classification ----------------------------------------------------


def is_castling_move(piece: Piece, from_pos: Position, to_pos: Position) -> bool:
    return piece.piece_type == PieceType.KING and abs(to_pos.col - from_pos.col) == 2


def is_en_passant_capture(
    board: Board, from_pos: Position, to_pos: Position, piece: Piece
) -> bool:
    return (
        piece.piece_type == PieceType.PAWN
        and abs(to_pos.col - from_pos.col) == 1
        and board[to_pos] is None
    )


def is_promotion_move(piece: Piece, to_pos: Position) -> bool:
    return piece.piece_type == PieceType.PAWN and to_pos.row == promotion_row(
        piece.color
    )


def captured_piece(board: Board, from_pos: Position, to_pos: Position) -> Piece | None:
    """Piece removed by the move, including a pawn taken en passant."""
    piece = board[from_pos]
    if piece is None:
        return None
    if is_en_passant_capture(board, from_pos, to_pos, piece):
        return board[to_pos.offset(-piece.color.pawn_direction, 0)]
    return board[to_pos]


def en_passant_target_after(
    from_pos: Position, to_pos: Position, piece: Piece
) -> Position | None:
    """Square skipped by a two-square pawn advance, else ``None``."""
    if piece.piece_type == PieceType.PAWN and abs(to_pos.row - from_pos.row) == 2:
        return Position((from_pos.row + to_pos.row) // 2, from_pos.col)
    return None


# -- Application --------------------------------------------------------------


def apply_move(
    board: Board,
    from_pos: Position,
    to_pos: Position,
    promotion: PieceType | None = None,
) -> Board:
    """Return the board after moving the piece on *from_pos* to *to_pos*.

    Handles the rook hop of castling, removal of a pawn taken en passant
    and promotion (queen unless *promotion* names another piece). The
    input board is never modified; an empty source square returns it as is.
    """
    if not from_pos.is_on_board or not to_pos.is_on_board:
        return board
    piece = board[from_pos]
    if piece is None:
        return board

    changes: dict[Position, Piece | None] = {}

    if is_castling_move(piece, from_pos, to_pos):
        kingside = to_pos.col > from_pos.col
        rook_from = Position(
            from_pos.row, _KINGSIDE_ROOK_COL if kingside else _QUEENSIDE_ROOK_COL
        )
        rook = board[rook_from]
        if rook is not None:
            rook_to = Position(from_pos.row, to_pos.col - 1 if kingside else to_pos.col + 1)
            changes[rook_from] = None
            changes[rook_to] = rook.moved()

    if is_en_passant_capture(board, from_pos, to_pos, piece):
        changes[to_pos.offset(-piece.color.pawn_direction, 0)] = None

    if is_promotion_move(piece, to_pos):
        promote_to = promotion if promotion in PROMOTION_TYPES else PieceType.QUEEN
        changes[to_pos] = piece.promoted(promote_to)
    else:
        changes[to_pos] = piece.moved()
    changes[from_pos] = None

    return board.replace(changes)
