"""FEN placement parsing/serialization and the simplified move string."""

from __future__ import annotations

from chessroll.core.board import Board
from chessroll.core.enums import Color, PieceType
from chessroll.core.piece import PIECE_LETTERS, Piece
from chessroll.core.types import Position, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# castling right -> (color, rook column)
_CASTLING_RIGHTS: dict[str, tuple[Color, int]] = {
    "K": (Color.WHITE, 7),
    "Q": (Color.WHITE, 0),
    "k": (Color.BLACK, 7),
    "q": (Color.BLACK, 0),
}


def board_from_fen(fen: str) -> Board:
    """Parse the placement (and optional castling) fields of a FEN string.

    Without a castling field every king and rook is treated as unmoved.
    With one, kings and rooks that lost their right are flagged as moved.
    Pawns off their starting row are always flagged as moved.
    """
    parts = fen.split()
    if not parts:
        raise ValueError(f"Invalid FEN (empty): {fen!r}")

    ranks = parts[0].split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")

    rows: list[list[Piece | None]] = []
    for rank_text in ranks:
        row: list[Piece | None] = []
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                row.extend([None] * step)
            else:
                row.append(Piece.from_char(ch))
            if len(row) > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if len(row) != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")
        rows.append(row)

    castling = parts[2] if len(parts) >= 3 else None
    if castling is not None and castling != "-":
        if any(ch not in _CASTLING_RIGHTS for ch in castling):
            raise ValueError(f"Invalid FEN castling field: {castling!r}")

    for row_idx, row in enumerate(rows):
        for col, piece in enumerate(row):
            if piece is None:
                continue
            if _starts_moved(piece, row_idx, col, castling):
                row[col] = piece.moved()

    return Board(tuple(tuple(row) for row in rows))


def _starts_moved(piece: Piece, row: int, col: int, castling: str | None) -> bool:
    color = piece.color
    if piece.piece_type == PieceType.PAWN:
        start_row = 6 if color == Color.WHITE else 1
        return row != start_row
    if piece.piece_type not in (PieceType.KING, PieceType.ROOK) or castling is None:
        return False
    rights = [
        rook_col
        for ch, (right_color, rook_col) in _CASTLING_RIGHTS.items()
        if right_color == color and ch in castling
    ]
    if row != color.home_row:
        return True
    if piece.piece_type == PieceType.KING:
        return col != 4 or not rights
    return col not in rights


def board_to_fen(board: Board) -> str:
    """Serialize the placement field of *board*."""
    ranks: list[str] = []
    for cells in board.rows:
        text = ""
        empty = 0
        for piece in cells:
            if piece is None:
                empty += 1
                continue
            if empty:
                text += str(empty)
                empty = 0
            text += str(piece)
        if empty:
            text += str(empty)
        ranks.append(text)
    return "/".join(ranks)


def move_notation(
    from_pos: Position,
    to_pos: Position,
    piece: Piece,
    captured: Piece | None = None,
    promotion: PieceType | None = None,
) -> str:
    """Simplified long-algebraic move string, e.g. ``Ng1f3`` or ``e7xd8=Q``."""
    text = PIECE_LETTERS[piece.piece_type] + square_name(from_pos)
    if captured is not None:
        text += "x"
    text += square_name(to_pos)
    if promotion is not None:
        text += "=" + PIECE_LETTERS[promotion]
    return text
