"""Greedy single-ply move advisor.

Every allocated legal move is scored with additive heuristics and the best
few are returned as hints. There is no look-ahead.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from chessroll.core.attacks import count_attackers, is_in_check
from chessroll.core.board import Board
from chessroll.core.enums import Color, PieceType
from chessroll.core.movement import apply_move, captured_piece, promotion_row
from chessroll.core.piece import Piece
from chessroll.core.rules import iter_allowed_moves
from chessroll.core.types import Position

MAX_HINTS = 3

BASE_SCORE = 1
CAPTURE_MULTIPLIER = 10
CHECK_BONUS = 50
CENTER_BONUS = 5
SAFE_KING_BONUS = 10
KING_ATTACKER_PENALTY = 5
DEVELOPMENT_BONUS = 8
PROMOTION_BONUS = 80

PIECE_VALUES: Mapping[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 100,
}

_CENTER_ROWS = range(3, 5)
_CENTER_COLS = range(3, 5)

REASON_DEFAULT = "Legal move"
REASON_CHECK = "Gives check"
REASON_CENTER = "Controls the center"
REASON_KING_SAFE = "Keeps the king safe"
REASON_DEVELOPMENT = "Develops a piece"
REASON_PROMOTION = "Promotes a pawn"


@dataclass(frozen=True, slots=True)
class Hint:
    """A suggested move with its heuristic score and a short explanation."""

    from_pos: Position
    to_pos: Position
    piece: Piece
    score: int
    reason: str

    def __str__(self) -> str:
        return f"{self.from_pos}-{self.to_pos} ({self.score}: {self.reason})"


def evaluate_move(
    board: Board, from_pos: Position, to_pos: Position, piece: Piece
) -> Hint:
    """Score a single move that the caller already knows to be legal."""
    score = BASE_SCORE
    reason = REASON_DEFAULT
    opponent = piece.color.opposite

    target = captured_piece(board, from_pos, to_pos)
    if target is not None:
        score += PIECE_VALUES[target.piece_type] * CAPTURE_MULTIPLIER
        reason = f"Captures a {target.piece_type}"

    after = apply_move(board, from_pos, to_pos)
    if is_in_check(after, opponent):
        score += CHECK_BONUS
        reason = REASON_CHECK

    if to_pos.row in _CENTER_ROWS and to_pos.col in _CENTER_COLS:
        score += CENTER_BONUS
        if reason == REASON_DEFAULT:
            reason = REASON_CENTER

    if piece.piece_type == PieceType.KING:
        danger = count_attackers(after, to_pos, opponent)
        if danger == 0:
            score += SAFE_KING_BONUS
            if reason == REASON_DEFAULT:
                reason = REASON_KING_SAFE
        else:
            score -= danger * KING_ATTACKER_PENALTY

    if (
        piece.piece_type in (PieceType.KNIGHT, PieceType.BISHOP)
        and from_pos.row == piece.color.home_row
    ):
        score += DEVELOPMENT_BONUS
        if reason == REASON_DEFAULT:
            reason = REASON_DEVELOPMENT

    if piece.piece_type == PieceType.PAWN and to_pos.row == promotion_row(piece.color):
        score += PROMOTION_BONUS
        reason = REASON_PROMOTION

    return Hint(from_pos, to_pos, piece, max(score, BASE_SCORE), reason)


def evaluate_hints(
    board: Board,
    color: Color,
    selected_pieces: Iterable[PieceType],
    used_pieces_count: Mapping[PieceType, int],
    en_passant_target: Position | None = None,
    limit: int = MAX_HINTS,
) -> list[Hint]:
    """Best *limit* moves for *color* under its current allocation.

    Sorted by descending score; equal scores keep board-scan order.
    """
    hints = [
        evaluate_move(board, from_pos, to_pos, piece)
        for from_pos, to_pos, piece in iter_allowed_moves(
            board, color, selected_pieces, used_pieces_count, en_passant_target
        )
    ]
    hints.sort(key=lambda hint: hint.score, reverse=True)
    return hints[:limit]
