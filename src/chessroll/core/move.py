"""Move record - an immutable entry of the append-only move history."""

from __future__ import annotations

from dataclasses import dataclass

from chessroll.core.enums import Color, PieceType
from chessroll.core.piece import Piece
from chessroll.core.types import Position


@dataclass(frozen=True, slots=True)
class Move:
    """A move as it was played.

    ``piece`` is the pre-move snapshot. ``turn_change`` records whether this
    move ended the mover's turn, which is what groups history into turns.
    """

    from_pos: Position
    to_pos: Position
    piece: Piece
    notation: str
    captured: Piece | None = None
    promotion: PieceType | None = None
    is_check: bool = False
    turn_change: bool = False

    @property
    def color(self) -> Color:
        return self.piece.color

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def __str__(self) -> str:
        return self.notation
