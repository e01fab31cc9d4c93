"""Events returned by state-machine transitions.

Each accepted transition reports what happened as a tuple of these
values, so a front end has one place to trigger sounds, animations and
statistics.
"""

from __future__ import annotations

from dataclasses import dataclass

from chessroll.core.enums import Color, PieceType
from chessroll.core.move import Move
from chessroll.core.types import Position
from chessroll.game.interfaces import GameEndReason


@dataclass(frozen=True, slots=True)
class MoveApplied:
    move: Move


@dataclass(frozen=True, slots=True)
class TurnChanged:
    """The turn passed to *color*."""

    color: Color


@dataclass(frozen=True, slots=True)
class BonusTriggered:
    """*color* rolled a triple of *piece_type* and earned a reroll."""

    piece_type: PieceType
    color: Color


@dataclass(frozen=True, slots=True)
class Rerolled:
    color: Color
    pieces: tuple[PieceType, ...]


@dataclass(frozen=True, slots=True)
class PromotionRequired:
    """A pawn move needs a promotion choice before it can be applied."""

    from_pos: Position
    to_pos: Position


@dataclass(frozen=True, slots=True)
class GameOver:
    """Terminal event; ``winner`` is ``None`` for a draw."""

    winner: Color | None
    reason: GameEndReason

    @property
    def is_draw(self) -> bool:
        return self.winner is None


GameEvent = (
    MoveApplied | TurnChanged | BonusTriggered | Rerolled | PromotionRequired | GameOver
)
