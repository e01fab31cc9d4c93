"""Game state value object."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from chessroll.core.board import Board
from chessroll.core.enums import Color, GameResult, PieceType
from chessroll.core.move import Move
from chessroll.core.types import Position
from chessroll.game.interfaces import GameEndReason
from chessroll.game.modes import GameMode, ModeConfig, mode_config


def empty_usage() -> dict[PieceType, int]:
    """Usage counter with every piece type at zero."""
    return {piece_type: 0 for piece_type in PieceType}


@dataclass(frozen=True)
class GameState:
    """Complete state of a game at one instant.

    Transitions in :mod:`chessroll.game.machine` return new instances; a
    state is never modified after construction. The mapping fields are
    fresh dicts per state and must be treated as read-only, which also
    makes states unhashable.
    """

    __hash__ = None  # type: ignore[assignment]

    board: Board
    mode: GameMode = GameMode.CLASSIC
    config: ModeConfig = field(default_factory=lambda: mode_config(GameMode.CLASSIC))
    current_player: Color = Color.WHITE
    selected_pieces: tuple[PieceType, ...] = ()
    used_pieces_count: Mapping[PieceType, int] = field(default_factory=empty_usage)
    moves_remaining: int = 3
    rerolls_left: Mapping[Color, int] = field(
        default_factory=lambda: {Color.WHITE: 2, Color.BLACK: 2}
    )
    is_in_check: bool = False
    result: GameResult = GameResult.IN_PROGRESS
    end_reason: GameEndReason | None = None
    move_history: tuple[Move, ...] = ()
    en_passant_target: Position | None = None

    def evolve(self, **changes: Any) -> GameState:
        """Copy of this state with *changes* applied."""
        return replace(self, **changes)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def game_over(self) -> bool:
        return self.result != GameResult.IN_PROGRESS

    @property
    def winner(self) -> Color | None:
        if self.result == GameResult.WHITE_WINS:
            return Color.WHITE
        if self.result == GameResult.BLACK_WINS:
            return Color.BLACK
        return None

    @property
    def opponent(self) -> Color:
        return self.current_player.opposite

    @property
    def moves_used(self) -> int:
        return sum(self.used_pieces_count.values())

    @property
    def last_move(self) -> Move | None:
        return self.move_history[-1] if self.move_history else None

    @property
    def ply_count(self) -> int:
        return len(self.move_history)

    def rerolls_for(self, color: Color) -> int:
        return self.rerolls_left.get(color, 0)
