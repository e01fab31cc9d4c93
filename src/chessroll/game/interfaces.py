"""Abstract interfaces and value types for the game layer.

Follows Dependency Inversion: the controller depends on these ABCs, not
on the concrete clock.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chessroll.core.enums import Color

if TYPE_CHECKING:
    from chessroll.core.enums import PieceType
    from chessroll.core.types import Position
    from chessroll.game.machine import Transition
    from chessroll.game.modes import GameMode


class GameEndReason(IntEnum):
    """Why a game stopped."""

    CHECKMATE = auto()
    TIME_UP = auto()
    RESIGNATION = auto()
    DRAW_AGREED = auto()


class DrawOffer(IntEnum):
    """State of a draw proposal made through the controller."""

    NONE = 0
    OFFERED = auto()
    ACCEPTED = auto()
    DECLINED = auto()


# ── Time control presets ─────────────────────────────────────────────────────


class TimeControl:
    """Budget rules for a game clock.

    Args:
        initial_seconds: Seconds each side starts with.
        per_turn: When true the budget is per turn and is refilled every
            time the player's turn begins (blitz).
    """

    __slots__ = ("initial_seconds", "per_turn")

    def __init__(self, initial_seconds: float, per_turn: bool = False) -> None:
        self.initial_seconds = initial_seconds
        self.per_turn = per_turn

    @classmethod
    def game_10m(cls) -> TimeControl:
        return cls(600)

    @classmethod
    def turn_30s(cls) -> TimeControl:
        return cls(30, per_turn=True)

    @classmethod
    def unlimited(cls) -> TimeControl:
        """Budget that never runs out."""
        return cls(float("inf"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeControl):
            return NotImplemented
        return (self.initial_seconds, self.per_turn) == (
            other.initial_seconds,
            other.per_turn,
        )

    def __hash__(self) -> int:
        return hash((self.initial_seconds, self.per_turn))

    def __repr__(self) -> str:
        if self.per_turn:
            return f"TimeControl({self.initial_seconds:.0f}s/turn)"
        mins = self.initial_seconds / 60
        return f"TimeControl({mins:.0f}m)"


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IClock(ABC):
    """Countdown for both sides, as seen by the controller."""

    @abstractmethod
    def start(self, color: Color) -> None:
        """Begin counting down *color*'s budget."""

    @abstractmethod
    def stop(self) -> None:
        """Freeze both budgets."""

    @abstractmethod
    def switch(self) -> None:
        """Hand the running countdown to the opponent."""

    @abstractmethod
    def remaining(self, color: Color) -> float:
        """Budget left for *color*, never negative."""

    @abstractmethod
    def is_flag_fallen(self, color: Color) -> bool:
        """True once *color*'s budget is spent."""

    @abstractmethod
    def flagged(self) -> Color | None:
        """Side to move if its budget is spent."""


class IGameController(ABC):
    """Interface for the stateful game orchestrator."""

    @abstractmethod
    def new_game(self, mode: GameMode) -> Transition:
        """Start a game in *mode* with white's opening roll."""

    @abstractmethod
    def submit_move(
        self,
        from_pos: Position,
        to_pos: Position,
        promotion: PieceType | None = None,
    ) -> Transition:
        """Submit a move for the side to move."""

    @abstractmethod
    def reroll(self) -> Transition:
        """Spend a reroll on a fresh allocation."""

    @abstractmethod
    def skip_turn(self) -> Transition:
        """Pass when no allocated piece can move."""

    @abstractmethod
    def resign(self, color: Color) -> Transition:
        """End the game with *color* conceding."""

    @abstractmethod
    def undo(self) -> bool:
        """Restore the state before the last accepted action."""
