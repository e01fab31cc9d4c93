"""Game modes and their rule parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from chessroll.game.interfaces import TimeControl


class GameMode(str, Enum):
    CLASSIC = "classic"
    BLITZ = "blitz"
    AI = "ai"
    CHAOS = "chaos"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ModeConfig:
    """Rule parameters of a mode.

    ``pieces_to_roll`` may exceed ``moves_per_turn`` (chaos rolls four types
    but still allows three moves).
    """

    pieces_to_roll: int = 3
    moves_per_turn: int = 3
    rerolls_per_player: int = 2
    time_control: TimeControl | None = None
    weighted: bool = False


_MODE_CONFIGS: dict[GameMode, ModeConfig] = {
    GameMode.CLASSIC: ModeConfig(time_control=TimeControl.game_10m()),
    GameMode.BLITZ: ModeConfig(time_control=TimeControl.turn_30s()),
    GameMode.AI: ModeConfig(time_control=TimeControl.game_10m()),
    GameMode.CHAOS: ModeConfig(pieces_to_roll=4, time_control=TimeControl.game_10m()),
}


def mode_config(mode: GameMode) -> ModeConfig:
    return _MODE_CONFIGS[mode]
