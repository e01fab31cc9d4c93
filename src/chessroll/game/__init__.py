"""Game management layer: turn state machine, controller, clock.

Quick start::

    from chessroll.game import GameController, GameMode

    ctrl = GameController()
    ctrl.new_game(GameMode.CHAOS)
    print(ctrl.state.selected_pieces)
"""

from chessroll.game.clock import Clock, ClockSnapshot
from chessroll.game.controller import GameController, GameEvents
from chessroll.game.events import (
    BonusTriggered,
    GameEvent,
    GameOver,
    MoveApplied,
    PromotionRequired,
    Rerolled,
    TurnChanged,
)
from chessroll.game.interfaces import (
    DrawOffer,
    GameEndReason,
    IClock,
    IGameController,
    TimeControl,
)
from chessroll.game.machine import Transition, TurnGroup, group_turns
from chessroll.game.modes import GameMode, ModeConfig, mode_config
from chessroll.game.state import GameState

__all__ = [
    # Interfaces
    "DrawOffer",
    "GameEndReason",
    "IClock",
    "IGameController",
    "TimeControl",
    # Modes
    "GameMode",
    "ModeConfig",
    "mode_config",
    # Events
    "BonusTriggered",
    "GameEvent",
    "GameOver",
    "MoveApplied",
    "PromotionRequired",
    "Rerolled",
    "TurnChanged",
    # Concrete
    "Clock",
    "ClockSnapshot",
    "GameController",
    "GameEvents",
    "GameState",
    "Transition",
    "TurnGroup",
    "group_turns",
]
