"""GameController: the stateful seat a front end talks to.

Coordinates: GameState transitions, Clock, selection/promotion UI flow,
undo history. Emits events via simple callbacks so the UI / tests can
subscribe.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from chessroll.core.allocation import RandomSource
from chessroll.core.board import Board
from chessroll.core.enums import Color, PieceType
from chessroll.core.types import Position
from chessroll.engine.advisor import Hint, evaluate_hints
from chessroll.game import machine
from chessroll.game.clock import Clock, ClockSnapshot, TimeSource
from chessroll.game.events import (
    GameEvent,
    MoveApplied,
    PromotionRequired,
    TurnChanged,
)
from chessroll.game.interfaces import DrawOffer, IGameController
from chessroll.game.machine import Transition
from chessroll.game.modes import GameMode, ModeConfig
from chessroll.game.state import GameState

# ── Event definitions ────────────────────────────────────────────────────────

EventCallback = Callable[[GameEvent, GameState], None]
StateCallback = Callable[[GameState], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_event: list[EventCallback] = field(default_factory=list)
    on_state_changed: list[StateCallback] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class _UndoEntry:
    state: GameState
    clock: ClockSnapshot | None


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Holds the current :class:`GameState` and drives it through
    :mod:`chessroll.game.machine`.

    Thread-safety: methods are designed to be called from a single thread
    (the main/UI thread).
    """

    __slots__ = (
        "_state",
        "_rng",
        "_now",
        "_clock",
        "_undo_stack",
        "_selected",
        "_destinations",
        "_pending_promotion",
        "_draw_offer",
        "_draw_offer_by",
        "hints_enabled",
        "events",
    )

    def __init__(
        self, rng: RandomSource | None = None, now: TimeSource = time.monotonic
    ) -> None:
        self._rng = rng
        self._now = now
        self._state = GameState(board=Board.initial())
        self._clock: Clock | None = None
        self._undo_stack: list[_UndoEntry] = []
        self._selected: Position | None = None
        self._destinations: list[Position] = []
        self._pending_promotion: PromotionRequired | None = None
        self._draw_offer = DrawOffer.NONE
        self._draw_offer_by: Color | None = None
        self.hints_enabled = True
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def clock(self) -> Clock | None:
        return self._clock

    @property
    def selected_square(self) -> Position | None:
        return self._selected

    @property
    def destinations(self) -> list[Position]:
        return list(self._destinations)

    @property
    def pending_promotion(self) -> PromotionRequired | None:
        return self._pending_promotion

    @property
    def draw_offer(self) -> DrawOffer:
        return self._draw_offer

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack) and not self._state.game_over

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(
        self,
        mode: GameMode = GameMode.CLASSIC,
        board: Board | None = None,
        config: ModeConfig | None = None,
    ) -> Transition:
        transition = machine.new_game(mode, self._rng, board=board, config=config)
        self._undo_stack = []
        self._clear_selection()
        self._draw_offer = DrawOffer.NONE
        self._draw_offer_by = None

        time_control = transition.state.config.time_control
        if time_control is not None:
            self._clock = Clock(time_control, self._now)
            self._clock.start(Color.WHITE)
        else:
            self._clock = None

        self._state = transition.state
        self._notify(transition)
        return transition

    def click(self, position: Position) -> Transition:
        """Handle a board click: select a piece or move the selected one."""
        state = self._state
        if state.game_over or self._pending_promotion is not None:
            return Transition(state)

        if self._selected is not None and position in self._destinations:
            return self.submit_move(self._selected, position)

        if machine.is_piece_selectable(state, position):
            self._selected = position
            self._destinations = machine.legal_destinations(state, position)
        else:
            self._clear_selection()
        return Transition(state)

    def submit_move(
        self,
        from_pos: Position,
        to_pos: Position,
        promotion: PieceType | None = None,
    ) -> Transition:
        flagged = self._check_flag()
        if flagged is not None:
            return flagged

        transition = machine.make_move(
            self._state, from_pos, to_pos, promotion, self._rng
        )
        self._clear_selection()
        pending = next(
            (e for e in transition.events if isinstance(e, PromotionRequired)), None
        )
        if pending is not None:
            self._pending_promotion = pending
            self._notify(transition)
            return transition
        return self._commit(transition)

    def choose_promotion(self, piece_type: PieceType) -> Transition:
        """Complete a pawn move that was waiting for a promotion choice."""
        pending = self._pending_promotion
        if pending is None:
            return Transition(self._state)
        before = self._state
        transition = self.submit_move(pending.from_pos, pending.to_pos, piece_type)
        # A refused choice keeps the prompt open.
        if transition.state is not before:
            self._pending_promotion = None
        return transition

    def cancel_promotion(self) -> None:
        self._pending_promotion = None

    def reroll(self) -> Transition:
        flagged = self._check_flag()
        if flagged is not None:
            return flagged
        self._clear_selection()
        return self._commit(machine.reroll(self._state, self._rng))

    def skip_turn(self) -> Transition:
        flagged = self._check_flag()
        if flagged is not None:
            return flagged
        self._clear_selection()
        return self._commit(machine.skip_turn(self._state, self._rng))

    def resign(self, color: Color) -> Transition:
        return self._commit(machine.resign(self._state, color), undoable=False)

    def offer_draw(self, color: Color) -> None:
        if self._state.game_over or self._draw_offer == DrawOffer.OFFERED:
            return
        self._draw_offer = DrawOffer.OFFERED
        self._draw_offer_by = color

    def accept_draw(self, color: Color) -> Transition:
        if self._draw_offer != DrawOffer.OFFERED or self._draw_offer_by in (None, color):
            return Transition(self._state)
        self._draw_offer = DrawOffer.ACCEPTED
        self._draw_offer_by = None
        return self._commit(machine.agree_draw(self._state), undoable=False)

    def decline_draw(self) -> None:
        self._draw_offer = DrawOffer.DECLINED
        self._draw_offer_by = None

    def check_time(self) -> Transition:
        """Poll the clock; ends the game when the mover's flag has fallen."""
        flagged = self._check_flag()
        return flagged if flagged is not None else Transition(self._state)

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        entry = self._undo_stack.pop()
        self._state = entry.state
        self._clear_selection()
        self._pending_promotion = None
        self._draw_offer = DrawOffer.NONE
        self._draw_offer_by = None
        if self._clock is not None and entry.clock is not None:
            self._clock.restore(entry.clock)
        for cb in self.events.on_state_changed:
            cb(self._state)
        return True

    def hints(self) -> list[Hint]:
        """Top suggestions for the side to move (empty when disabled)."""
        state = self._state
        if not self.hints_enabled or state.game_over or not state.selected_pieces:
            return []
        return evaluate_hints(
            state.board,
            state.current_player,
            state.selected_pieces,
            state.used_pieces_count,
            state.en_passant_target,
        )

    # ── Internal helpers ─────────────────────────────────────────────────

    def _check_flag(self) -> Transition | None:
        clock = self._clock
        state = self._state
        if clock is None or state.game_over:
            return None
        loser = clock.flagged()
        if loser is None:
            return None
        return self._commit(machine.time_up(state, loser), undoable=False)

    def _commit(self, transition: Transition, undoable: bool = True) -> Transition:
        if transition.state is self._state:
            return transition

        if undoable:
            snapshot = self._clock.snapshot() if self._clock is not None else None
            self._undo_stack.append(_UndoEntry(self._state, snapshot))
        self._state = transition.state

        if self._clock is not None:
            if self._state.game_over:
                self._clock.stop()
            elif transition.of_type(TurnChanged):
                self._clock.switch()

        if transition.of_type(MoveApplied):
            self._draw_offer = DrawOffer.NONE  # any move cancels a pending offer
            self._draw_offer_by = None
        self._notify(transition)
        return transition

    def _clear_selection(self) -> None:
        self._selected = None
        self._destinations = []

    def _notify(self, transition: Transition) -> None:
        for event in transition.events:
            for cb in self.events.on_event:
                cb(event, transition.state)
        for cb in self.events.on_state_changed:
            cb(transition.state)
