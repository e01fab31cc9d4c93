"""Turn and allocation state machine.

Every function here is a pure transition: it takes a :class:`GameState`
and returns a :class:`Transition` holding the next state and the events
that happened. A refused action returns the very same state object with
no events, so the caller can simply re-render.

Turn flow::

    turn active --move--> turn active        (budget left, no check given)
    turn active --move--> next side's turn   (budget spent or check given)
    next side's turn ---> game over          (checkmate, reroll exception)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from chessroll.core.allocation import (
    PIECE_WEIGHTS,
    Allocation,
    RandomSource,
    roll_pieces,
)
from chessroll.core.attacks import is_in_check
from chessroll.core.board import Board
from chessroll.core.enums import Color, GameResult, PieceType
from chessroll.core.move import Move
from chessroll.core.movement import (
    PROMOTION_TYPES,
    apply_move,
    captured_piece,
    en_passant_target_after,
    is_legal_move,
    is_promotion_move,
)
from chessroll.core.movement import legal_destinations as board_destinations
from chessroll.core.notation import move_notation
from chessroll.core.rules import can_make_valid_move, can_use_piece_type
from chessroll.core.types import Position
from chessroll.game.events import (
    BonusTriggered,
    GameEvent,
    GameOver,
    MoveApplied,
    PromotionRequired,
    Rerolled,
    TurnChanged,
)
from chessroll.game.interfaces import GameEndReason
from chessroll.game.modes import GameMode, ModeConfig, mode_config
from chessroll.game.state import GameState, empty_usage

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Transition:
    """Outcome of a state-machine call. Unhashable, like its state."""

    __hash__ = None  # type: ignore[assignment]

    state: GameState
    events: tuple[GameEvent, ...] = ()

    @property
    def accepted(self) -> bool:
        return bool(self.events)

    def of_type(self, event_type: type) -> list[GameEvent]:
        return [event for event in self.events if isinstance(event, event_type)]


@dataclass(frozen=True, slots=True)
class TurnGroup:
    """Moves one side made during a single turn."""

    number: int
    color: Color
    moves: list[Move] = field(default_factory=list)


def _refuse(state: GameState, why: str) -> Transition:
    _LOGGER.debug("Refused: %s", why)
    return Transition(state)


def _roll(
    board: Board, color: Color, config: ModeConfig, rng: RandomSource | None
) -> Allocation:
    weights = PIECE_WEIGHTS if config.weighted else None
    return roll_pieces(board, color, config.pieces_to_roll, rng, weights)


# ── Game setup ───────────────────────────────────────────────────────────────


def new_game(
    mode: GameMode = GameMode.CLASSIC,
    rng: RandomSource | None = None,
    *,
    board: Board | None = None,
    config: ModeConfig | None = None,
) -> Transition:
    """Fresh game with white to move and white's opening allocation.

    The opening roll never grants the triple bonus; bonuses come with
    turn changes and rerolls.
    """
    config = config or mode_config(mode)
    board = board if board is not None else Board.initial()
    allocation = _roll(board, Color.WHITE, config, rng)
    state = GameState(
        board=board,
        mode=mode,
        config=config,
        selected_pieces=allocation.pieces,
        moves_remaining=config.moves_per_turn,
        rerolls_left={
            Color.WHITE: config.rerolls_per_player,
            Color.BLACK: config.rerolls_per_player,
        },
        is_in_check=is_in_check(board, Color.WHITE),
    )
    _LOGGER.debug("New %s game", mode)
    return check_for_checkmate(state)


# ── Queries ──────────────────────────────────────────────────────────────────


def is_piece_selectable(state: GameState, position: Position) -> bool:
    """Whether the side to move may pick up the piece on *position*."""
    if state.game_over or not position.is_on_board:
        return False
    piece = state.board[position]
    if piece is None or piece.color != state.current_player:
        return False
    return can_use_piece_type(
        piece.piece_type, state.selected_pieces, state.used_pieces_count
    )


def legal_destinations(state: GameState, position: Position) -> list[Position]:
    """Squares the piece on *position* may move to right now."""
    if not is_piece_selectable(state, position):
        return []
    return board_destinations(state.board, position, state.en_passant_target)


def needs_promotion(state: GameState, from_pos: Position, to_pos: Position) -> bool:
    piece = state.board[from_pos]
    return piece is not None and is_promotion_move(piece, to_pos)


def has_valid_move(state: GameState) -> bool:
    return can_make_valid_move(
        state.board,
        state.current_player,
        state.selected_pieces,
        state.used_pieces_count,
        state.en_passant_target,
    )


def is_reroll_window(state: GameState) -> bool:
    """No move has been made yet this turn."""
    return state.moves_remaining == state.config.moves_per_turn and all(
        count == 0 for count in state.used_pieces_count.values()
    )


def can_reroll(state: GameState) -> bool:
    return (
        not state.game_over
        and is_reroll_window(state)
        and state.rerolls_for(state.current_player) > 0
    )


def can_skip_turn(state: GameState) -> bool:
    return not state.game_over and not state.is_in_check and not has_valid_move(state)


# ── Transitions ──────────────────────────────────────────────────────────────


def make_move(
    state: GameState,
    from_pos: Position,
    to_pos: Position,
    promotion: PieceType | None = None,
    rng: RandomSource | None = None,
) -> Transition:
    """Play one move of the current turn.

    The turn ends when the move gives check, even with budget left, or
    when the move budget is spent.
    """
    if not is_piece_selectable(state, from_pos):
        return _refuse(state, f"piece on {from_pos} is not available")
    if not is_legal_move(state.board, from_pos, to_pos, state.en_passant_target):
        return _refuse(state, f"{from_pos}-{to_pos} is not legal")

    piece = state.board[from_pos]
    assert piece is not None
    if is_promotion_move(piece, to_pos):
        if promotion is None:
            return Transition(state, (PromotionRequired(from_pos, to_pos),))
        if promotion not in PROMOTION_TYPES:
            return _refuse(state, f"cannot promote to {promotion}")
    else:
        promotion = None

    board = apply_move(state.board, from_pos, to_pos, promotion)
    captured = captured_piece(state.board, from_pos, to_pos)
    opponent = state.opponent
    gives_check = is_in_check(board, opponent)

    used = dict(state.used_pieces_count)
    used[piece.piece_type] = used.get(piece.piece_type, 0) + 1
    moves_remaining = state.moves_remaining - 1
    turn_change = gives_check or moves_remaining <= 0

    move = Move(
        from_pos=from_pos,
        to_pos=to_pos,
        piece=piece,
        notation=move_notation(from_pos, to_pos, piece, captured, promotion),
        captured=captured,
        promotion=promotion,
        is_check=gives_check,
        turn_change=turn_change,
    )
    _LOGGER.debug("%s plays %s (check=%s)", state.current_player, move, gives_check)
    history = state.move_history + (move,)
    applied = MoveApplied(move)

    if turn_change:
        nxt = _start_turn(
            state.evolve(board=board, move_history=history), opponent, rng
        )
        return Transition(nxt.state, (applied,) + nxt.events)

    next_state = state.evolve(
        board=board,
        used_pieces_count=used,
        moves_remaining=moves_remaining,
        move_history=history,
        en_passant_target=en_passant_target_after(from_pos, to_pos, piece),
        is_in_check=False,
    )
    return Transition(next_state, (applied,))


def reroll(state: GameState, rng: RandomSource | None = None) -> Transition:
    """Spend a reroll on a fresh allocation before the first move of a turn.

    A triple in the new roll refunds a reroll right away.
    """
    if not can_reroll(state):
        return _refuse(state, f"{state.current_player} may not reroll now")

    color = state.current_player
    allocation = _roll(state.board, color, state.config, rng)
    rerolls = dict(state.rerolls_left)
    rerolls[color] -= 1
    events: list[GameEvent] = [Rerolled(color, allocation.pieces)]
    if allocation.triple_type is not None:
        rerolls[color] += 1
        events.append(BonusTriggered(allocation.triple_type, color))

    _LOGGER.debug("%s rerolled, %d left", color, rerolls[color])
    next_state = state.evolve(
        selected_pieces=allocation.pieces,
        used_pieces_count=empty_usage(),
        rerolls_left=rerolls,
    )
    checked = check_for_checkmate(next_state)
    return Transition(checked.state, tuple(events) + checked.events)


def skip_turn(state: GameState, rng: RandomSource | None = None) -> Transition:
    """Pass the turn when no allocated piece can move and the king is safe."""
    if not can_skip_turn(state):
        return _refuse(state, f"{state.current_player} may not skip")
    return _start_turn(state, state.opponent, rng)


def check_for_checkmate(state: GameState) -> Transition:
    """End the game if the side to move is checkmated.

    Checkmate needs check, no allocated legal move, and no usable reroll.
    Whether a reroll could actually find a saving move is not examined.
    """
    if state.game_over or not state.is_in_check:
        return Transition(state)
    if has_valid_move(state) or can_reroll(state):
        return Transition(state)
    _LOGGER.info("%s is checkmated", state.current_player)
    return _finish(state, state.opponent, GameEndReason.CHECKMATE)


def time_up(state: GameState, color: Color) -> Transition:
    """*color* ran out of time (reported by an external clock)."""
    if state.game_over:
        return _refuse(state, "game already over")
    return _finish(state, color.opposite, GameEndReason.TIME_UP)


def resign(state: GameState, color: Color) -> Transition:
    if state.game_over:
        return _refuse(state, "game already over")
    return _finish(state, color.opposite, GameEndReason.RESIGNATION)


def agree_draw(state: GameState) -> Transition:
    if state.game_over:
        return _refuse(state, "game already over")
    return _finish(state, None, GameEndReason.DRAW_AGREED)


# ── History ──────────────────────────────────────────────────────────────────


def group_turns(history: tuple[Move, ...] | list[Move]) -> list[TurnGroup]:
    """Split a move history into turns using each move's ``turn_change``.

    Turn numbers count full rounds, so white's and black's first turns
    are both number 1.
    """
    groups: list[TurnGroup] = []
    starts_new_turn = True
    for move in history:
        if starts_new_turn:
            groups.append(TurnGroup((len(groups) + 2) // 2, move.color))
        groups[-1].moves.append(move)
        starts_new_turn = move.turn_change
    return groups


# ── Internal ─────────────────────────────────────────────────────────────────


def _start_turn(state: GameState, color: Color, rng: RandomSource | None) -> Transition:
    """Hand the turn to *color* with a fresh allocation."""
    allocation = _roll(state.board, color, state.config, rng)
    events: list[GameEvent] = [TurnChanged(color)]
    rerolls = dict(state.rerolls_left)
    if allocation.triple_type is not None:
        rerolls[color] = rerolls.get(color, 0) + 1
        events.append(BonusTriggered(allocation.triple_type, color))
        _LOGGER.debug("%s earned a bonus reroll", color)

    next_state = state.evolve(
        current_player=color,
        selected_pieces=allocation.pieces,
        used_pieces_count=empty_usage(),
        moves_remaining=state.config.moves_per_turn,
        rerolls_left=rerolls,
        en_passant_target=None,
        is_in_check=is_in_check(state.board, color),
    )
    _LOGGER.debug("Turn passes to %s", color)
    checked = check_for_checkmate(next_state)
    return Transition(checked.state, tuple(events) + checked.events)


def _finish(state: GameState, winner: Color | None, reason: GameEndReason) -> Transition:
    result = GameResult.DRAW if winner is None else GameResult.win_for(winner)
    _LOGGER.info("Game over: %s (%s)", result.name, reason.name)
    return Transition(
        state.evolve(result=result, end_reason=reason),
        (GameOver(winner, reason),),
    )
