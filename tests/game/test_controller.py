"""Tests for GameController, the stateful orchestrator."""

from __future__ import annotations

from chessroll.core.board import Board
from chessroll.core.enums import Color, GameResult, PieceType
from chessroll.core.notation import board_from_fen
from chessroll.core.types import parse_square
from chessroll.game.controller import GameController
from chessroll.game.events import GameOver, MoveApplied, Rerolled, TurnChanged
from chessroll.game.interfaces import DrawOffer, GameEndReason
from chessroll.game.modes import GameMode

P, N, B, Q, K = (
    PieceType.PAWN,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
)
sq = parse_square


def _controller(scripted, draws, fake_time, *pieces, mode=GameMode.CLASSIC):
    board = Board.initial()
    values = draws(board, Color.WHITE, *pieces) + draws(board, Color.BLACK, P, N, B)
    ctrl = GameController(rng=scripted(values), now=fake_time)
    ctrl.new_game(mode)
    return ctrl


class TestNewGame:
    def test_clock_starts_for_white(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        assert ctrl.clock is not None
        assert ctrl.clock.is_running
        assert ctrl.clock.active_color == Color.WHITE
        assert ctrl.clock.remaining(Color.WHITE) == 600.0
        assert ctrl.state.selected_pieces == (P, P, N)
        assert not ctrl.can_undo

    def test_blitz_uses_turn_budget(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N, mode=GameMode.BLITZ)
        assert ctrl.clock is not None
        assert ctrl.clock.remaining(Color.WHITE) == 30.0


class TestSelection:
    def test_click_selects_and_moves(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        ctrl.click(sq("e2"))
        assert ctrl.selected_square == sq("e2")
        assert ctrl.destinations == [sq("e4"), sq("e3")]

        t = ctrl.click(sq("e4"))
        assert t.accepted
        assert ctrl.selected_square is None
        assert ctrl.state.board[sq("e4")] is not None

    def test_click_unallocated_clears(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        ctrl.click(sq("e2"))
        ctrl.click(sq("c1"))
        assert ctrl.selected_square is None
        assert ctrl.destinations == []


class TestTurnsAndClock:
    def test_turn_change_switches_clock(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N, mode=GameMode.BLITZ)
        fake_time.advance(10)
        ctrl.submit_move(sq("e2"), sq("e4"))
        ctrl.submit_move(sq("g1"), sq("f3"))
        t = ctrl.submit_move(sq("d2"), sq("d4"))
        assert t.of_type(TurnChanged) == [TurnChanged(Color.BLACK)]
        assert ctrl.clock is not None
        assert ctrl.clock.active_color == Color.BLACK
        assert ctrl.clock.remaining(Color.BLACK) == 30.0
        assert ctrl.clock.remaining(Color.WHITE) == 20.0

    def test_flag_fall_ends_game(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        fake_time.advance(601)
        t = ctrl.submit_move(sq("e2"), sq("e4"))
        assert t.events == (GameOver(Color.BLACK, GameEndReason.TIME_UP),)
        assert ctrl.state.result == GameResult.BLACK_WINS
        assert ctrl.state.move_history == ()
        assert ctrl.clock is not None
        assert not ctrl.clock.is_running

    def test_check_time(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N, mode=GameMode.BLITZ)
        fake_time.advance(10)
        assert not ctrl.check_time().accepted
        fake_time.advance(25)
        assert ctrl.check_time().events == (
            GameOver(Color.BLACK, GameEndReason.TIME_UP),
        )


class TestUndo:
    def test_undo_restores_state_and_clock(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        before = ctrl.state
        fake_time.advance(5)
        ctrl.submit_move(sq("e2"), sq("e4"))
        fake_time.advance(10)
        assert ctrl.can_undo
        assert ctrl.undo()
        assert ctrl.state is before
        assert ctrl.clock is not None
        assert ctrl.clock.remaining(Color.WHITE) == 595.0
        assert not ctrl.can_undo
        assert not ctrl.undo()

    def test_undo_reroll(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        t = ctrl.reroll()
        assert t.of_type(Rerolled)
        assert ctrl.state.rerolls_for(Color.WHITE) == 1
        ctrl.undo()
        assert ctrl.state.rerolls_for(Color.WHITE) == 2

    def test_no_undo_after_resign(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        ctrl.submit_move(sq("e2"), sq("e4"))
        ctrl.resign(Color.WHITE)
        assert ctrl.state.winner == Color.BLACK
        assert not ctrl.can_undo


class TestPromotionFlow:
    def test_choose_promotion(self, scripted, draws, fake_time) -> None:
        board = board_from_fen("8/P7/8/8/8/7k/8/4K3")
        ctrl = GameController(
            rng=scripted(draws(board, Color.WHITE, P, P, K)), now=fake_time
        )
        ctrl.new_game(board=board)
        ctrl.submit_move(sq("a7"), sq("a8"))
        assert ctrl.pending_promotion is not None
        assert ctrl.state.move_history == ()

        t = ctrl.choose_promotion(Q)
        assert t.of_type(MoveApplied)
        assert ctrl.pending_promotion is None
        assert ctrl.state.last_move is not None
        assert ctrl.state.last_move.notation == "a7a8=Q"

    def test_cancel_promotion(self, scripted, draws, fake_time) -> None:
        board = board_from_fen("8/P7/8/8/8/7k/8/4K3")
        ctrl = GameController(
            rng=scripted(draws(board, Color.WHITE, P, P, K)), now=fake_time
        )
        ctrl.new_game(board=board)
        ctrl.submit_move(sq("a7"), sq("a8"))
        ctrl.cancel_promotion()
        assert ctrl.pending_promotion is None
        assert not ctrl.choose_promotion(Q).accepted

    def test_refused_choice_keeps_prompt(self, scripted, draws, fake_time) -> None:
        board = board_from_fen("8/P7/8/8/8/7k/8/4K3")
        ctrl = GameController(
            rng=scripted(draws(board, Color.WHITE, P, P, K)), now=fake_time
        )
        ctrl.new_game(board=board)
        ctrl.submit_move(sq("a7"), sq("a8"))
        pending = ctrl.pending_promotion

        t = ctrl.choose_promotion(K)
        assert not t.accepted
        assert ctrl.pending_promotion == pending
        assert ctrl.state.move_history == ()

        assert ctrl.choose_promotion(N).of_type(MoveApplied)
        assert ctrl.pending_promotion is None


class TestDraws:
    def test_opponent_accepts(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        ctrl.offer_draw(Color.WHITE)
        assert ctrl.draw_offer == DrawOffer.OFFERED
        assert not ctrl.accept_draw(Color.WHITE).accepted
        t = ctrl.accept_draw(Color.BLACK)
        assert t.events == (GameOver(None, GameEndReason.DRAW_AGREED),)
        assert ctrl.state.result == GameResult.DRAW
        assert ctrl.draw_offer == DrawOffer.ACCEPTED

    def test_move_cancels_offer(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        ctrl.offer_draw(Color.BLACK)
        ctrl.submit_move(sq("e2"), sq("e4"))
        assert ctrl.draw_offer == DrawOffer.NONE
        assert not ctrl.accept_draw(Color.WHITE).accepted

    def test_decline(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        ctrl.offer_draw(Color.WHITE)
        ctrl.decline_draw()
        assert ctrl.draw_offer == DrawOffer.DECLINED
        assert not ctrl.state.game_over

    def test_undo_withdraws_offer(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        ctrl.submit_move(sq("e2"), sq("e4"))
        ctrl.offer_draw(Color.WHITE)
        assert ctrl.undo()
        assert ctrl.draw_offer == DrawOffer.NONE
        assert not ctrl.accept_draw(Color.BLACK).accepted
        assert not ctrl.state.game_over


class TestSkipAndEvents:
    def test_skip_turn(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, K, K, Q)
        t = ctrl.skip_turn()
        assert t.events == (TurnChanged(Color.BLACK),)
        assert ctrl.state.current_player == Color.BLACK
        assert ctrl.clock is not None
        assert ctrl.clock.active_color == Color.BLACK

    def test_callbacks_receive_events(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        seen: list[type] = []
        states: list[object] = []
        ctrl.events.on_event.append(lambda event, state: seen.append(type(event)))
        ctrl.events.on_state_changed.append(states.append)

        ctrl.submit_move(sq("e2"), sq("e4"))
        assert seen == [MoveApplied]
        assert states == [ctrl.state]

    def test_refused_move_does_not_notify(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        states: list[object] = []
        ctrl.events.on_state_changed.append(states.append)
        ctrl.submit_move(sq("c1"), sq("e3"))
        assert states == []


class TestHints:
    def test_hints_for_allocation(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, N, N, N)
        hints = ctrl.hints()
        assert len(hints) == 3
        assert all(h.piece.piece_type == N for h in hints)

    def test_disabled_hints(self, scripted, draws, fake_time) -> None:
        ctrl = _controller(scripted, draws, fake_time, P, P, N)
        ctrl.hints_enabled = False
        assert ctrl.hints() == []
