"""Tests for attack detection and allocation-aware move rules."""

from __future__ import annotations

from chessroll.core.attacks import (
    attackers_of,
    can_attack_square,
    count_attackers,
    is_in_check,
    is_path_clear,
    is_square_attacked,
)
from chessroll.core.board import Board
from chessroll.core.enums import Color, PieceType
from chessroll.core.notation import board_from_fen
from chessroll.core.piece import Piece
from chessroll.core.rules import (
    allocation_counts,
    can_make_valid_move,
    can_use_piece_type,
    iter_allowed_moves,
)
from chessroll.core.types import parse_square

sq = parse_square


class TestAttacks:
    def test_path_clear(self) -> None:
        board = Board.initial()
        assert is_path_clear(board, sq("a3"), sq("a6"))
        assert not is_path_clear(board, sq("a1"), sq("a3"))
        assert is_path_clear(board, sq("c1"), sq("d2"))  # adjacent, nothing between

    def test_pawn_attacks_diagonally_only(self) -> None:
        board = board_from_fen("4k3/8/8/8/4P3/8/8/4K3")
        pawn = board[sq("e4")]
        assert can_attack_square(board, sq("e4"), sq("d5"), pawn)
        assert can_attack_square(board, sq("e4"), sq("f5"), pawn)
        assert not can_attack_square(board, sq("e4"), sq("e5"), pawn)
        assert not can_attack_square(board, sq("e4"), sq("d3"), pawn)

    def test_slider_blocked(self) -> None:
        board = board_from_fen("4k3/8/8/8/8/8/P7/R3K3")
        rook = board[sq("a1")]
        assert not can_attack_square(board, sq("a1"), sq("a5"), rook)
        assert can_attack_square(board, sq("a1"), sq("d1"), rook)

    def test_attack_ignores_target_color(self) -> None:
        board = Board.initial()
        knight = board[sq("g1")]
        assert can_attack_square(board, sq("g1"), sq("e2"), knight)

    def test_count_attackers(self) -> None:
        board = board_from_fen("3rk3/8/8/8/8/8/8/r3K3")
        assert count_attackers(board, sq("d1"), Color.BLACK) == 2
        assert attackers_of(board, sq("d1"), Color.BLACK) == [sq("d8"), sq("a1")]
        assert is_square_attacked(board, sq("d1"), Color.BLACK)
        assert not is_square_attacked(board, sq("d5"), Color.WHITE)


class TestCheck:
    def test_initial_position_not_in_check(self) -> None:
        board = Board.initial()
        assert not is_in_check(board, Color.WHITE)
        assert not is_in_check(board, Color.BLACK)

    def test_rook_check(self) -> None:
        board = board_from_fen("4k3/8/8/8/8/8/8/4R1K1")
        assert is_in_check(board, Color.BLACK)
        assert not is_in_check(board, Color.WHITE)

    def test_blocked_check(self) -> None:
        board = board_from_fen("4k3/4p3/8/8/8/8/8/4R1K1")
        assert not is_in_check(board, Color.BLACK)

    def test_knight_check(self) -> None:
        board = board_from_fen("4k3/8/3N4/8/8/8/8/4K3")
        assert is_in_check(board, Color.BLACK)

    def test_missing_king_is_not_check(self) -> None:
        board = board_from_fen("8/8/8/8/8/8/8/R7")
        assert not is_in_check(board, Color.BLACK)


class TestAllocationUse:
    def test_allocation_counts(self) -> None:
        counts = allocation_counts([PieceType.PAWN, PieceType.PAWN, PieceType.KING])
        assert counts[PieceType.PAWN] == 2
        assert counts[PieceType.KING] == 1
        assert counts[PieceType.QUEEN] == 0

    def test_can_use_piece_type(self) -> None:
        selected = (PieceType.PAWN, PieceType.PAWN, PieceType.KNIGHT)
        assert can_use_piece_type(PieceType.PAWN, selected, {PieceType.PAWN: 1})
        assert not can_use_piece_type(PieceType.PAWN, selected, {PieceType.PAWN: 2})
        assert can_use_piece_type(PieceType.KNIGHT, selected, {})
        assert not can_use_piece_type(PieceType.QUEEN, selected, {})


class TestAllowedMoves:
    def test_knights_only(self) -> None:
        moves = list(
            iter_allowed_moves(Board.initial(), Color.WHITE, (PieceType.KNIGHT,), {})
        )
        assert [(f.name, t.name) for f, t, _ in moves] == [
            ("b1", "a3"),
            ("b1", "c3"),
            ("g1", "f3"),
            ("g1", "h3"),
        ]
        assert all(p == Piece(Color.WHITE, PieceType.KNIGHT) for _, _, p in moves)

    def test_exhausted_type_is_skipped(self) -> None:
        moves = iter_allowed_moves(
            Board.initial(),
            Color.WHITE,
            (PieceType.KNIGHT,),
            {PieceType.KNIGHT: 1},
        )
        assert list(moves) == []

    def test_pawn_moves_count(self) -> None:
        moves = list(
            iter_allowed_moves(Board.initial(), Color.BLACK, (PieceType.PAWN,), {})
        )
        assert len(moves) == 16


class TestCanMakeValidMove:
    def test_empty_allocation(self) -> None:
        assert not can_make_valid_move(Board.initial(), Color.WHITE, (), {})

    def test_boxed_in_king(self) -> None:
        board = Board.initial()
        assert not can_make_valid_move(board, Color.WHITE, (PieceType.KING,), {})
        assert not can_make_valid_move(board, Color.WHITE, (PieceType.QUEEN,), {})

    def test_pawn_allocation(self) -> None:
        assert can_make_valid_move(
            Board.initial(), Color.WHITE, (PieceType.PAWN, PieceType.KING), {}
        )

    def test_only_pinned_piece_allocated(self) -> None:
        board = board_from_fen("4r1k1/8/8/8/8/8/4B3/4K3")
        assert not can_make_valid_move(board, Color.WHITE, (PieceType.BISHOP,), {})
        assert can_make_valid_move(board, Color.WHITE, (PieceType.KING,), {})

    def test_accepts_generator_allocation(self) -> None:
        selected = (pt for pt in [PieceType.KNIGHT])
        assert can_make_valid_move(Board.initial(), Color.WHITE, selected, {})
