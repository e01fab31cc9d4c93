"""Core domain layer: pure chess rules with zero external dependencies.

Quick start::

    from chessroll.core import Board, Color, legal_destinations, parse_square

    board = Board.initial()
    for dest in legal_destinations(board, parse_square("g1")):
        print(dest)
"""

from chessroll.core.allocation import (
    PIECE_WEIGHTS,
    Allocation,
    RandomSource,
    available_piece_types,
    find_triple,
    roll_pieces,
)
from chessroll.core.attacks import count_attackers, is_in_check
from chessroll.core.board import Board, create_initial_board
from chessroll.core.enums import Color, GameResult, PieceType
from chessroll.core.move import Move
from chessroll.core.movement import (
    PROMOTION_TYPES,
    apply_move,
    can_castle,
    en_passant_target_after,
    is_legal_move,
    is_valid_move,
    legal_destinations,
)
from chessroll.core.notation import (
    STARTING_FEN,
    board_from_fen,
    board_to_fen,
    move_notation,
)
from chessroll.core.piece import Piece
from chessroll.core.rules import can_make_valid_move, can_use_piece_type
from chessroll.core.types import Position, parse_square, square_name

__all__ = [
    # Enums
    "Color",
    "GameResult",
    "PieceType",
    # Types / helpers
    "Position",
    "parse_square",
    "square_name",
    # Domain objects
    "Allocation",
    "Board",
    "Move",
    "Piece",
    "RandomSource",
    # Rules
    "PIECE_WEIGHTS",
    "PROMOTION_TYPES",
    "apply_move",
    "available_piece_types",
    "can_castle",
    "can_make_valid_move",
    "can_use_piece_type",
    "count_attackers",
    "create_initial_board",
    "en_passant_target_after",
    "find_triple",
    "is_in_check",
    "is_legal_move",
    "is_valid_move",
    "legal_destinations",
    "roll_pieces",
    # Notation
    "STARTING_FEN",
    "board_from_fen",
    "board_to_fen",
    "move_notation",
]
