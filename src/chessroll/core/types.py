"""Board coordinates and square-name helpers.

Board layout (row-major, row 0 at the top)::

    row 0 -> rank 8 (black's back rank)
    row 7 -> rank 1 (white's back rank)
    col 0 -> file a, col 7 -> file h
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """A board coordinate. May lie off the board; check :attr:`is_on_board`."""

    row: int
    col: int

    @property
    def is_on_board(self) -> bool:
        return 0 <= self.row < 8 and 0 <= self.col < 8

    @property
    def name(self) -> str:
        """Human-readable square name, e.g. ``Position(4, 4)`` -> ``'e4'``."""
        return square_name(self)

    def offset(self, drow: int, dcol: int) -> Position:
        return Position(self.row + drow, self.col + dcol)

    def __str__(self) -> str:
        return self.name if self.is_on_board else f"({self.row}, {self.col})"


def square_name(pos: Position) -> str:
    """Square name using ``file = 'a' + col`` and ``rank = 8 - row``."""
    return chr(ord("a") + pos.col) + str(8 - pos.row)


def parse_square(name: str) -> Position:
    """Parse square name, e.g. 'e4' -> Position(4, 4)."""
    if len(name) != 2 or name[0] not in "abcdefgh" or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return Position(8 - int(name[1]), ord(name[0]) - ord("a"))


def all_positions() -> list[Position]:
    """Every square in row-major scan order."""
    return [Position(row, col) for row in range(8) for col in range(8)]


ALL_POSITIONS: tuple[Position, ...] = tuple(all_positions())
