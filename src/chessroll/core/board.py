"""Board - immutable piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping

from chessroll.core.enums import Color, PieceType
from chessroll.core.piece import Piece
from chessroll.core.types import Position

Grid = tuple[tuple[Piece | None, ...], ...]

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

_EMPTY_ROW: tuple[Piece | None, ...] = (None,) * 8


class Board:
    """Copy-on-write 8x8 board indexed ``[row][col]``.

    A board never changes after construction; :meth:`replace` builds a new
    one.
    """

    __slots__ = ("_grid",)

    def __init__(self, grid: Grid | None = None) -> None:
        if grid is None:
            grid = (_EMPTY_ROW,) * 8
        if len(grid) != 8 or any(len(row) != 8 for row in grid):
            raise ValueError("Board grid must be 8x8")
        self._grid: Grid = tuple(tuple(row) for row in grid)

    # -- Element access -----------------------------------------------------

    def __getitem__(self, pos: Position) -> Piece | None:
        if not pos.is_on_board:
            return None
        return self._grid[pos.row][pos.col]

    def is_empty(self, pos: Position) -> bool:
        return self[pos] is None

    @property
    def rows(self) -> Grid:
        return self._grid

    def __iter__(self) -> Iterator[tuple[Position, Piece]]:
        """Occupied squares in row-major order."""
        for row, cells in enumerate(self._grid):
            for col, piece in enumerate(cells):
                if piece is not None:
                    yield Position(row, col), piece

    # -- Query helpers ------------------------------------------------------

    def find_piece(
        self, predicate: Callable[[Piece], bool]
    ) -> tuple[Position, Piece] | None:
        """First occupied square (row-major) whose piece satisfies *predicate*."""
        for pos, piece in self:
            if predicate(piece):
                return pos, piece
        return None

    def pieces_of(self, color: Color) -> list[tuple[Position, Piece]]:
        """All of *color*'s pieces with their squares, in scan order."""
        return [(pos, piece) for pos, piece in self if piece.color == color]

    def king_position(self, color: Color) -> Position | None:
        """Square of *color*'s king, or ``None`` if it is missing."""
        found = self.find_piece(lambda p: p.is_a(color, PieceType.KING))
        return found[0] if found is not None else None

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return self.find_piece(lambda p: p.is_a(color, piece_type)) is not None

    def count(self, color: Color, piece_type: PieceType) -> int:
        return sum(1 for _, p in self if p.is_a(color, piece_type))

    # -- Copying ------------------------------------------------------------

    def replace(self, changes: Mapping[Position, Piece | None]) -> Board:
        """New board with the given squares overwritten (``None`` clears)."""
        grid = [list(row) for row in self._grid]
        for pos, piece in changes.items():
            if not pos.is_on_board:
                raise ValueError(f"Square off the board: {pos!r}")
            grid[pos.row][pos.col] = piece
        return Board(tuple(tuple(row) for row in grid))

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position (black on rows 0-1, white on rows 6-7)."""
        grid: list[tuple[Piece | None, ...]] = [_EMPTY_ROW] * 8
        grid[0] = tuple(Piece(Color.BLACK, pt) for pt in _BACK_RANK)
        grid[1] = tuple(Piece(Color.BLACK, PieceType.PAWN) for _ in range(8))
        grid[6] = tuple(Piece(Color.WHITE, PieceType.PAWN) for _ in range(8))
        grid[7] = tuple(Piece(Color.WHITE, pt) for pt in _BACK_RANK)
        return cls(tuple(grid))

    @classmethod
    def empty(cls) -> Board:
        return cls()

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __hash__(self) -> int:
        return hash(self._grid)

    def __repr__(self) -> str:
        rows: list[str] = []
        for row_idx, cells in enumerate(self._grid):
            row = [str(p) if p else "." for p in cells]
            rows.append(f"{8 - row_idx} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)


def create_initial_board() -> Board:
    """Standard starting position."""
    return Board.initial()
