"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass, replace

from chessroll.core.enums import Color, PieceType

# Letter used in move strings; pawns have none.
PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

# FEN letters: uppercase white, lowercase black.
_FEN_CHARS: dict[tuple[Color, PieceType], str] = {}
for _pt, _letter in PIECE_LETTERS.items():
    _upper = _letter or "P"
    _FEN_CHARS[(Color.WHITE, _pt)] = _upper
    _FEN_CHARS[(Color.BLACK, _pt)] = _upper.lower()
del _pt, _letter, _upper

_FROM_FEN: dict[str, tuple[Color, PieceType]] = {v: k for k, v in _FEN_CHARS.items()}

# White glyphs start at U+2654 (king) and run down to the pawn; black follows.
_GLYPH_ORDER = (
    PieceType.KING,
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.PAWN,
)


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object representing a chess piece.

    ``has_moved`` only matters for castling (kings and rooks) but is kept
    up to date for every piece type.
    """

    color: Color
    piece_type: PieceType
    has_moved: bool = False

    def moved(self) -> Piece:
        """Copy of this piece flagged as having moved."""
        if self.has_moved:
            return self
        return replace(self, has_moved=True)

    def promoted(self, piece_type: PieceType) -> Piece:
        return Piece(self.color, piece_type, has_moved=True)

    def is_a(self, color: Color, piece_type: PieceType) -> bool:
        return self.color == color and self.piece_type == piece_type

    def __str__(self) -> str:
        """FEN character, e.g. ``N`` for a white knight."""
        return _FEN_CHARS[(self.color, self.piece_type)]

    @classmethod
    def from_char(cls, char: str, has_moved: bool = False) -> Piece:
        try:
            color, piece_type = _FROM_FEN[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, piece_type, has_moved)

    @property
    def symbol(self) -> str:
        """Unicode chess glyph, e.g. ``♞`` for a black knight."""
        offset = _GLYPH_ORDER.index(self.piece_type) + 6 * self.color
        return chr(0x2654 + offset)
