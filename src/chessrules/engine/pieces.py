from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Color(str, Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Rank delta a pawn of this color advances by."""
        return 1 if self is Color.WHITE else -1

    @property
    def home_rank(self) -> int:
        return 0 if self is Color.WHITE else 7

    @property
    def pawn_rank(self) -> int:
        return 1 if self is Color.WHITE else 6


class PieceKind(str, Enum):
    PAWN = "pawn"
    ROOK = "rook"
    KNIGHT = "knight"
    BISHOP = "bishop"
    QUEEN = "queen"
    KING = "king"


class CastleSide(str, Enum):
    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"


KIND_TO_CHAR = {
    PieceKind.PAWN: "p",
    PieceKind.KNIGHT: "n",
    PieceKind.BISHOP: "b",
    PieceKind.ROOK: "r",
    PieceKind.QUEEN: "q",
    PieceKind.KING: "k",
}
CHAR_TO_KIND = {v: k for k, v in KIND_TO_CHAR.items()}

# Back rank from file a to file h
BACK_RANK = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


@dataclass(frozen=True)
class Piece:
    """A chess piece.

    Attributes:
        kind (PieceKind): Movement pattern of the piece.
        color (Color): Owning side.
        has_moved (bool): Whether the piece has moved this game. Drives the
            pawn double step and castling eligibility.
    """

    kind: PieceKind
    color: Color
    has_moved: bool = False

    def moved(self) -> "Piece":
        """Return a copy of this piece flagged as moved."""
        if self.has_moved:
            return self
        return replace(self, has_moved=True)

    @property
    def symbol(self) -> str:
        """FEN letter: uppercase for white, lowercase for black."""
        ch = KIND_TO_CHAR[self.kind]
        return ch.upper() if self.color is Color.WHITE else ch

    @classmethod
    def from_symbol(cls, ch: str, has_moved: bool = False) -> "Piece":
        """Build a piece from its FEN letter.

        Raises:
            ValueError: If ``ch`` is not one of ``pnbrqkPNBRQK``.
        """
        kind = CHAR_TO_KIND.get(ch.lower())
        if kind is None or len(ch) != 1:
            raise ValueError(f"invalid piece symbol: {ch!r}")
        color = Color.WHITE if ch.isupper() else Color.BLACK
        return cls(kind, color, has_moved)
