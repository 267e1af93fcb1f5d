from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import InvalidSquare
from .pieces import CastleSide


@dataclass(frozen=True, order=True)
class Square:
    """Board coordinate.

    Attributes:
        file (int): 0..7 for files a..h.
        rank (int): 0..7 for ranks 1..8 (white's back rank is 0).

    Raises:
        InvalidSquare: If either coordinate falls outside ``[0, 8)``.
    """

    file: int
    rank: int

    def __post_init__(self) -> None:
        if not (0 <= self.file < 8 and 0 <= self.rank < 8):
            raise InvalidSquare(f"square out of range: ({self.file}, {self.rank})")

    def offset(self, df: int, dr: int) -> Optional["Square"]:
        """Return the square ``(df, dr)`` away, or ``None`` off the board."""
        f = self.file + df
        r = self.rank + dr
        if 0 <= f < 8 and 0 <= r < 8:
            return Square(f, r)
        return None

    def __str__(self) -> str:
        return square_to_str(self)


@dataclass(frozen=True)
class Move:
    """Engine move.

    Attributes:
        from_sq (Square): Origin square.
        to_sq (Square): Destination square.
        is_castle (bool): King move that also relocates a rook.
        castle_side (Optional[CastleSide]): Side of the castle, if any.
    """

    from_sq: Square
    to_sq: Square
    is_castle: bool = False
    castle_side: Optional[CastleSide] = None

    def to_uci(self) -> str:
        """Serialize the move into long algebraic form like ``"e2e4"``."""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq)

    def same_path(self, from_sq: Square, to_sq: Square) -> bool:
        return self.from_sq == from_sq and self.to_sq == to_sq


def parse_uci(uci: str) -> Move:
    """Parse a long algebraic move string.

    Args:
        uci (str): Move such as ``"e2e4"``.

    Returns:
        Move: Move with only ``from_sq``/``to_sq`` set. Castle flags are
            resolved by matching against generated moves.

    Raises:
        InvalidSquare: If the string is not four characters naming two
            valid squares. Promotion suffixes are not accepted.
    """
    if len(uci) != 4:
        raise InvalidSquare(f"invalid move string: {uci!r}")
    return Move(str_to_square(uci[0:2]), str_to_square(uci[2:4]))


def str_to_square(s: str) -> Square:
    """Convert algebraic notation (``"e4"``) into a Square.

    Raises:
        InvalidSquare: If ``s`` is not a valid square name.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise InvalidSquare(f"invalid square: {s!r}")
    return Square(ord(s[0]) - ord("a"), int(s[1]) - 1)


def square_to_str(sq: Square) -> str:
    return chr(ord("a") + sq.file) + str(sq.rank + 1)

