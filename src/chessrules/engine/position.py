from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from .errors import InvariantViolation, NoPieceAtSquare
from .move import Move, Square
from .pieces import BACK_RANK, CastleSide, Color, Piece, PieceKind


# King destination file and rook (origin, destination) files per castle side
CASTLE_KING_FILE = {CastleSide.KINGSIDE: 6, CastleSide.QUEENSIDE: 2}
CASTLE_ROOK_FILES = {CastleSide.KINGSIDE: (7, 5), CastleSide.QUEENSIDE: (0, 3)}


def castle_rook_squares(king_from: Square, side: CastleSide) -> Tuple[Square, Square]:
    """Return the rook's (origin, destination) for a castle from ``king_from``.

    The rook starts on the canonical corner of the king's rank and lands on
    the square immediately beside the king's destination.
    """
    direction = 1 if side is CastleSide.KINGSIDE else -1
    rook_from = Square(CASTLE_ROOK_FILES[side][0], king_from.rank)
    rook_to = Square(king_from.file + direction, king_from.rank)
    return rook_from, rook_to


class Position:
    """Authoritative board state: an occupancy map from Square to Piece.

    Notes:
    - Squares absent from the map are empty.
    - Pieces are immutable; ``has_moved`` changes replace the piece on its
      square, so copies may share piece objects.
    """

    __slots__ = ("_pieces",)

    def __init__(self, pieces: Optional[Dict[Square, Piece]] = None) -> None:
        self._pieces: Dict[Square, Piece] = dict(pieces) if pieces else {}

    @classmethod
    def startpos(cls) -> "Position":
        """Create the standard starting arrangement with every piece unmoved."""
        pos = cls()
        for color in (Color.WHITE, Color.BLACK):
            for file_idx, kind in enumerate(BACK_RANK):
                pos.place(Square(file_idx, color.home_rank), Piece(kind, color))
                pos.place(Square(file_idx, color.pawn_rank), Piece(PieceKind.PAWN, color))
        return pos

    # --- Queries ---
    def get(self, sq: Square) -> Optional[Piece]:
        return self._pieces.get(sq)

    def is_empty(self, sq: Square) -> bool:
        return sq not in self._pieces

    def is_enemy(self, sq: Square, color: Color) -> bool:
        """Return True if ``sq`` holds a piece of the side opposing ``color``."""
        piece = self._pieces.get(sq)
        return piece is not None and piece.color is not color

    def pieces(self, color: Optional[Color] = None) -> List[Tuple[Square, Piece]]:
        """Return ``(square, piece)`` pairs, optionally filtered by color.

        The result is a snapshot, sorted by rank then file, so callers may
        mutate the position while iterating it.
        """
        items = [
            (sq, p) for sq, p in self._pieces.items() if color is None or p.color is color
        ]
        items.sort(key=lambda item: (item[0].rank, item[0].file))
        return items

    def king_square(self, color: Color) -> Optional[Square]:
        """Return the square of ``color``'s king, or ``None`` if it has none.

        Raises:
            InvariantViolation: If ``color`` has more than one king.
        """
        found: Optional[Square] = None
        for sq, p in self._pieces.items():
            if p.kind is PieceKind.KING and p.color is color:
                if found is not None:
                    raise InvariantViolation(f"{color.value} has more than one king")
                found = sq
        return found

    def copy(self) -> "Position":
        return Position(self._pieces)

    def __iter__(self) -> Iterator[Tuple[Square, Piece]]:
        return iter(self.pieces())

    def __len__(self) -> int:
        return len(self._pieces)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self._pieces == other._pieces

    # --- Mutation ---
    def place(self, sq: Square, piece: Piece) -> Optional[Piece]:
        """Put ``piece`` on ``sq``, returning whatever it displaced."""
        prev = self._pieces.get(sq)
        self._pieces[sq] = piece
        return prev

    def remove(self, sq: Square) -> Optional[Piece]:
        return self._pieces.pop(sq, None)

    def relocate(self, from_sq: Square, to_sq: Square) -> Optional[Piece]:
        """Move the piece on ``from_sq`` to ``to_sq`` without touching flags.

        Returns:
            Optional[Piece]: The piece removed from ``to_sq``, if any.

        Raises:
            NoPieceAtSquare: If ``from_sq`` is empty.
        """
        piece = self._pieces.pop(from_sq, None)
        if piece is None:
            raise NoPieceAtSquare(f"no piece on {from_sq}")
        captured = self._pieces.get(to_sq)
        self._pieces[to_sq] = piece
        return captured

    def apply_move(self, move: Move) -> Optional[Piece]:
        """Apply ``move`` in place and return the captured piece, if any.

        The mover is flagged as moved. A castle also moves the rook beside
        the king's destination and flags it, within the same call; the rook
        presence is checked before anything is touched so a castle is never
        half applied.
        """
        rook_path: Optional[Tuple[Square, Square]] = None
        if move.is_castle:
            if move.castle_side is None:
                raise InvariantViolation("castle move without a side")
            rook_path = castle_rook_squares(move.from_sq, move.castle_side)
            rook = self._pieces.get(rook_path[0])
            if rook is None or rook.kind is not PieceKind.ROOK:
                raise NoPieceAtSquare(f"no rook on {rook_path[0]} to castle with")

        captured = self.relocate(move.from_sq, move.to_sq)
        self._pieces[move.to_sq] = self._pieces[move.to_sq].moved()
        if rook_path is not None:
            rook_from, rook_to = rook_path
            self.relocate(rook_from, rook_to)
            self._pieces[rook_to] = self._pieces[rook_to].moved()
        return captured

    def simulate(self, move: Move) -> "Position":
        """Return a scratch copy with ``move`` played; ``self`` is untouched.

        ``has_moved`` flags are left as they are: the copy only answers
        attack questions.
        """
        scratch = self.copy()
        scratch.relocate(move.from_sq, move.to_sq)
        if move.is_castle and move.castle_side is not None:
            rook_from, rook_to = castle_rook_squares(move.from_sq, move.castle_side)
            if not scratch.is_empty(rook_from):
                scratch.relocate(rook_from, rook_to)
        return scratch

    # --- Display ---
    def render(self) -> str:
        """Return an 8x8 text diagram, rank 8 first, ``.`` for empty squares."""
        rows: List[str] = []
        for rank_idx in range(7, -1, -1):
            cells = []
            for file_idx in range(8):
                p = self._pieces.get(Square(file_idx, rank_idx))
                cells.append(p.symbol if p is not None else ".")
            rows.append(f"{rank_idx + 1} " + " ".join(cells))
        rows.append("  a b c d e f g h")
        return "\n".join(rows)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Position({len(self._pieces)} pieces)"
