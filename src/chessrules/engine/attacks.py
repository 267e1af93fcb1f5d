from __future__ import annotations

from . import movegen
from .move import Square
from .pieces import Color, PieceKind
from .position import Position


def is_attacked(square: Square, by_color: Color, position: Position) -> bool:
    """Return True if any piece of ``by_color`` attacks ``square``.

    Each attacker's generated moves are scanned for ``square``, except pawns,
    which threaten both forward diagonals whether or not anything stands
    there. Castling is never an attack.
    """
    for sq, piece in position.pieces(by_color):
        if piece.kind is PieceKind.PAWN:
            if square in movegen.pawn_attack_squares(sq, piece.color):
                return True
            continue
        for mv in movegen.generate(piece, sq, position, include_castling=False):
            if mv.to_sq == square:
                return True
    return False


def in_check(color: Color, position: Position) -> bool:
    """Return True if ``color``'s king is attacked. A missing king is never in check."""
    king_sq = position.king_square(color)
    if king_sq is None:
        return False
    return is_attacked(king_sq, color.opponent, position)
