from __future__ import annotations

from typing import Iterable, List

from .attacks import is_attacked
from .move import Move, Square
from .movegen import generate
from .pieces import Color, PieceKind
from .position import Position


def filter_legal(candidates: Iterable[Move], position: Position, color: Color) -> List[Move]:
    """Drop candidates that would leave ``color``'s king attacked.

    Every candidate is played on a scratch copy of ``position``; the live
    position is never touched. A move onto a king is always dropped. When
    ``color`` has no king there is nothing to expose and every other
    candidate survives.

    Re-filtering an already legal list returns it unchanged.
    """
    legal: List[Move] = []
    king_sq = position.king_square(color)
    for mv in candidates:
        victim = position.get(mv.to_sq)
        if victim is not None and victim.kind is PieceKind.KING:
            continue
        if king_sq is None:
            legal.append(mv)
            continue
        scratch = position.simulate(mv)
        target = mv.to_sq if mv.from_sq == king_sq else king_sq
        if not is_attacked(target, color.opponent, scratch):
            legal.append(mv)
    return legal


def legal_moves_from(square: Square, position: Position) -> List[Move]:
    """Return the legal moves of whatever piece stands on ``square``."""
    piece = position.get(square)
    if piece is None:
        return []
    return filter_legal(generate(piece, square, position), position, piece.color)


def all_legal_moves(position: Position, color: Color) -> List[Move]:
    """Return the union of legal moves for every piece of ``color``."""
    moves: List[Move] = []
    for sq, piece in position.pieces(color):
        moves.extend(filter_legal(generate(piece, sq, position), position, piece.color))
    return moves

