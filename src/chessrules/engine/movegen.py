from __future__ import annotations

from typing import List, Tuple

from . import attacks
from .move import Move, Square
from .pieces import CastleSide, Color, Piece, PieceKind
from .position import CASTLE_ROOK_FILES, Position


Direction = Tuple[int, int]

ROOK_DIRS: Tuple[Direction, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
BISHOP_DIRS: Tuple[Direction, ...] = ((-1, -1), (1, -1), (-1, 1), (1, 1))
QUEEN_DIRS: Tuple[Direction, ...] = ROOK_DIRS + BISHOP_DIRS
KNIGHT_OFFSETS: Tuple[Direction, ...] = (
    (-1, 2),
    (1, 2),
    (-2, 1),
    (2, 1),
    (-2, -1),
    (2, -1),
    (-1, -2),
    (1, -2),
)
KING_OFFSETS: Tuple[Direction, ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)

SLIDER_DIRS = {
    PieceKind.ROOK: ROOK_DIRS,
    PieceKind.BISHOP: BISHOP_DIRS,
    PieceKind.QUEEN: QUEEN_DIRS,
}


def generate(
    piece: Piece, square: Square, position: Position, *, include_castling: bool = True
) -> List[Move]:
    """Return pseudo-legal moves for ``piece`` standing on ``square``.

    Args:
        piece (Piece): The moving piece.
        square (Square): Its current square.
        position (Position): Board to generate against.
        include_castling (bool): Add castling candidates for an unmoved king.
            Attack detection turns this off: a castle never captures.

    Returns:
        List[Move]: Candidate moves. Own-king safety is not considered.

    Notes:
        En passant and promotion are not generated.
    """
    kind = piece.kind
    if kind is PieceKind.PAWN:
        return _pawn_moves(piece, square, position)
    if kind is PieceKind.KNIGHT:
        return _step_moves(piece, square, position, KNIGHT_OFFSETS)
    if kind is PieceKind.KING:
        moves = _step_moves(piece, square, position, KING_OFFSETS)
        if include_castling:
            moves.extend(castling_moves(piece, square, position))
        return moves
    return _slide_moves(piece, square, position, SLIDER_DIRS[kind])


def _slide_moves(
    piece: Piece, square: Square, position: Position, dirs: Tuple[Direction, ...]
) -> List[Move]:
    moves: List[Move] = []
    for df, dr in dirs:
        to_sq = square.offset(df, dr)
        while to_sq is not None:
            target = position.get(to_sq)
            if target is not None:
                if target.color is not piece.color:
                    moves.append(Move(square, to_sq))
                break
            moves.append(Move(square, to_sq))
            to_sq = to_sq.offset(df, dr)
    return moves


def _step_moves(
    piece: Piece, square: Square, position: Position, offsets: Tuple[Direction, ...]
) -> List[Move]:
    moves: List[Move] = []
    for df, dr in offsets:
        to_sq = square.offset(df, dr)
        if to_sq is None:
            continue
        target = position.get(to_sq)
        if target is None or target.color is not piece.color:
            moves.append(Move(square, to_sq))
    return moves


def _pawn_moves(piece: Piece, square: Square, position: Position) -> List[Move]:
    moves: List[Move] = []
    forward = piece.color.forward

    one = square.offset(0, forward)
    if one is not None and position.is_empty(one):
        moves.append(Move(square, one))
        if not piece.has_moved:
            two = square.offset(0, 2 * forward)
            if two is not None and position.is_empty(two):
                moves.append(Move(square, two))

    # Diagonals only when an enemy piece is there to take
    for cap in pawn_attack_squares(square, piece.color):
        if position.is_enemy(cap, piece.color):
            moves.append(Move(square, cap))
    return moves


def pawn_attack_squares(square: Square, color: Color) -> List[Square]:
    """Return the forward-diagonal squares a pawn on ``square`` threatens.

    Unlike move generation, occupancy is ignored: an empty diagonal is still
    attacked.
    """
    out: List[Square] = []
    for df in (-1, 1):
        sq = square.offset(df, color.forward)
        if sq is not None:
            out.append(sq)
    return out


def castling_moves(king: Piece, square: Square, position: Position) -> List[Move]:
    """Return the castle candidates for ``king`` on ``square``.

    A side qualifies when, in order: the king is unmoved; an unmoved rook of
    the same color sits on that side's corner of the king's rank; every
    square strictly between them is empty; and the king's square, the square
    it passes through and its destination are all unattacked.
    """
    if king.has_moved:
        return []
    moves: List[Move] = []
    opponent = king.color.opponent
    for side in (CastleSide.KINGSIDE, CastleSide.QUEENSIDE):
        direction = 1 if side is CastleSide.KINGSIDE else -1
        rook_sq = Square(CASTLE_ROOK_FILES[side][0], square.rank)
        rook = position.get(rook_sq)
        if (
            rook is None
            or rook.kind is not PieceKind.ROOK
            or rook.color is not king.color
            or rook.has_moved
        ):
            continue
        # Destination must lie strictly between king and rook
        if abs(rook_sq.file - square.file) <= 2:
            continue
        between = range(min(square.file, rook_sq.file) + 1, max(square.file, rook_sq.file))
        if any(not position.is_empty(Square(f, square.rank)) for f in between):
            continue
        passing = square.offset(direction, 0)
        dest = square.offset(2 * direction, 0)
        if passing is None or dest is None:
            continue
        if any(attacks.is_attacked(sq, opponent, position) for sq in (square, passing, dest)):
            continue
        moves.append(Move(square, dest, is_castle=True, castle_side=side))
    return moves
