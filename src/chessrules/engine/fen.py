from __future__ import annotations

from typing import List, Tuple

from .errors import InvalidFen, InvalidSquare
from .move import Square, str_to_square
from .pieces import CastleSide, Color, Piece, PieceKind
from .position import CASTLE_ROOK_FILES, Position


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Castling letter -> (color, side)
CASTLING_RIGHTS = {
    "K": (Color.WHITE, CastleSide.KINGSIDE),
    "Q": (Color.WHITE, CastleSide.QUEENSIDE),
    "k": (Color.BLACK, CastleSide.KINGSIDE),
    "q": (Color.BLACK, CastleSide.QUEENSIDE),
}
KING_HOME_FILE = 4


def parse_fen(fen: str) -> Tuple[Position, Color, int, int]:
    """Parse a Forsyth–Edwards Notation string.

    Args:
        fen (str): Six-field FEN.

    Returns:
        Tuple[Position, Color, int, int]: Position, side to move, halfmove
            clock and fullmove number.

    Raises:
        InvalidFen: If any field is malformed, or a castling right names a
            king or rook that is not on its home square.

    Notes:
        ``has_moved`` is reconstructed from the placement: kings and corner
        rooks are unmoved exactly when a matching castling right is present,
        pawns are unmoved on their home rank, everything else is unmoved.
        The en passant field is validated and then dropped, since en passant
        captures are not generated.
    """
    if not fen or not isinstance(fen, str):
        raise InvalidFen("FEN must be a non-empty string")
    parts = fen.strip().split()
    if len(parts) != 6:
        raise InvalidFen("FEN must have 6 fields")
    placement, stm, castling, ep, halfmove, fullmove = parts

    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidFen("FEN board must have 8 ranks")
    pos = Position()
    for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
        file_idx = 0
        for ch in rank:
            if ch in "12345678":
                file_idx += int(ch)
                continue
            if file_idx >= 8:
                raise InvalidFen("too many squares in FEN rank")
            try:
                piece = Piece.from_symbol(ch)
            except ValueError as e:
                raise InvalidFen(f"invalid piece in FEN: {ch!r}") from e
            pos.place(Square(file_idx, rank_idx), piece)
            file_idx += 1
        if file_idx != 8:
            raise InvalidFen("rank does not sum to 8 squares in FEN")

    if stm not in ("w", "b"):
        raise InvalidFen("side to move must be 'w' or 'b'")
    side = Color.WHITE if stm == "w" else Color.BLACK

    rights = set()
    if castling != "-":
        for ch in castling:
            if ch not in CASTLING_RIGHTS:
                raise InvalidFen("invalid castling rights")
            rights.add(CASTLING_RIGHTS[ch])

    if ep != "-":
        try:
            ep_sq = str_to_square(ep)
        except InvalidSquare as e:
            raise InvalidFen("invalid en passant square") from e
        if ep_sq.rank not in (2, 5):
            raise InvalidFen("invalid en passant square rank")

    try:
        halfmove_clock = int(halfmove)
        fullmove_number = int(fullmove)
    except ValueError as e:
        raise InvalidFen("invalid move counters in FEN") from e
    if halfmove_clock < 0 or fullmove_number <= 0:
        raise InvalidFen("invalid move counters in FEN")

    _restore_moved_flags(pos, rights)
    return pos, side, halfmove_clock, fullmove_number


def _restore_moved_flags(pos: Position, rights: set) -> None:
    for sq, piece in pos.pieces():
        if piece.kind is PieceKind.PAWN:
            unmoved = sq.rank == piece.color.pawn_rank
        elif piece.kind is PieceKind.KING:
            unmoved = any(color is piece.color for color, _ in rights)
        elif piece.kind is PieceKind.ROOK:
            unmoved = any(
                color is piece.color
                and sq == Square(CASTLE_ROOK_FILES[side][0], color.home_rank)
                for color, side in rights
            )
        else:
            unmoved = True
        if not unmoved:
            pos.place(sq, piece.moved())

    for color, side in rights:
        king = pos.get(Square(KING_HOME_FILE, color.home_rank))
        rook = pos.get(Square(CASTLE_ROOK_FILES[side][0], color.home_rank))
        if king is None or king.kind is not PieceKind.KING or king.color is not color:
            raise InvalidFen(f"castling right for {color.value} without king on its home square")
        if rook is None or rook.kind is not PieceKind.ROOK or rook.color is not color:
            raise InvalidFen(f"{side.value} castling right for {color.value} without its rook")


def castling_field(pos: Position) -> str:
    """Derive the FEN castling field from the king and rook ``has_moved`` flags."""
    out: List[str] = []
    for letter, (color, side) in CASTLING_RIGHTS.items():
        king = pos.get(Square(KING_HOME_FILE, color.home_rank))
        rook = pos.get(Square(CASTLE_ROOK_FILES[side][0], color.home_rank))
        if (
            king is not None
            and king.kind is PieceKind.KING
            and king.color is color
            and not king.has_moved
            and rook is not None
            and rook.kind is PieceKind.ROOK
            and rook.color is color
            and not rook.has_moved
        ):
            out.append(letter)
    return "".join(out) or "-"


def to_fen(pos: Position, side: Color, halfmove_clock: int = 0, fullmove_number: int = 1) -> str:
    """Serialize a position into a normalized FEN string.

    The en passant field is always ``-``.
    """
    ranks_str: List[str] = []
    for rank_idx in range(7, -1, -1):  # 7..0 maps to ranks 8..1
        run = 0
        row = []
        for file_idx in range(8):
            piece = pos.get(Square(file_idx, rank_idx))
            if piece is None:
                run += 1
            else:
                if run > 0:
                    row.append(str(run))
                    run = 0
                row.append(piece.symbol)
        if run > 0:
            row.append(str(run))
        ranks_str.append("".join(row))
    placement = "/".join(ranks_str)
    stm = "w" if side is Color.WHITE else "b"
    return f"{placement} {stm} {castling_field(pos)} - {halfmove_clock} {fullmove_number}"
