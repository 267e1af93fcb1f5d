"""Chess rules core: positions, move generation, legality and game state.

The package is pure and synchronous; it performs no I/O.
"""

from .attacks import in_check, is_attacked
from .errors import (
    EngineTerminal,
    IllegalMove,
    InvalidFen,
    InvalidSquare,
    InvariantViolation,
    NoPieceAtSquare,
    NotSideToMove,
    RuleViolation,
)
from .fen import STARTPOS_FEN, parse_fen, to_fen
from .game import GameState, MoveResult, Status, StatusReport
from .legality import all_legal_moves, filter_legal, legal_moves_from
from .move import Move, Square, parse_uci, square_to_str, str_to_square
from .movegen import generate, pawn_attack_squares
from .pieces import CastleSide, Color, Piece, PieceKind
from .position import Position

__all__ = [
    "CastleSide",
    "Color",
    "EngineTerminal",
    "GameState",
    "IllegalMove",
    "InvalidFen",
    "InvalidSquare",
    "InvariantViolation",
    "Move",
    "MoveResult",
    "NoPieceAtSquare",
    "NotSideToMove",
    "Piece",
    "PieceKind",
    "Position",
    "RuleViolation",
    "STARTPOS_FEN",
    "Square",
    "Status",
    "StatusReport",
    "all_legal_moves",
    "filter_legal",
    "generate",
    "in_check",
    "is_attacked",
    "legal_moves_from",
    "parse_fen",
    "parse_uci",
    "pawn_attack_squares",
    "square_to_str",
    "str_to_square",
    "to_fen",
]
