from __future__ import annotations

from chessrules.engine.attacks import in_check, is_attacked
from chessrules.engine.move import str_to_square
from chessrules.engine.movegen import pawn_attack_squares
from chessrules.engine.pieces import Color, Piece, PieceKind
from chessrules.engine.position import Position


def sq(name: str):
    return str_to_square(name)


def test_pawn_attacks_empty_diagonals_but_not_forward() -> None:
    pos = Position()
    pos.place(sq("e4"), Piece(PieceKind.PAWN, Color.WHITE, True))
    assert is_attacked(sq("d5"), Color.WHITE, pos)
    assert is_attacked(sq("f5"), Color.WHITE, pos)
    assert not is_attacked(sq("e5"), Color.WHITE, pos)


def test_black_pawn_attacks_downwards() -> None:
    pos = Position()
    pos.place(sq("e5"), Piece(PieceKind.PAWN, Color.BLACK, True))
    assert is_attacked(sq("d4"), Color.BLACK, pos)
    assert not is_attacked(sq("d6"), Color.BLACK, pos)


def test_pawn_attack_squares_clip_at_edge() -> None:
    assert [str(s) for s in pawn_attack_squares(sq("a2"), Color.WHITE)] == ["b3"]


def test_slider_attack_is_blocked() -> None:
    pos = Position()
    pos.place(sq("a1"), Piece(PieceKind.ROOK, Color.BLACK))
    assert is_attacked(sq("a8"), Color.BLACK, pos)
    pos.place(sq("a5"), Piece(PieceKind.PAWN, Color.WHITE))
    assert is_attacked(sq("a5"), Color.BLACK, pos)
    assert not is_attacked(sq("a6"), Color.BLACK, pos)


def test_knight_and_king_attacks() -> None:
    pos = Position()
    pos.place(sq("g1"), Piece(PieceKind.KNIGHT, Color.WHITE))
    pos.place(sq("a8"), Piece(PieceKind.KING, Color.WHITE))
    assert is_attacked(sq("f3"), Color.WHITE, pos)
    assert is_attacked(sq("b7"), Color.WHITE, pos)
    assert not is_attacked(sq("c6"), Color.WHITE, pos)
    assert not is_attacked(sq("f3"), Color.BLACK, pos)


def test_in_check_and_missing_king() -> None:
    pos = Position()
    pos.place(sq("e1"), Piece(PieceKind.KING, Color.WHITE))
    pos.place(sq("e8"), Piece(PieceKind.ROOK, Color.BLACK))
    assert in_check(Color.WHITE, pos)
    assert not in_check(Color.BLACK, pos)


def test_start_position_third_rank_is_covered() -> None:
    pos = Position.startpos()
    for f in "abcdefgh":
        assert is_attacked(sq(f + "3"), Color.WHITE, pos)
        assert not is_attacked(sq(f + "3"), Color.BLACK, pos)
