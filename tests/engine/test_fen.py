from __future__ import annotations

import pytest

from chessrules.engine.errors import InvalidFen
from chessrules.engine.fen import STARTPOS_FEN, parse_fen, to_fen
from chessrules.engine.move import str_to_square
from chessrules.engine.pieces import Color
from chessrules.engine.position import Position


def round_trip(fen: str) -> str:
    pos, side, halfmove, fullmove = parse_fen(fen)
    return to_fen(pos, side, halfmove, fullmove)


def test_startpos_round_trip() -> None:
    assert round_trip(STARTPOS_FEN) == STARTPOS_FEN
    pos, side, _, _ = parse_fen(STARTPOS_FEN)
    assert pos == Position.startpos()
    assert side is Color.WHITE


@pytest.mark.parametrize(
    "fen",
    [
        # Mixed pieces and empty squares, some castling rights
        "r1bqkbnr/pppp1ppp/2n5/4p3/3P4/5N2/PPP1PPPP/RNBQKB1R b KQ - 2 3",
        # All castling rights
        "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1",
        # Single right per side
        "r3k2r/8/8/8/8/8/8/R3K2R w Kq - 7 30",
        # No rights
        "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1",
    ],
)
def test_round_trip_various_positions(fen: str) -> None:
    assert round_trip(fen) == fen


def test_en_passant_target_is_dropped() -> None:
    fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    assert round_trip(fen) == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"


def test_moved_flags_are_reconstructed() -> None:
    pos, _, _, _ = parse_fen("r3k2r/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/R3K2R w Kq - 0 1")
    assert not pos.get(str_to_square("e1")).has_moved  # type: ignore[union-attr]
    assert pos.get(str_to_square("a1")).has_moved  # type: ignore[union-attr]
    assert not pos.get(str_to_square("h1")).has_moved  # type: ignore[union-attr]
    assert pos.get(str_to_square("h8")).has_moved  # type: ignore[union-attr]
    assert not pos.get(str_to_square("a8")).has_moved  # type: ignore[union-attr]
    assert pos.get(str_to_square("e4")).has_moved  # type: ignore[union-attr]
    assert not pos.get(str_to_square("d2")).has_moved  # type: ignore[union-attr]
    assert pos.get(str_to_square("e5")).has_moved  # type: ignore[union-attr]


def test_king_without_rights_counts_as_moved() -> None:
    pos, _, _, _ = parse_fen("r3k2r/8/8/8/8/8/8/R3K2R w - - 0 1")
    assert pos.get(str_to_square("e1")).has_moved  # type: ignore[union-attr]
    assert pos.get(str_to_square("e8")).has_moved  # type: ignore[union-attr]


@pytest.mark.parametrize(
    "fen",
    [
        "",  # empty
        "8/8/8/8/8/8/8 w - - 0 1",  # not enough ranks
        "8/8/8/8/8/8/8/8 w - - 0",  # missing fields
        "8/8/8/8/8/8/8/8 x - - 0 1",  # bad side to move
        "8/8/8/8/8/8/8/8 w A - 0 1",  # bad castling
        "8/8/8/8/8/8/8/8 w - z9 0 1",  # bad ep square
        "8/8/8/8/8/8/8/8 w - e4 0 1",  # ep square on wrong rank
        "8/8/8/8/8/8/8/8 w - - -1 1",  # bad halfmove
        "8/8/8/8/8/8/8/8 w - - 0 0",  # bad fullmove
        "9/8/8/8/8/8/8/8 w - - 0 1",  # empty count above 8
        "4k3/8/8/8/8/8/4R3/4K2\u00b2 w - - 0 1",  # non-ASCII digit
        "8p/8/8/8/8/8/8/8 w - - 0 1",  # too many squares
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX w KQkq - 0 1",  # bad piece
        "4k3/8/8/8/8/8/8/4K3 w K - 0 1",  # right without rook
        "4k3/8/8/8/8/8/8/R5KR w K - 0 1",  # right without king on e1
    ],
)
def test_invalid_fen_raises(fen: str) -> None:
    with pytest.raises(InvalidFen):
        parse_fen(fen)


def test_invalid_fen_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_fen("not a fen")
