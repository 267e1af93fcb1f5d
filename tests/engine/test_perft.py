from __future__ import annotations

from chessrules.engine.fen import STARTPOS_FEN, parse_fen
from chessrules.engine.perft import divide, perft


def test_perft_startpos_depths_1_3() -> None:
    pos, side, _, _ = parse_fen(STARTPOS_FEN)
    assert perft(pos, side, 0) == 1
    assert perft(pos, side, 1) == 20
    assert perft(pos, side, 2) == 400
    assert perft(pos, side, 3) == 8902


def test_perft_castling_position() -> None:
    # Rooks and kings only: no en passant or promotion can arise
    pos, side, _, _ = parse_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    assert perft(pos, side, 1) == 26
    assert perft(pos, side, 2) == 568


def test_perft_does_not_mutate_root() -> None:
    pos, side, _, _ = parse_fen(STARTPOS_FEN)
    before = pos.copy()
    perft(pos, side, 2)
    assert pos == before


def test_divide_sums_to_perft() -> None:
    pos, side, _, _ = parse_fen(STARTPOS_FEN)
    counts = divide(pos, side, 2)
    assert len(counts) == 20
    assert counts["e2e4"] == 20
    assert sum(counts.values()) == 400
