from __future__ import annotations

from .legality import all_legal_moves
from .pieces import Color
from .position import Position


def perft(position: Position, side: Color, depth: int) -> int:
    """Count leaf nodes of the legal move tree rooted at ``position``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Each child is built on a copy, so ``position`` is left as it was.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1
    moves = all_legal_moves(position, side)
    if depth == 1:
        return len(moves)
    nodes = 0
    for mv in moves:
        child = position.copy()
        child.apply_move(mv)
        nodes += perft(child, side.opponent, depth - 1)
    return nodes


def divide(position: Position, side: Color, depth: int) -> dict[str, int]:
    """Return perft(depth - 1) per root move, keyed by UCI string."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    out: dict[str, int] = {}
    for mv in all_legal_moves(position, side):
        child = position.copy()
        child.apply_move(mv)
        out[mv.to_uci()] = perft(child, side.opponent, depth - 1)
    return out
