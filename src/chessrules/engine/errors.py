from __future__ import annotations


class RuleViolation(ValueError):
    """Caller-recoverable failure; the position is left untouched.

    Each subclass carries a stable ``code`` used by the protocol layers.
    """

    code = "rule_violation"


class InvalidSquare(RuleViolation):
    code = "invalid_square"


class NoPieceAtSquare(RuleViolation):
    code = "no_piece_at_square"


class NotSideToMove(RuleViolation):
    code = "not_side_to_move"


class IllegalMove(RuleViolation):
    code = "illegal_move"


class EngineTerminal(RuleViolation):
    code = "engine_terminal"


class InvalidFen(RuleViolation):
    code = "invalid_fen"


class InvariantViolation(RuntimeError):
    """Board setup defect (e.g. a color without exactly one king). Fatal."""
