from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional

from .attacks import in_check
from .errors import (
    EngineTerminal,
    IllegalMove,
    InvalidFen,
    InvariantViolation,
    NoPieceAtSquare,
    NotSideToMove,
    RuleViolation,
)
from .fen import parse_fen, to_fen
from .legality import all_legal_moves
from .move import Move, Square
from .pieces import Color, Piece, PieceKind
from .position import Position


logger = logging.getLogger(__name__)

CaptureListener = Callable[[Piece, Square], None]


class Status(str, Enum):
    IN_PROGRESS = "in_progress"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"

    @property
    def terminal(self) -> bool:
        return self in (Status.CHECKMATE, Status.STALEMATE)


@dataclass(frozen=True)
class StatusReport:
    side_to_move: Color
    status: Status


@dataclass(frozen=True)
class MoveResult:
    """Outcome of ``GameState.submit_move``.

    When ``applied`` is False nothing changed and ``error`` says why.
    """

    applied: bool
    status: Status
    captured: Optional[Piece] = None
    is_castle: bool = False
    move: Optional[Move] = None
    error: Optional[RuleViolation] = None


@dataclass
class GameState:
    """One game: position, side to move and derived status.

    Responsibility: validate and apply moves, flip turns, and recompute
    check / checkmate / stalemate after every move. Once the status is
    terminal no further move is accepted.
    """

    position: Position
    side_to_move: Color = Color.WHITE
    halfmove_clock: int = 0
    fullmove_number: int = 1
    status: Status = field(init=False, default=Status.IN_PROGRESS)
    captured: Dict[Color, List[Piece]] = field(init=False, default_factory=dict)
    _capture_listeners: List[CaptureListener] = field(init=False, default_factory=list, repr=False)
    _legal: List[Move] = field(init=False, default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.captured = {Color.WHITE: [], Color.BLACK: []}
        self._validate_setup()
        self._refresh()

    @classmethod
    def new(cls) -> "GameState":
        return cls(position=Position.startpos())

    @classmethod
    def from_fen(cls, fen: str) -> "GameState":
        """Load a game from FEN; setup defects are reported as ``InvalidFen``."""
        pos, side, halfmove, fullmove = parse_fen(fen)
        try:
            return cls(
                position=pos, side_to_move=side, halfmove_clock=halfmove, fullmove_number=fullmove
            )
        except InvariantViolation as e:
            raise InvalidFen(str(e)) from e

    def to_fen(self) -> str:
        return to_fen(self.position, self.side_to_move, self.halfmove_clock, self.fullmove_number)

    # --- Queries ---
    def query_status(self) -> StatusReport:
        return StatusReport(self.side_to_move, self.status)

    def in_check(self) -> bool:
        return self.status in (Status.CHECK, Status.CHECKMATE)

    def is_terminal(self) -> bool:
        return self.status.terminal

    def legal_moves(self) -> List[Move]:
        """Return every legal move for the side to move (empty once terminal)."""
        return list(self._legal)

    def select_piece(self, square: Square) -> FrozenSet[Square]:
        """Return the legal destinations of the piece on ``square``.

        Empty when the game is over, the square is empty, the piece belongs
        to the side not to move, or it simply has no legal move.
        """
        if self.is_terminal():
            return frozenset()
        piece = self.position.get(square)
        if piece is None or piece.color is not self.side_to_move:
            return frozenset()
        return frozenset(m.to_sq for m in self._legal if m.from_sq == square)

    # --- Mutation ---
    def subscribe_captures(self, listener: CaptureListener) -> None:
        """Register ``listener(piece, square)`` to be told about every capture."""
        self._capture_listeners.append(listener)

    def apply_move(self, move: Move) -> MoveResult:
        """Validate and play ``move``; only ``from_sq``/``to_sq`` are consulted.

        Raises:
            EngineTerminal: The game is already decided.
            NoPieceAtSquare: ``move.from_sq`` is empty.
            NotSideToMove: The piece belongs to the side not to move.
            IllegalMove: The destination is not in the legal set.
        """
        if self.is_terminal():
            raise EngineTerminal(f"game is over ({self.status.value})")
        piece = self.position.get(move.from_sq)
        if piece is None:
            raise NoPieceAtSquare(f"no piece on {move.from_sq}")
        if piece.color is not self.side_to_move:
            raise NotSideToMove(f"{piece.color.value} is not to move")
        legal = next((m for m in self._legal if m.same_path(move.from_sq, move.to_sq)), None)
        if legal is None:
            raise IllegalMove(f"illegal move {move.to_uci()}")

        mover = self.side_to_move
        captured = self.position.apply_move(legal)

        if piece.kind is PieceKind.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if mover is Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = mover.opponent
        self._refresh()

        logger.info(
            "move",
            extra={
                "move": legal.to_uci(),
                "color": mover.value,
                "castle": legal.is_castle,
                "status": self.status.value,
            },
        )
        if captured is not None:
            self.captured[captured.color].append(captured)
            logger.info(
                "capture",
                extra={
                    "piece": captured.kind.value,
                    "color": captured.color.value,
                    "square": str(legal.to_sq),
                },
            )
            for listener in self._capture_listeners:
                listener(captured, legal.to_sq)
        if self.status is Status.CHECK:
            logger.info("check", extra={"color": self.side_to_move.value})
        elif self.status.terminal:
            winner = self.winner()
            logger.info(
                "game over",
                extra={"status": self.status.value, "winner": winner.value if winner else None},
            )

        return MoveResult(
            applied=True,
            status=self.status,
            captured=captured,
            is_castle=legal.is_castle,
            move=legal,
        )

    def submit_move(self, from_sq: Square, to_sq: Square) -> MoveResult:
        """Attempt a move, reporting rule violations instead of raising them."""
        try:
            return self.apply_move(Move(from_sq, to_sq))
        except RuleViolation as e:
            logger.debug("move rejected", extra={"code": e.code, "reason": str(e)})
            return MoveResult(applied=False, status=self.status, error=e)

    def winner(self) -> Optional[Color]:
        if self.status is Status.CHECKMATE:
            return self.side_to_move.opponent
        return None

    # --- Internals ---
    def _refresh(self) -> None:
        self._legal = all_legal_moves(self.position, self.side_to_move)
        checked = in_check(self.side_to_move, self.position)
        if not self._legal:
            self.status = Status.CHECKMATE if checked else Status.STALEMATE
        elif checked:
            self.status = Status.CHECK
        else:
            self.status = Status.IN_PROGRESS
        if self.status.terminal:
            self._legal = []

    def _validate_setup(self) -> None:
        for color in (Color.WHITE, Color.BLACK):
            if self.position.king_square(color) is None:
                raise InvariantViolation(f"{color.value} has no king")
        waiting = self.side_to_move.opponent
        if in_check(waiting, self.position):
            raise InvariantViolation(
                f"{waiting.value} is in check with {self.side_to_move.value} to move"
            )
