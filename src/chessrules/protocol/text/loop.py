from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional, TextIO

from ...engine.errors import RuleViolation
from ...engine.game import GameState
from ...engine.move import Square, parse_uci, str_to_square
from ...engine.pieces import Piece


logger = logging.getLogger(__name__)

Writer = Callable[[str], None]

HELP_LINES = (
    "commands:",
    "  new                start a new game",
    "  fen <FEN>          load a position",
    "  select <square>    list legal destinations, e.g. select e2",
    "  move <move>        play a move, e.g. move e2e4 (or just e2e4)",
    "  board              print the board",
    "  status             side to move and game status",
    "  quit               leave",
)


class TextSession:
    """Line-oriented front end over a single ``GameState``.

    Notes:
    - The engine stays pure; all I/O goes through the ``write`` callable.
    - Mirrors click input: ``select`` remembers the square, a following
      ``move`` may name only the destination.
    - Rule violations are reported as ``error <code>: <message>`` lines and
      never end the session.
    """

    def __init__(self, write: Writer) -> None:
        self.write = write
        self.game: GameState = GameState.new()
        self.selected: Optional[Square] = None
        self.game.subscribe_captures(self._on_capture)

    # ---- Command handlers ----
    def cmd_new(self) -> None:
        self._load(GameState.new())
        self.write("ok new game")

    def cmd_fen(self, args: List[str]) -> None:
        game = GameState.from_fen(" ".join(args))
        self._load(game)
        self.write(f"ok {game.to_fen()}")

    def cmd_select(self, args: List[str]) -> None:
        if len(args) != 1:
            self.write("error usage: select <square>")
            return
        sq = str_to_square(args[0])
        destinations = sorted(self.game.select_piece(sq))
        self.selected = sq if destinations else None
        self.write(f"moves {sq} " + " ".join(str(d) for d in destinations))

    def cmd_move(self, args: List[str]) -> None:
        if len(args) != 1:
            self.write("error usage: move <move>")
            return
        token = args[0]
        if len(token) == 2 and self.selected is not None:
            token = str(self.selected) + token
        mv = parse_uci(token)
        result = self.game.submit_move(mv.from_sq, mv.to_sq)
        self.selected = None
        if result.error is not None:
            self.write(f"error {result.error.code}: {result.error}")
            return
        line = f"played {mv.to_uci()}"
        if result.is_castle:
            line += " castle"
        self.write(line)
        self.cmd_status()

    def cmd_board(self) -> None:
        for row in self.game.position.render().splitlines():
            self.write(row)

    def cmd_status(self) -> None:
        report = self.game.query_status()
        line = f"status {report.side_to_move.value} {report.status.value}"
        winner = self.game.winner()
        if winner is not None:
            line += f" winner {winner.value}"
        self.write(line)

    def cmd_help(self) -> None:
        for line in HELP_LINES:
            self.write(line)

    # ---- Dispatch ----
    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the session should end."""
        parts = line.strip().split()
        if not parts:
            return True
        cmd, args = parts[0].lower(), parts[1:]
        try:
            if cmd in ("quit", "exit"):
                return False
            if cmd == "new":
                self.cmd_new()
            elif cmd == "fen":
                self.cmd_fen(args)
            elif cmd == "select":
                self.cmd_select(args)
            elif cmd == "move":
                self.cmd_move(args)
            elif cmd == "board":
                self.cmd_board()
            elif cmd == "status":
                self.cmd_status()
            elif cmd == "help":
                self.cmd_help()
            elif len(cmd) == 4 and not args:
                self.cmd_move([cmd])
            else:
                self.write(f"error unknown command: {cmd}")
        except RuleViolation as e:
            logger.debug("rule violation", extra={"code": e.code, "reason": str(e)})
            self.write(f"error {e.code}: {e}")
        return True

    def _load(self, game: GameState) -> None:
        self.game = game
        self.selected = None
        self.game.subscribe_captures(self._on_capture)

    def _on_capture(self, piece: Piece, square: Square) -> None:
        self.write(f"captured {piece.color.value} {piece.kind.value} on {square}")


def run(stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
    def _w(line: str) -> None:
        stdout.write(line + "\n")
        stdout.flush()

    session = TextSession(_w)
    session.cmd_board()
    for raw in stdin:
        if not session.handle(raw):
            break
