from __future__ import annotations

import sys
from typing import Callable, Iterable, Optional

from ...engine.game import Game
from ...engine.legality import GameStatus


Writer = Callable[[str], None]


class ConsoleSession:
    """Line-oriented adapter around a Game.

    Commands: a move (``e4``, ``Nf3``, ``e2e4``, ``O-O``), ``print``,
    ``reset``, ``fen``, ``moves``, ``status``, ``help``, ``quit``.
    """

    def __init__(self, game: Optional[Game] = None) -> None:
        self.game = game if game is not None else Game.new()

    def handle(self, line: str, write: Writer) -> bool:
        """Process one input line; return False when the session should end."""
        cmd = line.strip()
        if not cmd:
            return True
        if cmd in ("quit", "exit"):
            return False
        if cmd == "print":
            write(self.game.render())
        elif cmd == "reset":
            self.game.reset()
            write("ok")
        elif cmd == "fen":
            write(self.game.to_fen())
        elif cmd == "moves":
            write(" ".join(m.to_uci() for m in self.game.legal_moves()))
        elif cmd == "status":
            write(self._status_line())
        elif cmd == "help":
            write("commands: <move> print reset fen moves status help quit")
        elif self.game.move_by_algebraic(cmd):
            write(f"ok {self.game.history[-1]}")
            st = self.game.status()
            if st is not GameStatus.ONGOING:
                write(self._status_line())
        else:
            reason = self.game.last_rejection
            write(f"illegal {reason.value if reason else cmd}")
        return True

    def _status_line(self) -> str:
        return f"{self.game.status().value} {self.game.side_to_move.name.lower()} to move"


def _default_writer(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def run_console(lines: Optional[Iterable[str]] = None, write: Writer = _default_writer) -> None:
    session = ConsoleSession()
    for raw in sys.stdin if lines is None else lines:
        if not session.handle(raw, write):
            break
