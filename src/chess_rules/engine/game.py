from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, TextIO, Union

from .apply import make_move
from .board import Board, Snapshot
from .legality import GameStatus, generate_legal_moves, has_legal_moves, in_check, status
from .move import Move
from .notation import Rejection, Resolution, move_to_san, translate_algebraic, translate_index
from .pieces import Color, PieceKind
from .render import render_snapshot


logger = logging.getLogger(__name__)

Promotion = Union[PieceKind, int, str, None]


@dataclass
class Game:
    """Game wrapper around an exclusively owned board.

    Responsibility: accept move requests, reject anything illegal without
    touching the board, apply legal moves, and expose read-only views.
    """

    board: Board
    history: List[str] = field(default_factory=list)
    last_rejection: Optional[Rejection] = None

    @classmethod
    def new(cls) -> "Game":
        return cls(board=Board.startpos())

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        return cls(board=Board.from_fen(fen))

    def to_fen(self) -> str:
        return self.board.to_fen()

    def reset(self) -> None:
        """Restore the standard initial position and forget all history."""
        self.board = Board.startpos()
        self.history = []
        self.last_rejection = None

    # --- Move requests ---
    def move_by_algebraic(self, notation: str) -> bool:
        """Apply a move given as SAN or coordinate text. False if rejected."""
        if self.game_over:
            return self._reject(Resolution.reject(Rejection.GAME_OVER), notation)
        return self._commit(translate_algebraic(self.board, notation), notation)

    def move_by_index(self, from_sq: int, to_sq: int, promotion: Promotion = None) -> bool:
        """Apply a move given as external indices (a8 = 0 .. h1 = 63). False if rejected."""
        request = f"{from_sq}->{to_sq}"
        if self.game_over:
            return self._reject(Resolution.reject(Rejection.GAME_OVER), request)
        return self._commit(translate_index(self.board, from_sq, to_sq, promotion), request)

    def _commit(self, resolution: Resolution, request: str) -> bool:
        move = resolution.move
        if move is None:
            return self._reject(resolution, request)
        # Cross-check against the freshly generated legal set before mutating.
        if move not in generate_legal_moves(self.board):
            return self._reject(Resolution.reject(Rejection.ILLEGAL), request)
        san = move_to_san(self.board, move)
        make_move(self.board, move)
        self.history.append(san)
        self.last_rejection = None
        logger.debug("applied %s (%s)", san, move.to_uci())
        if self.game_over:
            logger.info("game over: %s after %s", self.status().value, san)
        return True

    def _reject(self, resolution: Resolution, request: str) -> bool:
        self.last_rejection = resolution.rejection
        logger.debug(
            "rejected %r: %s %s",
            request,
            resolution.rejection.value if resolution.rejection else "unknown",
            resolution.detail,
        )
        return False

    # --- Queries ---
    def get_board(self) -> Snapshot:
        return self.board.snapshot()

    def render(self) -> str:
        return render_snapshot(self.get_board())

    @property
    def side_to_move(self) -> Color:
        return self.board.side_to_move

    def legal_moves(self) -> List[Move]:
        return generate_legal_moves(self.board)

    def in_check(self) -> bool:
        return in_check(self.board)

    def checkmate(self) -> bool:
        return self.status() is GameStatus.CHECKMATE

    def stalemate(self) -> bool:
        return self.status() is GameStatus.STALEMATE

    def status(self) -> GameStatus:
        return status(self.board)

    @property
    def game_over(self) -> bool:
        return not has_legal_moves(self.board)


# Function-style surface over a caller-owned Game.
def new() -> Game:
    return Game.new()


def reset(game: Game) -> None:
    game.reset()


def move_by_algebraic(game: Game, notation: str) -> bool:
    return game.move_by_algebraic(notation)


def move_by_index(game: Game, from_sq: int, to_sq: int, promotion: Promotion = None) -> bool:
    return game.move_by_index(from_sq, to_sq, promotion)


def get_board(game: Game) -> Snapshot:
    return game.get_board()


def print_board(game: Game, file: Optional[TextIO] = None) -> None:
    print(game.render(), file=file or sys.stdout)
