"""Chess rules engine: move adjudication over an exclusively owned board.

Pure and deterministic; I/O lives in ``protocol`` and ``cli``.
"""

from __future__ import annotations

from .engine.board import STARTPOS_FEN, Board, CastlingRights
from .engine.game import (
    Game,
    get_board,
    move_by_algebraic,
    move_by_index,
    new,
    print_board,
    reset,
)
from .engine.legality import GameStatus
from .engine.move import Move
from .engine.notation import Rejection
from .engine.pieces import Cell, Color, PieceKind

__all__ = [
    "STARTPOS_FEN",
    "Board",
    "CastlingRights",
    "Cell",
    "Color",
    "Game",
    "GameStatus",
    "Move",
    "PieceKind",
    "Rejection",
    "get_board",
    "move_by_algebraic",
    "move_by_index",
    "new",
    "print_board",
    "reset",
]
