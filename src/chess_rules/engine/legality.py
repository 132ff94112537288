"""King-safety filter over pseudo-legal moves, plus check/mate/stalemate status.

Two generation levels stay separate: ``movegen`` is pseudo-legal and is the
only thing used for attack tests; this module is the filtered level and is
never called from inside itself.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from .apply import make_move
from .board import Board
from .move import Move
from .movegen import generate_pseudo_legal, is_square_attacked
from .pieces import Color


class GameStatus(str, Enum):
    ONGOING = "ongoing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


def is_legal(board: Board, move: Move) -> bool:
    """Return True if pseudo-legal ``move`` keeps the mover's king safe.

    The move is played on a scratch copy; ``board`` is never touched. For
    castling the king's start, pass-through and destination squares must all
    be free of attack.
    """
    color = board.squares[move.from_sq].color
    enemy = color.opponent
    castle = board.castle_side(move)
    if castle is not None:
        if any(is_square_attacked(board, sq, enemy) for sq in castle.king_path):
            return False
    scratch = board.copy()
    make_move(scratch, move)
    return not is_square_attacked(scratch, scratch.king_square(color), enemy)


def generate_legal_moves(board: Board) -> List[Move]:
    """Return the legal moves for the side to move."""
    return [m for m in generate_pseudo_legal(board) if is_legal(board, m)]


def has_legal_moves(board: Board) -> bool:
    return any(is_legal(board, m) for m in generate_pseudo_legal(board))


def in_check(board: Board, color: Optional[Color] = None) -> bool:
    """Return True if ``color`` (default: side to move) is in check."""
    c = board.side_to_move if color is None else color
    if c is Color.NONE:
        raise ValueError("color must be WHITE or BLACK")
    return is_square_attacked(board, board.king_square(c), c.opponent)


def is_checkmate(board: Board) -> bool:
    return in_check(board) and not has_legal_moves(board)


def is_stalemate(board: Board) -> bool:
    return not in_check(board) and not has_legal_moves(board)


def status(board: Board) -> GameStatus:
    check = in_check(board)
    if has_legal_moves(board):
        return GameStatus.CHECK if check else GameStatus.ONGOING
    return GameStatus.CHECKMATE if check else GameStatus.STALEMATE
