from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .board import CASTLING, Board
from .move import Move, file_of, make_square, rank_of
from .pieces import EMPTY, Cell, Color, PieceKind


@dataclass(frozen=True)
class AppliedMove:
    """What ``make_move`` did, for history and diagnostics."""

    move: Move
    mover: Cell
    captured: Cell
    capture_square: Optional[int]
    is_castle: bool
    is_en_passant: bool

    @property
    def is_capture(self) -> bool:
        return not self.captured.is_empty


def make_move(board: Board, move: Move) -> AppliedMove:
    """Apply ``move`` to ``board`` in place.

    The move must already have passed the legality filter. Handles normal
    moves, captures, promotions, en passant and castling, then updates
    castling rights, the en-passant target, both clocks and the side to move.

    Raises:
        ValueError: If there is no piece of the side to move on ``from_sq``
            or a pawn reaches the last rank without a promotion kind.
    """
    squares = board.squares
    mover = squares[move.from_sq]
    color = board.side_to_move
    if mover.is_empty or mover.color is not color:
        raise ValueError("no piece of the side to move on from_sq")

    # Flags depend on the position before anything moves.
    en_passant = board.is_en_passant(move)
    double_push = board.is_double_push(move)
    castle = board.castle_side(move)

    if mover.kind is PieceKind.PAWN and rank_of(move.to_sq) in (0, 7):
        if move.promotion is None:
            raise ValueError("pawn move to the last rank requires a promotion kind")
        placed = Cell(move.promotion, color)
    else:
        placed = mover

    capture_square: Optional[int] = None
    if en_passant:
        # Victim sits beside the origin, on the destination file.
        capture_square = make_square(file_of(move.to_sq), rank_of(move.from_sq))
    elif not squares[move.to_sq].is_empty:
        capture_square = move.to_sq
    captured = EMPTY
    if capture_square is not None:
        captured = squares[capture_square]
        squares[capture_square] = EMPTY

    squares[move.from_sq] = EMPTY
    squares[move.to_sq] = placed
    if castle is not None:
        squares[castle.rook_to] = squares[castle.rook_from]
        squares[castle.rook_from] = EMPTY

    # Rights die once a king or rook home square is vacated or landed on.
    rights = board.castling
    for (side_color, kingside), side in CASTLING.items():
        touched = (side.king_from, side.rook_from)
        if move.from_sq in touched or move.to_sq in touched:
            rights = rights.revoke(side_color, kingside)
    board.castling = rights

    board.ep_square = (move.from_sq + move.to_sq) // 2 if double_push else None

    if mover.kind is PieceKind.PAWN or capture_square is not None:
        board.halfmove_clock = 0
    else:
        board.halfmove_clock += 1
    if color is Color.BLACK:
        board.fullmove_number += 1
    board.side_to_move = color.opponent

    return AppliedMove(
        move=move,
        mover=mover,
        captured=captured,
        capture_square=capture_square,
        is_castle=castle is not None,
        is_en_passant=en_passant,
    )
