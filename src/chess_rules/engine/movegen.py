"""Pseudo-legal move generation and attack detection.

Nothing here checks whether the mover's own king is left in check; that is
``legality``'s job. Movement is dispatched through per-kind lookup tables.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from .board import CASTLING, Board
from .move import Move, file_of, make_square, rank_of
from .pieces import PROMOTION_KINDS, Cell, Color, PieceKind


KNIGHT_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, 2),
    (1, 2),
    (-2, 1),
    (2, 1),
    (-2, -1),
    (2, -1),
    (-1, -2),
    (1, -2),
)
KING_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)
BISHOP_DIRS: Tuple[Tuple[int, int], ...] = ((-1, -1), (1, -1), (-1, 1), (1, 1))
ROOK_DIRS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: Tuple[Tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

# Index delta of a single pawn push, start rank and promotion rank per side.
PAWN_STEP: Dict[Color, int] = {Color.WHITE: 8, Color.BLACK: -8}
PAWN_START_RANK: Dict[Color, int] = {Color.WHITE: 1, Color.BLACK: 6}
PAWN_LAST_RANK: Dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}

Targets = Tuple[Tuple[int, ...], ...]
Rays = Tuple[Tuple[Tuple[int, ...], ...], ...]


def _build_targets(offsets: Tuple[Tuple[int, int], ...]) -> Targets:
    out: List[Tuple[int, ...]] = []
    for sq in range(64):
        f, r = file_of(sq), rank_of(sq)
        out.append(
            tuple(
                make_square(f + df, r + dr)
                for df, dr in offsets
                if 0 <= f + df < 8 and 0 <= r + dr < 8
            )
        )
    return tuple(out)


def _build_rays(directions: Tuple[Tuple[int, int], ...]) -> Rays:
    out: List[Tuple[Tuple[int, ...], ...]] = []
    for sq in range(64):
        rays: List[Tuple[int, ...]] = []
        for df, dr in directions:
            tf, tr = file_of(sq) + df, rank_of(sq) + dr
            ray: List[int] = []
            while 0 <= tf < 8 and 0 <= tr < 8:
                ray.append(make_square(tf, tr))
                tf += df
                tr += dr
            rays.append(tuple(ray))
        out.append(tuple(rays))
    return tuple(out)


LEAPER_TARGETS: Dict[PieceKind, Targets] = {
    PieceKind.KNIGHT: _build_targets(KNIGHT_OFFSETS),
    PieceKind.KING: _build_targets(KING_OFFSETS),
}
SLIDER_RAYS: Dict[PieceKind, Rays] = {
    PieceKind.BISHOP: _build_rays(BISHOP_DIRS),
    PieceKind.ROOK: _build_rays(ROOK_DIRS),
    PieceKind.QUEEN: _build_rays(QUEEN_DIRS),
}
# Diagonal-forward squares a pawn of each colour attacks from each square.
PAWN_ATTACKS: Dict[Color, Targets] = {
    Color.WHITE: _build_targets(((-1, 1), (1, 1))),
    Color.BLACK: _build_targets(((-1, -1), (1, -1))),
}


def _can_land(board: Board, to_sq: int, color: Color) -> bool:
    """Empty or enemy-occupied, never the enemy king."""
    target = board.squares[to_sq]
    if target.is_empty:
        return True
    return target.color is not color and target.kind is not PieceKind.KING


def _add_pawn_move(moves: List[Move], from_sq: int, to_sq: int, color: Color) -> None:
    if rank_of(to_sq) == PAWN_LAST_RANK[color]:
        for promo in PROMOTION_KINDS:
            moves.append(Move(from_sq, to_sq, promo))
    else:
        moves.append(Move(from_sq, to_sq))


def _pawn_moves(board: Board, sq: int, cell: Cell, moves: List[Move]) -> None:
    color = cell.color
    step = PAWN_STEP[color]
    one = sq + step
    if board.squares[one].is_empty:
        _add_pawn_move(moves, sq, one, color)
        two = one + step
        if rank_of(sq) == PAWN_START_RANK[color] and board.squares[two].is_empty:
            moves.append(Move(sq, two))
    for to_sq in PAWN_ATTACKS[color][sq]:
        target = board.squares[to_sq]
        if not target.is_empty:
            if _can_land(board, to_sq, color):
                _add_pawn_move(moves, sq, to_sq, color)
        elif to_sq == board.ep_square:
            victim = board.squares[to_sq - step]
            if victim == Cell(PieceKind.PAWN, color.opponent):
                moves.append(Move(sq, to_sq))


def _leaper_moves(board: Board, sq: int, cell: Cell, moves: List[Move]) -> None:
    for to_sq in LEAPER_TARGETS[cell.kind][sq]:
        if _can_land(board, to_sq, cell.color):
            moves.append(Move(sq, to_sq))


def _slider_moves(board: Board, sq: int, cell: Cell, moves: List[Move]) -> None:
    for ray in SLIDER_RAYS[cell.kind][sq]:
        for to_sq in ray:
            target = board.squares[to_sq]
            if target.is_empty:
                moves.append(Move(sq, to_sq))
                continue
            if _can_land(board, to_sq, cell.color):
                moves.append(Move(sq, to_sq))
            break


def _king_moves(board: Board, sq: int, cell: Cell, moves: List[Move]) -> None:
    _leaper_moves(board, sq, cell, moves)
    _castling_moves(board, sq, cell.color, moves)


def _castling_moves(board: Board, sq: int, color: Color, moves: List[Move]) -> None:
    """Castling candidates: right held, path empty, king not in check.

    Attacks on the pass-through and destination squares are checked by the
    legality filter.
    """
    in_check: Optional[bool] = None
    for kingside in (True, False):
        side = CASTLING[(color, kingside)]
        if sq != side.king_from or not board.castling.allows(color, kingside):
            continue
        if board.squares[side.rook_from] != Cell(PieceKind.ROOK, color):
            continue
        if any(not board.squares[s].is_empty for s in side.must_be_empty):
            continue
        if in_check is None:
            in_check = is_square_attacked(board, sq, color.opponent)
        if not in_check:
            moves.append(Move(sq, side.king_to))


_GENERATORS: Dict[PieceKind, Callable[[Board, int, Cell, List[Move]], None]] = {
    PieceKind.PAWN: _pawn_moves,
    PieceKind.KNIGHT: _leaper_moves,
    PieceKind.BISHOP: _slider_moves,
    PieceKind.ROOK: _slider_moves,
    PieceKind.QUEEN: _slider_moves,
    PieceKind.KING: _king_moves,
}


def generate_pseudo_legal(board: Board, color: Optional[Color] = None) -> List[Move]:
    """Return pseudo-legal moves for ``color`` (default: side to move).

    Promotions are expanded into one move per promotion kind.
    """
    color = board.side_to_move if color is None else color
    moves: List[Move] = []
    for sq, cell in enumerate(board.squares):
        if cell.is_empty or cell.color is not color:
            continue
        _GENERATORS[cell.kind](board, sq, cell, moves)
    return moves


def is_square_attacked(board: Board, sq: int, by_color: Color) -> bool:
    """Return True if ``sq`` is attacked by any piece of ``by_color``.

    Works on empty squares too (castling path checks) and uses only
    pseudo-legal movement, so it is safe to call from the legality filter.
    """
    squares = board.squares
    # A pawn of by_color attacks sq from the squares a pawn of the other
    # colour standing on sq would attack.
    pawn = Cell(PieceKind.PAWN, by_color)
    for o in PAWN_ATTACKS[by_color.opponent][sq]:
        if squares[o] == pawn:
            return True

    for kind, targets in LEAPER_TARGETS.items():
        attacker = Cell(kind, by_color)
        for o in targets[sq]:
            if squares[o] == attacker:
                return True

    for kind in (PieceKind.BISHOP, PieceKind.ROOK):
        for ray in SLIDER_RAYS[kind][sq]:
            for o in ray:
                cell = squares[o]
                if cell.is_empty:
                    continue
                if cell.color is by_color and cell.kind in (kind, PieceKind.QUEEN):
                    return True
                break
    return False
