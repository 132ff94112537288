from __future__ import annotations

from typing import Dict

from .apply import make_move
from .board import Board
from .legality import generate_legal_moves


def perft(board: Board, depth: int) -> int:
    """Compute perft node count for ``board`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    ``board`` is left unchanged; children are played on copies.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    for m in generate_legal_moves(board):
        if depth == 1:
            nodes += 1
            continue
        child = board.copy()
        make_move(child, m)
        nodes += perft(child, depth - 1)
    return nodes


def divide(board: Board, depth: int) -> Dict[str, int]:
    """Per-root-move perft counts keyed by coordinate move, for debugging."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    out: Dict[str, int] = {}
    for m in generate_legal_moves(board):
        child = board.copy()
        make_move(child, m)
        out[m.to_uci()] = perft(child, depth - 1)
    return out
