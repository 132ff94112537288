from __future__ import annotations

import pytest

from chess_rules.engine.apply import make_move
from chess_rules.engine.board import STARTPOS_FEN, Board
from chess_rules.engine.move import Move, str_to_square
from chess_rules.engine.pieces import EMPTY, Cell, Color, PieceKind


def test_make_move_updates_board_in_place() -> None:
    b = Board.from_fen(STARTPOS_FEN)
    applied = make_move(b, Move(str_to_square("e2"), str_to_square("e4")))
    assert b.to_fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    assert applied.mover == Cell(PieceKind.PAWN, Color.WHITE)
    assert not applied.is_capture and not applied.is_castle


def test_copy_then_apply_leaves_original_untouched() -> None:
    b = Board.from_fen(STARTPOS_FEN)
    child = b.copy()
    make_move(child, Move(str_to_square("g1"), str_to_square("f3")))
    assert b.to_fen() == STARTPOS_FEN
    assert child.piece_at(str_to_square("f3")) == Cell(PieceKind.KNIGHT, Color.WHITE)


def test_make_move_rejects_empty_or_enemy_origin() -> None:
    b = Board.from_fen(STARTPOS_FEN)
    with pytest.raises(ValueError):
        make_move(b, Move(str_to_square("e4"), str_to_square("e5")))
    with pytest.raises(ValueError):
        make_move(b, Move(str_to_square("e7"), str_to_square("e5")))
    assert b.to_fen() == STARTPOS_FEN


def test_capture_reports_victim() -> None:
    b = Board.from_fen("4k3/8/8/3p4/4P3/8/8/4K3 w - - 3 10")
    applied = make_move(b, Move(str_to_square("e4"), str_to_square("d5")))
    assert applied.captured == Cell(PieceKind.PAWN, Color.BLACK)
    assert applied.capture_square == str_to_square("d5")
    assert b.piece_at(str_to_square("e4")) == EMPTY
    assert b.halfmove_clock == 0
    assert b.fullmove_number == 10
