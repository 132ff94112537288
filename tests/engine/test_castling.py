from __future__ import annotations

from chess_rules.engine.apply import make_move
from chess_rules.engine.board import Board
from chess_rules.engine.legality import generate_legal_moves
from chess_rules.engine.move import Move, str_to_square
from chess_rules.engine.pieces import EMPTY, Cell, Color, PieceKind


def moves_set(b: Board) -> set[str]:
    return {m.to_uci() for m in generate_legal_moves(b)}


def _find(b: Board, uci: str) -> Move:
    return next(m for m in generate_legal_moves(b) if m.to_uci() == uci)


def test_white_castling_available_when_clear_and_not_in_check() -> None:
    b = Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    ms = moves_set(b)
    assert "e1g1" in ms
    assert "e1c1" in ms


def test_black_castling_available() -> None:
    b = Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
    ms = moves_set(b)
    assert "e8g8" in ms
    assert "e8c8" in ms


def test_white_castling_blocked_when_in_check() -> None:
    # Black rook on e8 gives check on e1
    b = Board.from_fen("4r2k/8/8/8/8/8/7P/R3K2R w KQ - 0 1")
    ms = moves_set(b)
    assert "e1g1" not in ms
    assert "e1c1" not in ms


def test_castling_requires_the_right() -> None:
    b = Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w Qkq - 0 1")
    ms = moves_set(b)
    assert "e1g1" not in ms
    assert "e1c1" in ms


def test_kingside_castle_moves_rook() -> None:
    b = Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    applied = make_move(b, _find(b, "e1g1"))
    assert applied.is_castle
    assert b.piece_at(str_to_square("g1")) == Cell(PieceKind.KING, Color.WHITE)
    assert b.piece_at(str_to_square("f1")) == Cell(PieceKind.ROOK, Color.WHITE)
    assert b.piece_at(str_to_square("h1")) == EMPTY
    assert b.piece_at(str_to_square("e1")) == EMPTY
    assert b.castling.to_fen() == "kq"


def test_black_queenside_castle_moves_rook() -> None:
    b = Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
    make_move(b, _find(b, "e8c8"))
    assert b.piece_at(str_to_square("c8")) == Cell(PieceKind.KING, Color.BLACK)
    assert b.piece_at(str_to_square("d8")) == Cell(PieceKind.ROOK, Color.BLACK)
    assert b.piece_at(str_to_square("a8")) == EMPTY
    assert b.castling.to_fen() == "KQ"


def test_rook_capture_on_home_square_removes_right() -> None:
    b = Board.from_fen("r3k2r/8/8/8/8/8/6b1/R3K2R b KQkq - 0 1")
    make_move(b, _find(b, "g2h1"))
    assert not b.castling.allows(Color.WHITE, True)
    assert b.castling.allows(Color.WHITE, False)
    assert "e1g1" not in moves_set(b)
