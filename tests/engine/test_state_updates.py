from __future__ import annotations

from chess_rules.engine.apply import make_move
from chess_rules.engine.board import Board
from chess_rules.engine.legality import generate_legal_moves
from chess_rules.engine.move import Move
from chess_rules.engine.pieces import Color


def _find(b: Board, uci: str) -> Move:
    return next(m for m in generate_legal_moves(b) if m.to_uci() == uci)


def test_halfmove_and_fullmove_counters_and_ep_clearing() -> None:
    b = Board.startpos()
    assert b.halfmove_clock == 0 and b.fullmove_number == 1

    # e2e4: pawn move resets halfmove, sets ep to e3, side -> black
    make_move(b, _find(b, "e2e4"))
    assert b.halfmove_clock == 0
    assert b.side_to_move is Color.BLACK
    assert " e3 " in b.to_fen()
    assert b.fullmove_number == 1  # increments after black moves

    # g8f6: knight move increments halfmove, clears ep, side -> white, fullmove -> 2
    make_move(b, _find(b, "g8f6"))
    assert b.halfmove_clock == 1
    assert b.side_to_move is Color.WHITE
    assert " - " in b.to_fen()
    assert b.fullmove_number == 2

    # e4e5: pawn move resets halfmove
    make_move(b, _find(b, "e4e5"))
    assert b.halfmove_clock == 0


def test_castling_rights_update_on_king_and_rook_moves_and_captures() -> None:
    b = Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")

    # White rook moves h1h2: remove white 'K' right only
    make_move(b, _find(b, "h1h2"))
    assert b.castling.to_fen() == "Qkq"

    # Black rook captures a1: removes black 'q' (moved from a8) and white 'Q' (captured on a1)
    make_move(b, _find(b, "a8a1"))
    assert b.castling.to_fen() == "k"

    # Black king move removes the last right
    make_move(b, _find(b, "e1e2"))
    make_move(b, _find(b, "e8d8"))
    assert b.castling.to_fen() == "-"
