from __future__ import annotations

import pytest

from chess_rules.engine.board import STARTPOS_FEN, Board
from chess_rules.engine.perft import divide, perft


def test_perft_startpos_depths_1_3() -> None:
    b = Board.from_fen(STARTPOS_FEN)
    assert perft(b, 0) == 1
    assert perft(b, 1) == 20
    assert perft(b, 2) == 400
    assert perft(b, 3) == 8902
    assert b.to_fen() == STARTPOS_FEN


def test_perft_kiwipete_depth_2() -> None:
    # Classic Kiwipete position
    fen = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
    b = Board.from_fen(fen)
    assert perft(b, 1) == 48
    assert perft(b, 2) == 2039


def test_perft_position3_en_passant_and_pins() -> None:
    b = Board.from_fen("8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1")
    assert perft(b, 1) == 14
    assert perft(b, 2) == 191
    assert perft(b, 3) == 2812


def test_perft_position4_castling_and_promotions() -> None:
    b = Board.from_fen("r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1")
    assert perft(b, 1) == 6
    assert perft(b, 2) == 264


def test_perft_underpromotion_heavy_position() -> None:
    b = Board.from_fen("n1n5/PPPk4/8/8/8/8/4Kppp/5N1N b - - 0 1")
    assert perft(b, 1) == 24
    assert perft(b, 2) == 496


def test_divide_sums_to_perft() -> None:
    b = Board.startpos()
    split = divide(b, 2)
    assert len(split) == 20
    assert split["e2e4"] == 20
    assert sum(split.values()) == perft(b, 2)


def test_perft_rejects_negative_depth() -> None:
    with pytest.raises(ValueError):
        perft(Board.startpos(), -1)
