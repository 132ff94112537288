from __future__ import annotations

from chess_rules.engine.board import Board
from chess_rules.engine.move import str_to_square
from chess_rules.engine.movegen import generate_pseudo_legal, is_square_attacked
from chess_rules.engine.pieces import Cell, Color, PieceKind


def _from(b: Board, sq_name: str) -> set[str]:
    sq = str_to_square(sq_name)
    return {m.to_uci() for m in generate_pseudo_legal(b) if m.from_sq == sq}


def test_startpos_pseudo_legal_count() -> None:
    assert len(generate_pseudo_legal(Board.startpos())) == 20


def test_rook_on_open_board() -> None:
    b = Board.from_fen("4k3/8/8/8/3R4/8/8/4K3 w - - 0 1")
    assert len(_from(b, "d4")) == 14


def test_slider_stops_at_first_blocker() -> None:
    # Enemy pawn d7 is capturable, d8 behind it is not; own pawn d2 blocks d2/d1
    b = Board.from_fen("4k3/3p4/8/8/3R4/8/3P4/4K3 w - - 0 1")
    ms = _from(b, "d4")
    assert len(ms) == 11
    assert "d4d7" in ms
    assert "d4d8" not in ms
    assert "d4d2" not in ms and "d4d1" not in ms


def test_bishop_and_queen_rays() -> None:
    b = Board.from_fen("4k3/8/8/8/8/8/8/B3K2Q w - - 0 1")
    assert len(_from(b, "a1")) == 7
    # h1 queen: 7 up the file, 7 on the diagonal, g1/f1 along the rank (e1 own king)
    assert len(_from(b, "h1")) == 16


def test_knight_in_corner_and_centre() -> None:
    b = Board.from_fen("4k3/8/8/8/3N4/8/8/N3K3 w - - 0 1")
    assert _from(b, "a1") == {"a1b3", "a1c2"}
    assert len(_from(b, "d4")) == 8


def test_pawn_pushes_and_captures() -> None:
    b = Board.from_fen("4k3/8/8/8/8/2p1p3/3P4/4K3 w - - 0 1")
    assert _from(b, "d2") == {"d2d3", "d2d4", "d2c3", "d2e3"}
    blocked = Board.from_fen("4k3/8/8/8/8/3p4/3P4/4K3 w - - 0 1")
    assert _from(blocked, "d2") == set()


def test_black_pawn_moves_downward() -> None:
    b = Board.from_fen("4k3/3p4/8/8/8/8/8/4K3 b - - 0 1")
    assert _from(b, "d7") == {"d7d6", "d7d5"}


def test_king_capture_is_never_generated() -> None:
    # FEN refuses a king left en prise, so place the rook by hand.
    b = Board.from_fen("4k3/8/8/8/8/8/8/4K3 b - - 0 1")
    b.squares[str_to_square("a1")] = Cell(PieceKind.ROOK, Color.BLACK)
    assert "a1e1" not in _from(b, "a1")
    assert {"a1b1", "a1c1", "a1d1"} <= _from(b, "a1")


def test_castling_candidates_require_empty_path_and_rook() -> None:
    b = Board.from_fen("r3k2r/8/8/8/8/8/8/RN2K2R w KQkq - 0 1")
    ms = _from(b, "e1")
    assert "e1g1" in ms
    assert "e1c1" not in ms
    no_rook = Board.from_fen("4k3/8/8/8/8/8/8/4K2R w KQ - 0 1")
    assert "e1c1" not in _from(no_rook, "e1")
    assert "e1g1" in _from(no_rook, "e1")


def test_castling_candidates_absent_when_in_check() -> None:
    b = Board.from_fen("4r2k/8/8/8/8/8/7P/R3K2R w KQ - 0 1")
    ms = _from(b, "e1")
    assert "e1g1" not in ms and "e1c1" not in ms


def test_square_attacks() -> None:
    b = Board.startpos()
    assert is_square_attacked(b, str_to_square("f3"), Color.WHITE)
    assert not is_square_attacked(b, str_to_square("e4"), Color.WHITE)
    assert is_square_attacked(b, str_to_square("e6"), Color.BLACK)
    assert not is_square_attacked(b, str_to_square("e5"), Color.BLACK)


def test_slider_attack_blocked_by_any_piece() -> None:
    b = Board.from_fen("4k3/8/8/8/8/8/4P3/4KR1r w - - 0 1")
    assert is_square_attacked(b, str_to_square("g1"), Color.BLACK)
    assert not is_square_attacked(b, str_to_square("e1"), Color.BLACK)
    assert is_square_attacked(b, str_to_square("f1"), Color.BLACK)
