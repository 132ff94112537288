"""Turn move requests (SAN, coordinate text, index pairs) into legal moves.

Translation never raises on bad input: every outcome is a ``Resolution``
holding either the resolved ``Move`` or the ``Rejection`` reason.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union

from .apply import make_move
from .board import CASTLING, Board
from .legality import generate_legal_moves, has_legal_moves, in_check
from .move import (
    Move,
    file_of,
    index_to_square,
    parse_uci,
    rank_of,
    square_to_str,
    str_to_square,
)
from .movegen import generate_pseudo_legal
from .pieces import KIND_TO_LETTER, LETTER_TO_KIND, Cell, PieceKind, parse_promotion


class Rejection(str, Enum):
    MALFORMED = "malformed"
    OUT_OF_RANGE = "out_of_range"
    NO_PIECE = "no_piece"
    WRONG_SIDE = "wrong_side"
    NO_MATCH = "no_match"
    AMBIGUOUS = "ambiguous"
    PROMOTION_REQUIRED = "promotion_required"
    ILLEGAL = "illegal"  # pseudo-legal, but leaves the own king attacked
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Resolution:
    move: Optional[Move] = None
    rejection: Optional[Rejection] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.move is not None

    @classmethod
    def accept(cls, move: Move) -> "Resolution":
        return cls(move=move)

    @classmethod
    def reject(cls, reason: Rejection, detail: str = "") -> "Resolution":
        return cls(rejection=reason, detail=detail)


_CASTLE_TOKENS = {"O-O": True, "O-O-O": False}
_COORD_RE = re.compile(r"^[a-h][1-8][- ]?[a-h][1-8][qrbnQRBN]?$")
_SAN_RE = re.compile(
    r"^(?P<piece>[KQRBN])?(?P<file>[a-h])?(?P<rank>[1-8])?(?P<capture>x)?"
    r"(?P<dest>[a-h][1-8])(?:=?(?P<promo>[QRBNqrbn]))?$"
)

MovePredicate = Callable[[Move], bool]


def translate_algebraic(board: Board, text: str) -> Resolution:
    """Resolve SAN (``Nf3``, ``exd5``, ``e8=Q+``, ``O-O``) or coordinate
    text (``e2e4``, ``e7e8q``) against the legal moves of ``board``.
    """
    if not isinstance(text, str):
        return Resolution.reject(Rejection.MALFORMED, "notation must be a string")
    clean = text.strip().rstrip("+#!?")
    if not clean:
        return Resolution.reject(Rejection.MALFORMED, "empty notation")

    castle = _CASTLE_TOKENS.get(clean.upper().replace("0", "O"))
    if castle is not None:
        return _resolve_castle(board, castle)

    if _COORD_RE.match(clean):
        try:
            req = parse_uci(clean)
        except ValueError as e:
            return Resolution.reject(Rejection.MALFORMED, str(e))
        return _translate_squares(board, req.from_sq, req.to_sq, req.promotion)

    m = _SAN_RE.match(clean)
    if m is None:
        return Resolution.reject(Rejection.MALFORMED, f"unrecognised notation: {text!r}")

    kind = LETTER_TO_KIND[m.group("piece")] if m.group("piece") else PieceKind.PAWN
    dest = str_to_square(m.group("dest"))
    promo = LETTER_TO_KIND[m.group("promo").upper()] if m.group("promo") else None
    if promo is not None and kind is not PieceKind.PAWN:
        return Resolution.reject(Rejection.MALFORMED, "only pawns promote")
    from_file = ord(m.group("file")) - ord("a") if m.group("file") else None
    from_rank = int(m.group("rank")) - 1 if m.group("rank") else None
    wants_capture = m.group("capture") is not None

    def matches(mv: Move) -> bool:
        if mv.to_sq != dest or board.squares[mv.from_sq].kind is not kind:
            return False
        if from_file is not None and file_of(mv.from_sq) != from_file:
            return False
        if from_rank is not None and rank_of(mv.from_sq) != from_rank:
            return False
        # A bare pawn destination ("d5") only ever means a push.
        if kind is PieceKind.PAWN and from_file is None and file_of(mv.from_sq) != file_of(dest):
            return False
        if wants_capture and not board.is_capture(mv):
            return False
        return True

    return _resolve(board, matches, promo, text)


def translate_index(
    board: Board, from_idx: int, to_idx: int, promotion: Union[PieceKind, int, str, None] = None
) -> Resolution:
    """Resolve an external index pair plus optional promotion.

    Indices run a8 = 0 .. h1 = 63, rank 8 first (see ``move.square_to_index``).
    ``promotion`` may be a ``PieceKind``, its integer code or a letter. A king
    moved onto its own unmoved rook is read as the matching castling move.
    """
    if not (_is_square_index(from_idx) and _is_square_index(to_idx)):
        return Resolution.reject(
            Rejection.OUT_OF_RANGE, f"indices out of range: {from_idx}, {to_idx}"
        )
    return _translate_squares(board, index_to_square(from_idx), index_to_square(to_idx), promotion)


def _translate_squares(
    board: Board, from_sq: int, to_sq: int, promotion: Union[PieceKind, int, str, None]
) -> Resolution:
    try:
        promo = parse_promotion(promotion)
    except ValueError as e:
        return Resolution.reject(Rejection.MALFORMED, str(e))

    mover = board.squares[from_sq]
    if mover.is_empty:
        return Resolution.reject(Rejection.NO_PIECE, f"no piece on {square_to_str(from_sq)}")
    if mover.color is not board.side_to_move:
        return Resolution.reject(Rejection.WRONG_SIDE, f"{mover.color.name.lower()} is not to move")

    if mover.kind is PieceKind.KING:
        for kingside in (True, False):
            side = CASTLING[(mover.color, kingside)]
            rook = Cell(PieceKind.ROOK, mover.color)
            if from_sq == side.king_from and to_sq == side.rook_from and board.squares[to_sq] == rook:
                to_sq = side.king_to

    return _resolve(
        board,
        lambda mv: mv.from_sq == from_sq and mv.to_sq == to_sq,
        promo,
        f"{square_to_str(from_sq)}{square_to_str(to_sq)}",
    )


def _resolve(
    board: Board, matches: MovePredicate, promo: Optional[PieceKind], text: str
) -> Resolution:
    candidates = [mv for mv in generate_legal_moves(board) if matches(mv)]
    if not candidates:
        if any(matches(mv) for mv in generate_pseudo_legal(board)):
            return Resolution.reject(Rejection.ILLEGAL, f"{text} leaves the king in check")
        return Resolution.reject(Rejection.NO_MATCH, f"no legal move matches {text}")

    if any(mv.promotion is not None for mv in candidates):
        if promo is None:
            return Resolution.reject(Rejection.PROMOTION_REQUIRED, f"{text} needs a promotion piece")
    candidates = [mv for mv in candidates if mv.promotion == promo]

    if not candidates:
        return Resolution.reject(Rejection.NO_MATCH, f"no legal move matches {text}")
    if len(candidates) > 1:
        origins = ", ".join(square_to_str(mv.from_sq) for mv in candidates)
        return Resolution.reject(Rejection.AMBIGUOUS, f"{text} could come from {origins}")
    return Resolution.accept(candidates[0])


def _resolve_castle(board: Board, kingside: bool) -> Resolution:
    side = CASTLING[(board.side_to_move, kingside)]
    for mv in generate_legal_moves(board):
        if mv.from_sq == side.king_from and mv.to_sq == side.king_to and board.is_castle(mv):
            return Resolution.accept(mv)
    token = "O-O" if kingside else "O-O-O"
    return Resolution.reject(Rejection.ILLEGAL, f"{token} is not available")


def _is_square_index(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 63


def move_to_san(board: Board, move: Move) -> str:
    """Convert a legal ``move`` to SAN given the position before the move."""
    piece = board.squares[move.from_sq]
    castle = board.castle_side(move)
    if castle is not None:
        san = "O-O" if castle.king_to > castle.king_from else "O-O-O"
    else:
        capture = board.is_capture(move)
        if piece.kind is PieceKind.PAWN:
            san = chr(ord("a") + file_of(move.from_sq)) if capture else ""
        else:
            san = KIND_TO_LETTER[piece.kind]
            rivals: List[Move] = [
                mv
                for mv in generate_legal_moves(board)
                if mv.to_sq == move.to_sq
                and mv.from_sq != move.from_sq
                and board.squares[mv.from_sq].kind is piece.kind
            ]
            if rivals:
                if all(file_of(mv.from_sq) != file_of(move.from_sq) for mv in rivals):
                    san += chr(ord("a") + file_of(move.from_sq))
                elif all(rank_of(mv.from_sq) != rank_of(move.from_sq) for mv in rivals):
                    san += str(rank_of(move.from_sq) + 1)
                else:
                    san += square_to_str(move.from_sq)
        if capture:
            san += "x"
        san += square_to_str(move.to_sq)
        if move.promotion is not None:
            san += "=" + KIND_TO_LETTER[move.promotion]

    after = board.copy()
    make_move(after, move)
    if in_check(after):
        san += "+" if has_legal_moves(after) else "#"
    return san
