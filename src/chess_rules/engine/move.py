from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .pieces import KIND_TO_LETTER, PieceKind, parse_promotion


@dataclass(frozen=True)
class Move:
    """Engine-internal move representation.

    Capture, castling and en-passant flags are not stored: they depend on the
    board the move is played on (see ``Board.is_capture`` and friends).

    Attributes:
        from_sq (int): Origin square index (a1 = 0 .. h8 = 63).
        to_sq (int): Destination square index.
        promotion (Optional[PieceKind]): Promotion kind for pawn moves onto
            the last rank.
    """

    from_sq: int
    to_sq: int
    promotion: Optional[PieceKind] = None

    def to_uci(self) -> str:
        """Serialize the move into coordinate form such as ``"e7e8q"``."""
        promo = KIND_TO_LETTER[self.promotion].lower() if self.promotion else ""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + promo

    def __str__(self) -> str:
        return self.to_uci()


def parse_uci(uci: str) -> Move:
    """Parse a coordinate move string.

    Accepts ``"e2e4"``, ``"e7e8q"`` and the separated forms ``"e2-e4"`` and
    ``"e2 e4"``.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    text = uci.strip().replace("-", "").replace(" ", "")
    if len(text) not in (4, 5):
        raise ValueError(f"invalid coordinate move length: {uci!r}")
    from_sq = str_to_square(text[0:2])
    to_sq = str_to_square(text[2:4])
    promo: Optional[PieceKind] = None
    if len(text) == 5:
        promo = parse_promotion(text[4])
    return Move(from_sq, to_sq, promo)


def make_square(file: int, rank: int) -> int:
    return rank * 8 + file


def file_of(sq: int) -> int:
    return sq % 8


def rank_of(sq: int) -> int:
    return sq // 8


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2:
        raise ValueError(f"invalid square: {s!r}")
    f, r = s[0].lower(), s[1]
    if f < "a" or f > "h" or r < "1" or r > "8":
        raise ValueError(f"invalid square: {s!r}")
    return make_square(ord(f) - ord("a"), int(r) - 1)


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    return chr(ord("a") + file_of(idx)) + str(rank_of(idx) + 1)


def square_to_index(sq: int) -> int:
    """External index of square ``sq``: a8 = 0 .. h1 = 63, rank 8 first."""
    return sq ^ 56


def index_to_square(index: int) -> int:
    """Square for external index ``index`` (a8 = 0 .. h1 = 63)."""
    return index ^ 56
