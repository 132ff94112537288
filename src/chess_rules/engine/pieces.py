from __future__ import annotations

from enum import IntEnum
from typing import Dict, NamedTuple, Optional, Tuple


class PieceKind(IntEnum):
    """Piece kinds. Values double as the external snapshot codes."""

    NONE = 0
    PAWN = 1
    ROOK = 2
    KNIGHT = 3
    BISHOP = 4
    QUEEN = 5
    KING = 6


class Color(IntEnum):
    """Piece colours. Values double as the external snapshot codes."""

    WHITE = -1
    NONE = 0
    BLACK = 1

    @property
    def opponent(self) -> "Color":
        if self is Color.NONE:
            return Color.NONE
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class Cell(NamedTuple):
    """Contents of one square: ``(kind, color)``."""

    kind: PieceKind
    color: Color

    @property
    def is_empty(self) -> bool:
        return self.kind is PieceKind.NONE

    def encode(self) -> Tuple[int, int]:
        return int(self.kind), int(self.color)


EMPTY = Cell(PieceKind.NONE, Color.NONE)

PROMOTION_KINDS: Tuple[PieceKind, ...] = (
    PieceKind.QUEEN,
    PieceKind.ROOK,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
)

# Upper-case letters as used by FEN (white) and SAN piece prefixes.
KIND_TO_LETTER: Dict[PieceKind, str] = {
    PieceKind.PAWN: "P",
    PieceKind.ROOK: "R",
    PieceKind.KNIGHT: "N",
    PieceKind.BISHOP: "B",
    PieceKind.QUEEN: "Q",
    PieceKind.KING: "K",
}
LETTER_TO_KIND: Dict[str, PieceKind] = {v: k for k, v in KIND_TO_LETTER.items()}


def cell_to_char(cell: Cell) -> Optional[str]:
    """Return the FEN character for ``cell`` or ``None`` when empty."""
    if cell.is_empty:
        return None
    ch = KIND_TO_LETTER[cell.kind]
    return ch if cell.color is Color.WHITE else ch.lower()


def char_to_cell(ch: str) -> Cell:
    """Parse a FEN piece character.

    Raises:
        ValueError: If ``ch`` is not one of ``PNBRQKpnbrqk``.
    """
    kind = LETTER_TO_KIND.get(ch.upper())
    if kind is None or len(ch) != 1:
        raise ValueError(f"invalid piece character: {ch!r}")
    return Cell(kind, Color.WHITE if ch.isupper() else Color.BLACK)


def parse_promotion(value: object) -> Optional[PieceKind]:
    """Coerce a promotion choice given as kind, code or letter.

    Returns ``None`` for ``None``. Raises ``ValueError`` for anything that is
    not one of queen, rook, bishop or knight.
    """
    if value is None:
        return None
    kind: Optional[PieceKind] = None
    if isinstance(value, PieceKind):
        kind = value
    elif isinstance(value, str):
        kind = LETTER_TO_KIND.get(value.strip().upper()) if len(value.strip()) == 1 else None
    elif isinstance(value, int) and not isinstance(value, bool):
        try:
            kind = PieceKind(value)
        except ValueError:
            kind = None
    if kind not in PROMOTION_KINDS:
        raise ValueError(f"invalid promotion piece: {value!r}")
    return kind
