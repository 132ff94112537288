from __future__ import annotations

from typing import Sequence, Tuple

from .pieces import KIND_TO_LETTER, Color, PieceKind


def render_snapshot(snapshot: Sequence[Tuple[int, int]]) -> str:
    """Render a 64-entry ``(kind_code, color_code)`` snapshot as text.

    The snapshot runs a8 .. h1, so it prints top to bottom in order: rank 8
    first, white pieces upper case, black lower case, empty squares ``.``.
    """
    if len(snapshot) != 64:
        raise ValueError("snapshot must have 64 entries")
    border = "  +-----------------+"
    lines = [border]
    for row_idx in range(8):
        row = []
        for kind, color in snapshot[row_idx * 8 : row_idx * 8 + 8]:
            if kind == PieceKind.NONE:
                row.append(".")
                continue
            ch = KIND_TO_LETTER[PieceKind(kind)]
            row.append(ch if color == Color.WHITE else ch.lower())
        lines.append(f"{8 - row_idx} | {' '.join(row)} |")
    lines.append(border)
    lines.append("    a b c d e f g h")
    return "\n".join(lines)
