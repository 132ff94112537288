from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, NamedTuple, Optional, Tuple

from .move import (
    Move,
    file_of,
    index_to_square,
    make_square,
    rank_of,
    square_to_str,
    str_to_square,
)
from .pieces import EMPTY, Cell, Color, PieceKind, cell_to_char, char_to_cell


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

Snapshot = Tuple[Tuple[int, int], ...]


class CastleSide(NamedTuple):
    """Fixed geometry of one castling option."""

    king_from: int
    king_to: int
    rook_from: int
    rook_to: int
    must_be_empty: Tuple[int, ...]
    king_path: Tuple[int, ...]  # start, pass-through and destination


# Keyed by (colour, kingside).
CASTLING: Dict[Tuple[Color, bool], CastleSide] = {
    (Color.WHITE, True): CastleSide(4, 6, 7, 5, (5, 6), (4, 5, 6)),
    (Color.WHITE, False): CastleSide(4, 2, 0, 3, (1, 2, 3), (4, 3, 2)),
    (Color.BLACK, True): CastleSide(60, 62, 63, 61, (61, 62), (60, 61, 62)),
    (Color.BLACK, False): CastleSide(60, 58, 56, 59, (57, 58, 59), (60, 59, 58)),
}


@dataclass(frozen=True)
class CastlingRights:
    """Four independent castling flags."""

    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True

    def allows(self, color: Color, kingside: bool) -> bool:
        if color is Color.WHITE:
            return self.white_kingside if kingside else self.white_queenside
        if color is Color.BLACK:
            return self.black_kingside if kingside else self.black_queenside
        return False

    def revoke(self, color: Color, kingside: Optional[bool] = None) -> "CastlingRights":
        """Return rights with one side (or both when ``kingside`` is None) cleared."""
        prefix = "white" if color is Color.WHITE else "black"
        changes = {}
        if kingside is None or kingside:
            changes[f"{prefix}_kingside"] = False
        if kingside is None or not kingside:
            changes[f"{prefix}_queenside"] = False
        return replace(self, **changes)

    def to_fen(self) -> str:
        s = "".join(
            ch
            for ch, flag in (
                ("K", self.white_kingside),
                ("Q", self.white_queenside),
                ("k", self.black_kingside),
                ("q", self.black_queenside),
            )
            if flag
        )
        return s or "-"

    @classmethod
    def from_fen(cls, text: str) -> "CastlingRights":
        if text == "-":
            return cls(False, False, False, False)
        if not text or any(ch not in "KQkq" for ch in text) or len(set(text)) != len(text):
            raise ValueError("invalid castling rights")
        return cls("K" in text, "Q" in text, "k" in text, "q" in text)


@dataclass
class Board:
    """Canonical position: 64 cells plus side to move, rights and counters.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from White's perspective.
      Public indices and snapshots use the rank-8-first order instead.
    - Cells are changed only by ``apply.make_move``; everything else reads.
    """

    squares: List[Cell]
    side_to_move: Color
    castling: CastlingRights
    ep_square: Optional[int]  # square index or None
    halfmove_clock: int
    fullmove_number: int

    def __post_init__(self) -> None:
        if len(self.squares) != 64:
            raise ValueError("board must have 64 squares")

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board initialized to the standard chess starting position."""
        return cls.from_fen(STARTPOS_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> "Board":
        """Create a board from a Forsyth–Edwards Notation (FEN) string.

        Raises:
            ValueError: If ``fen`` is empty, has the wrong number of fields,
                contains invalid placement, rights, en passant square or
                counters, lacks exactly one king per side, puts a pawn on the
                first or last rank, or leaves the side not to move in check.
        """
        if not fen or not isinstance(fen, str):
            raise ValueError("FEN must be a non-empty string")
        parts = fen.strip().split()
        if len(parts) != 6:
            raise ValueError("FEN must have 6 fields")
        placement, stm, castling, ep, halfmove, fullmove = parts

        ranks = placement.split("/")
        if len(ranks) != 8:
            raise ValueError("FEN board must have 8 ranks")
        squares: List[Cell] = [EMPTY] * 64
        for rank_idx, rank in enumerate(reversed(ranks)):  # start from rank 1
            file_idx = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in FEN rank")
                    file_idx += n
                    continue
                if file_idx >= 8:
                    raise ValueError("too many squares in FEN rank")
                cell = char_to_cell(ch)
                if cell.kind is PieceKind.PAWN and rank_idx in (0, 7):
                    raise ValueError("pawn on first or last rank in FEN")
                squares[make_square(file_idx, rank_idx)] = cell
                file_idx += 1
            if file_idx != 8:
                raise ValueError("rank does not sum to 8 squares in FEN")

        for color in (Color.WHITE, Color.BLACK):
            kings = sum(1 for c in squares if c == Cell(PieceKind.KING, color))
            if kings != 1:
                raise ValueError(f"FEN must contain exactly one {color.name.lower()} king")

        if stm not in ("w", "b"):
            raise ValueError("side to move must be 'w' or 'b'")
        side_to_move = Color.WHITE if stm == "w" else Color.BLACK

        ep_square: Optional[int]
        if ep == "-":
            ep_square = None
        else:
            try:
                ep_square = str_to_square(ep)
            except ValueError as e:
                raise ValueError("invalid en passant square") from e
            # The target sits behind a pawn the opponent just pushed two squares.
            if rank_of(ep_square) != (5 if side_to_move is Color.WHITE else 2):
                raise ValueError("invalid en passant square rank")

        try:
            halfmove_clock = int(halfmove)
            fullmove_number = int(fullmove)
        except ValueError as e:
            raise ValueError("invalid move counters in FEN") from e
        if halfmove_clock < 0 or fullmove_number <= 0:
            raise ValueError("invalid move counters in FEN")

        board = cls(
            squares=squares,
            side_to_move=side_to_move,
            castling=CastlingRights.from_fen(castling),
            ep_square=ep_square,
            halfmove_clock=halfmove_clock,
            fullmove_number=fullmove_number,
        )
        # movegen imports this module
        from .movegen import is_square_attacked

        idle = side_to_move.opponent
        if is_square_attacked(board, board.king_square(idle), side_to_move):
            raise ValueError(f"{idle.name.lower()} is in check but not to move")
        return board

    def to_fen(self) -> str:
        """Serialize the current position into a normalized FEN string."""
        rows: List[str] = []
        for rank_idx in range(7, -1, -1):
            run = 0
            row = []
            for file_idx in range(8):
                ch = cell_to_char(self.squares[make_square(file_idx, rank_idx)])
                if ch is None:
                    run += 1
                    continue
                if run:
                    row.append(str(run))
                    run = 0
                row.append(ch)
            if run:
                row.append(str(run))
            rows.append("".join(row))
        stm = "w" if self.side_to_move is Color.WHITE else "b"
        ep = square_to_str(self.ep_square) if self.ep_square is not None else "-"
        return (
            f"{'/'.join(rows)} {stm} {self.castling.to_fen()} {ep} "
            f"{self.halfmove_clock} {self.fullmove_number}"
        )

    # --- Read access ---
    def piece_at(self, sq: int) -> Cell:
        return self.squares[sq]

    def king_square(self, color: Color) -> int:
        king = Cell(PieceKind.KING, color)
        for sq, cell in enumerate(self.squares):
            if cell == king:
                return sq
        raise ValueError(f"no {color.name.lower()} king on the board")

    def snapshot(self) -> Snapshot:
        """Immutable ``(kind_code, color_code)`` per external index.

        Index 0 is a8 and 63 is h1 (rank 8 first), see ``move.square_to_index``.
        """
        return tuple(self.squares[index_to_square(i)].encode() for i in range(64))

    def copy(self) -> "Board":
        return Board(
            squares=list(self.squares),
            side_to_move=self.side_to_move,
            castling=self.castling,
            ep_square=self.ep_square,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    # --- Move flags derived from this position ---
    def is_en_passant(self, move: Move) -> bool:
        cell = self.squares[move.from_sq]
        return (
            cell.kind is PieceKind.PAWN
            and move.to_sq == self.ep_square
            and file_of(move.from_sq) != file_of(move.to_sq)
        )

    def is_capture(self, move: Move) -> bool:
        target = self.squares[move.to_sq]
        mover = self.squares[move.from_sq]
        if not target.is_empty and target.color is not mover.color:
            return True
        return self.is_en_passant(move)

    def is_castle(self, move: Move) -> bool:
        cell = self.squares[move.from_sq]
        return cell.kind is PieceKind.KING and abs(move.to_sq - move.from_sq) == 2

    def is_double_push(self, move: Move) -> bool:
        cell = self.squares[move.from_sq]
        return cell.kind is PieceKind.PAWN and abs(move.to_sq - move.from_sq) == 16

    def castle_side(self, move: Move) -> Optional[CastleSide]:
        if not self.is_castle(move):
            return None
        color = self.squares[move.from_sq].color
        return CASTLING[(color, move.to_sq > move.from_sq)]
