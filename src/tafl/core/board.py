"""Board - piece placement on an N×N grid."""

from __future__ import annotations

from tafl.core.enums import Side
from tafl.core.piece import Piece
from tafl.core.types import MAX_SIZE, MIN_SIZE, Square, make_square

_SIDE_COUNT = 2
_FILES = "abcdefghijklmnopqrs"


class Board:
    """Mutable N×N board with per-side piece indexes.

    Callers that hand a board to a :class:`~tafl.core.state.GameState` give up
    ownership; the engine copies before mutating.
    """

    __slots__ = ("size", "_squares", "_side_sets", "_king_square")

    def __init__(self, size: int) -> None:
        if not MIN_SIZE <= size <= MAX_SIZE:
            raise ValueError(f"Board size out of range: {size}")
        self.size = size
        self._squares: list[Piece | None] = [None] * (size * size)
        # [side] -> occupied squares of that side (king included for defenders).
        self._side_sets: list[set[Square]] = [set() for _ in range(_SIDE_COUNT)]
        self._king_square: Square | None = None

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old_piece = self._squares[sq]
        if old_piece == piece:
            return

        if old_piece is not None:
            self._side_sets[int(old_piece.side)].discard(sq)
            if old_piece.is_king and self._king_square == sq:
                self._king_square = None

        self._squares[sq] = piece

        if piece is None:
            return

        self._side_sets[int(piece.side)].add(sq)
        if piece.is_king:
            self._king_square = sq

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    def __len__(self) -> int:
        return len(self._squares)

    # -- Query helpers ------------------------------------------------------

    def pieces(self, side: Side) -> list[Square]:
        """Squares occupied by *side*, in ascending square order."""
        return sorted(self._side_sets[int(side)])

    def count(self, side: Side) -> int:
        """Number of pieces of *side* (the king counts for the defenders)."""
        return len(self._side_sets[int(side)])

    def piece_count(self) -> int:
        return len(self._side_sets[0]) + len(self._side_sets[1])

    @property
    def king_square(self) -> Square | None:
        return self._king_square

    # -- Mutation / copying -------------------------------------------------

    def move_piece(self, from_sq: Square, to_sq: Square) -> None:
        piece = self._squares[from_sq]
        if piece is None:
            raise ValueError(f"No piece on square {from_sq}")
        self[from_sq] = None
        self[to_sq] = piece

    def copy(self) -> Board:
        b = Board.__new__(Board)
        b.size = self.size
        b._squares = self._squares.copy()
        b._side_sets = [squares.copy() for squares in self._side_sets]
        b._king_square = self._king_square
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and self._squares == other._squares

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        size = self.size
        width = len(str(size))
        rows: list[str] = []
        for row in range(size - 1, -1, -1):
            cells = []
            for col in range(size):
                p = self[make_square(row, col, size)]
                cells.append(str(p) if p else ".")
            rows.append(f"{row + 1:>{width}} {' '.join(cells)}")
        rows.append(f"{'':>{width}} {' '.join(_FILES[:size])}")
        return "\n".join(rows)
