"""Board layout strings and move-list notation.

A layout lists rows top-first, separated by ``/`` or newlines::

    "...t.../...t.../...T.../ttTKTtt/...T.../...t.../...t..."

``t`` is an attacker, ``T`` a defender, ``K`` the king and ``.`` an empty
square. Surrounding whitespace on each row is ignored.
"""

from __future__ import annotations

import re

from tafl.core.board import Board
from tafl.core.move import Move
from tafl.core.piece import Piece
from tafl.core.types import make_square

_ROW_SPLIT = re.compile(r"[/\n]")


def split_layout(layout: str) -> list[str]:
    """Return the non-empty rows of *layout*, top row first."""
    return [row.strip() for row in _ROW_SPLIT.split(layout) if row.strip()]


def board_from_layout(layout: str) -> Board:
    """Parse a layout string into a :class:`Board`."""
    rows = split_layout(layout)
    size = len(rows)
    if size == 0:
        raise ValueError("Empty board layout")
    board = Board(size)
    for row_idx, row_text in enumerate(rows):
        if len(row_text) != size:
            raise ValueError(
                f"Layout row {row_idx + 1} has width {len(row_text)}, expected {size}"
            )
        row = size - 1 - row_idx
        for col, ch in enumerate(row_text):
            if ch == ".":
                continue
            board[make_square(row, col, size)] = Piece.from_char(ch)
    return board


def layout_from_board(board: Board) -> str:
    """Serialise *board* as a ``/``-separated layout string."""
    size = board.size
    rows: list[str] = []
    for row in range(size - 1, -1, -1):
        cells = []
        for col in range(size):
            p = board[make_square(row, col, size)]
            cells.append(str(p) if p else ".")
        rows.append("".join(cells))
    return "/".join(rows)


def moves_to_text(moves: list[Move] | tuple[Move, ...], size: int) -> str:
    """Space-separated coordinate notation of *moves*."""
    return " ".join(move.notation(size) for move in moves)


def moves_from_text(text: str, size: int) -> list[Move]:
    """Parse a space-separated move list, e.g. ``'d1-d3 f4-f2'``."""
    return [Move.parse(token, size) for token in text.split()]
