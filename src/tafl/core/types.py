"""Square type alias and coordinate helpers for N×N boards.

Board layout (row-major, row 0 at the bottom)::

    a1=0, b1=1, ..., (N-1, 0)
    a2=N, ...
    ...

Column letters skip nothing: a board of size 13 uses ``a`` … ``m``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TypeAlias

Square: TypeAlias = int

MIN_SIZE = 5
MAX_SIZE = 19

# (row delta, col delta): up, right, down, left
DIRECTIONS: tuple[tuple[int, int], ...] = ((1, 0), (0, 1), (-1, 0), (0, -1))

_FILES = "abcdefghijklmnopqrs"


def row_of(sq: Square, size: int) -> int:
    return sq // size


def col_of(sq: Square, size: int) -> int:
    return sq % size


def make_square(row: int, col: int, size: int) -> Square:
    """Create square from row and column (both 0-based)."""
    return row * size + col


def in_bounds(row: int, col: int, size: int) -> bool:
    return 0 <= row < size and 0 <= col < size


def square_name(sq: Square, size: int) -> str:
    """Human-readable name, e.g. ``0 → 'a1'``."""
    return f"{_FILES[col_of(sq, size)]}{row_of(sq, size) + 1}"


def parse_square(name: str, size: int) -> Square:
    """Parse a square name such as ``'f6'`` for a board of *size*."""
    text = name.strip().lower()
    if len(text) < 2 or text[0] not in _FILES[:size] or not text[1:].isdigit():
        raise ValueError(f"Invalid square name: {name!r}")
    row = int(text[1:]) - 1
    if not 0 <= row < size:
        raise ValueError(f"Invalid square name: {name!r}")
    return make_square(row, _FILES.index(text[0]), size)


@lru_cache(maxsize=None)
def neighbors(size: int) -> tuple[tuple[Square | None, ...], ...]:
    """Per-square orthogonal neighbours in :data:`DIRECTIONS` order.

    Off-board neighbours are ``None``.
    """
    table: list[tuple[Square | None, ...]] = []
    for sq in range(size * size):
        row, col = divmod(sq, size)
        entry: list[Square | None] = []
        for dr, dc in DIRECTIONS:
            r, c = row + dr, col + dc
            entry.append(make_square(r, c, size) if in_bounds(r, c, size) else None)
        table.append(tuple(entry))
    return tuple(table)


@lru_cache(maxsize=None)
def rays(size: int) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    """Per-square sliding rays, nearest square first, in :data:`DIRECTIONS` order."""
    table: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(size * size):
        row, col = divmod(sq, size)
        per_dir: list[tuple[Square, ...]] = []
        for dr, dc in DIRECTIONS:
            ray: list[Square] = []
            r, c = row + dr, col + dc
            while in_bounds(r, c, size):
                ray.append(make_square(r, c, size))
                r += dr
                c += dc
            per_dir.append(tuple(ray))
        table.append(tuple(per_dir))
    return tuple(table)


def is_edge(sq: Square, size: int) -> bool:
    row, col = divmod(sq, size)
    return row in (0, size - 1) or col in (0, size - 1)


def corners(size: int) -> tuple[Square, ...]:
    last = size - 1
    return (
        make_square(0, 0, size),
        make_square(0, last, size),
        make_square(last, 0, size),
        make_square(last, last, size),
    )


def center(size: int) -> Square:
    mid = size // 2
    return make_square(mid, mid, size)
