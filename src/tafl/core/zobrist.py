"""Zobrist hashing keys for position identity (repetition, transpositions)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from tafl.core.enums import Side
from tafl.core.piece import Piece
from tafl.core.types import MAX_SIZE, Square

if TYPE_CHECKING:
    from tafl.core.board import Board

_SEED: Final = 0xA5B3C7D9E1F23412
_MASK_64: Final = 0xFFFFFFFFFFFFFFFF
_MAX_SQUARES: Final = MAX_SIZE * MAX_SIZE
_PIECE_CODES: Final = 3  # attacker, defender, king


def _splitmix64(state: int) -> int:
    """Deterministic 64-bit bit-mixer suitable for static key generation."""
    z = (state + 0x9E3779B97F4A7C15) & _MASK_64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK_64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK_64
    return z ^ (z >> 31)


def _nth_key(index: int) -> int:
    return _splitmix64(_SEED + index)


_PIECE_KEYS: Final = tuple(
    tuple(_nth_key(code * _MAX_SQUARES + sq) for sq in range(_MAX_SQUARES))
    for code in range(_PIECE_CODES)
)
_DEFENDER_TO_MOVE_KEY: Final = _nth_key(_PIECE_CODES * _MAX_SQUARES)


def _piece_code(piece: Piece) -> int:
    if piece.is_king:
        return 2
    return int(piece.side)


def piece_key(piece: Piece, sq: Square) -> int:
    """Hash key for a specific piece on a square."""
    return _PIECE_KEYS[_piece_code(piece)][sq]


def side_to_move_key() -> int:
    """Hash toggle key applied when the defenders are to move."""
    return _DEFENDER_TO_MOVE_KEY


def position_key(board: Board, side_to_move: Side) -> int:
    """Full hash of *board* with *side_to_move*."""
    h = _DEFENDER_TO_MOVE_KEY if side_to_move == Side.DEFENDER else 0
    for side in Side:
        for sq in board.pieces(side):
            piece = board[sq]
            if piece is not None:
                h ^= piece_key(piece, sq)
    return h
