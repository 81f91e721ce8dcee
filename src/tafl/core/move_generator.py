"""Legal move generation: rook-like slides under variant terrain rules."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from tafl.core.enums import Side, Terrain
from tafl.core.move import Move
from tafl.core.types import Square, rays

if TYPE_CHECKING:
    from tafl.core.board import Board
    from tafl.core.piece import Piece
    from tafl.core.state import GameState
    from tafl.core.variant import Variant


class MoveGenerator:
    """Generates legal moves for one side on a board under a variant.

    Order is deterministic: origin square ascending, then distance, then
    direction (up, right, down, left). The board is never modified.
    """

    __slots__ = ("_board", "_variant", "_rays")

    def __init__(self, board: Board, variant: Variant) -> None:
        self._board = board
        self._variant = variant
        self._rays = rays(variant.size)

    # -- Public API ---------------------------------------------------------

    def iter_moves(self, side: Side) -> Iterator[Move]:
        """Lazily yield all legal moves for *side*."""
        board = self._board
        for sq in board.pieces(side):
            piece = board[sq]
            if piece is None:
                continue
            targets = [self._targets(piece, ray) for ray in self._rays[sq]]
            longest = max(len(t) for t in targets)
            for distance in range(longest):
                for per_direction in targets:
                    if distance < len(per_direction):
                        yield Move(sq, per_direction[distance])

    def generate_moves(self, side: Side) -> list[Move]:
        """All legal moves for *side*."""
        return list(self.iter_moves(side))

    def has_moves(self, side: Side) -> bool:
        return next(self.iter_moves(side), None) is not None

    def count_moves(self, side: Side) -> int:
        """Number of legal moves for *side*, without building Move objects."""
        board = self._board
        total = 0
        for sq in board.pieces(side):
            piece = board[sq]
            if piece is None:
                continue
            for ray in self._rays[sq]:
                total += len(self._targets(piece, ray))
        return total

    def is_legal(self, side: Side, move: Move) -> bool:
        piece = self._board[move.from_sq]
        if piece is None or piece.side != side:
            return False
        for ray in self._rays[move.from_sq]:
            if move.to_sq in ray:
                return move.to_sq in self._targets(piece, ray)
        return False

    # -- Private ------------------------------------------------------------

    def _targets(self, piece: Piece, ray: tuple[Square, ...]) -> list[Square]:
        """Landing squares for *piece* along *ray*, nearest first."""
        board = self._board
        variant = self._variant
        result: list[Square] = []
        for to_sq in ray:
            if board[to_sq] is not None:
                break
            if piece.is_king:
                result.append(to_sq)
                continue
            terrain = variant.terrain(to_sq)
            if terrain == Terrain.NORMAL:
                result.append(to_sq)
            elif terrain == Terrain.THRONE and variant.throne_passable:
                continue
            else:
                break
        return result


def generate_moves(state: GameState) -> list[Move]:
    """Legal moves for the side to move in *state* (empty once the game is over)."""
    if state.status.is_over:
        return []
    return MoveGenerator(state.board, state.variant).generate_moves(state.side_to_move)
