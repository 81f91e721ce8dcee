"""Capture, king-capture and escape predicates shared by every variant."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tafl.core.enums import KingCapture, Side, Terrain
from tafl.core.types import Square, col_of, is_edge, neighbors, row_of

if TYPE_CHECKING:
    from tafl.core.board import Board
    from tafl.core.piece import Piece
    from tafl.core.variant import Variant

# Indexes into ``DIRECTIONS``.
_UP, _RIGHT, _DOWN, _LEFT = range(4)


class Rules:
    """Static rule-checker that reads a :class:`Board` under a :class:`Variant`.

    Every predicate looks at the board *after* the moving piece has landed
    and before any captured piece has been removed.
    """

    # ── Hostility ────────────────────────────────────────────────────────

    @staticmethod
    def can_capture(piece: Piece, variant: Variant) -> bool:
        """Whether *piece* may act as a capturing partner."""
        return not piece.is_king or variant.king_armed

    @staticmethod
    def is_hostile(
        board: Board, variant: Variant, sq: Square, victim_side: Side
    ) -> bool:
        """Is *sq* a capturing partner against a soldier of *victim_side*?"""
        occupant = board[sq]
        terrain = variant.terrain(sq)
        if occupant is not None:
            if occupant.side == victim_side:
                return False
            if occupant.is_king and not variant.king_armed:
                return terrain == Terrain.THRONE and variant.hostile_throne
            return True
        if terrain == Terrain.CORNER:
            return variant.hostile_corners
        if terrain == Terrain.THRONE:
            return variant.hostile_throne
        return False

    @staticmethod
    def is_hostile_to_king(board: Board, variant: Variant, sq: Square | None) -> bool:
        """Does *sq* (``None`` = off the board) count against the king?"""
        if sq is None:
            return variant.king_captured_against_edge
        occupant = board[sq]
        if occupant is not None:
            return occupant.side == Side.ATTACKER
        terrain = variant.terrain(sq)
        if terrain == Terrain.THRONE:
            return variant.king_captured_against_throne
        if terrain == Terrain.CORNER:
            return variant.hostile_corners
        return False

    # ── Captures ─────────────────────────────────────────────────────────

    @staticmethod
    def captures(board: Board, variant: Variant, to_sq: Square) -> frozenset[Square]:
        """Soldiers captured by the piece that just landed on *to_sq*.

        The result is computed in one pass over the unmodified board, so a
        piece captured by this move never serves as a partner for another
        capture of the same move.
        """
        mover = board[to_sq]
        if mover is None or not Rules.can_capture(mover, variant):
            return frozenset()

        captured: set[Square] = set()
        adjacent = neighbors(variant.size)
        for direction, victim_sq in enumerate(adjacent[to_sq]):
            if victim_sq is None:
                continue
            victim = board[victim_sq]
            if victim is None or victim.side == mover.side or victim.is_king:
                continue
            far_sq = adjacent[victim_sq][direction]
            if far_sq is None:
                continue
            if Rules.is_hostile(board, variant, far_sq, victim.side):
                captured.add(victim_sq)

        if variant.shield_wall and is_edge(to_sq, variant.size):
            captured |= Rules.shield_wall_captures(board, variant, to_sq)
        return frozenset(captured)

    @staticmethod
    def shield_wall_captures(
        board: Board, variant: Variant, to_sq: Square
    ) -> frozenset[Square]:
        """Soldiers taken by closing a shield wall at *to_sq*.

        A wall is a line of two or more enemy pieces along the edge, bracketed
        by the mover at one end and a capturing piece or hostile corner at the
        other, with every piece in the line faced by a capturing piece on its
        inner side. The king may stand in the wall but is never taken by it.
        """
        mover = board[to_sq]
        if mover is None:
            return frozenset()
        size = variant.size
        adjacent = neighbors(size)
        captured: set[Square] = set()

        for inward, along in _edge_directions(to_sq, size):
            for direction in along:
                line: list[Square] = []
                sq = adjacent[to_sq][direction]
                while sq is not None:
                    piece = board[sq]
                    if piece is None or piece.side == mover.side:
                        break
                    line.append(sq)
                    sq = adjacent[sq][direction]
                if sq is None or len(line) < 2:
                    continue
                if not Rules._closes_wall(board, variant, sq, mover.side):
                    continue
                if not all(
                    Rules._faces_capturer(
                        board, variant, adjacent[s][inward], mover.side
                    )
                    for s in line
                ):
                    continue
                captured.update(s for s in line if not _is_king_at(board, s))
        return frozenset(captured)

    @staticmethod
    def _closes_wall(board: Board, variant: Variant, sq: Square, side: Side) -> bool:
        piece = board[sq]
        if piece is not None:
            return piece.side == side and Rules.can_capture(piece, variant)
        return variant.terrain(sq) == Terrain.CORNER and variant.hostile_corners

    @staticmethod
    def _faces_capturer(
        board: Board, variant: Variant, sq: Square | None, side: Side
    ) -> bool:
        if sq is None:
            return False
        piece = board[sq]
        return piece is not None and piece.side == side and Rules.can_capture(
            piece, variant
        )

    # ── King ─────────────────────────────────────────────────────────────

    @staticmethod
    def is_king_captured(board: Board, variant: Variant, mover_sq: Square) -> bool:
        """Has the attacker that just landed on *mover_sq* captured the king?"""
        king_sq = board.king_square
        mover = board[mover_sq]
        if king_sq is None or mover is None or mover.side != Side.ATTACKER:
            return False
        around = neighbors(variant.size)[king_sq]
        if mover_sq not in around:
            return False

        rule = variant.king_capture
        if rule == KingCapture.FOUR_NEAR_THRONE:
            near_throne = king_sq == variant.throne or variant.throne in around
            rule = KingCapture.FOUR_SIDES if near_throne else KingCapture.CUSTODIAN

        if rule == KingCapture.FOUR_SIDES:
            return all(Rules.is_hostile_to_king(board, variant, sq) for sq in around)

        direction = around.index(mover_sq)
        opposite = around[(direction + 2) % 4]
        return Rules.is_hostile_to_king(board, variant, opposite)

    @staticmethod
    def king_escaped(board: Board, variant: Variant) -> bool:
        """Is the king on a winning square (a corner, or any edge with edge escape)?"""
        king_sq = board.king_square
        if king_sq is None:
            return False
        if variant.terrain(king_sq) == Terrain.CORNER:
            return True
        return variant.edge_escape and is_edge(king_sq, variant.size)

    @staticmethod
    def winner(board: Board, variant: Variant, mover_sq: Square) -> Side | None:
        """Side that won with the move that landed on *mover_sq*, if any.

        King capture is checked before escape.
        """
        if Rules.is_king_captured(board, variant, mover_sq):
            return Side.ATTACKER
        if Rules.king_escaped(board, variant):
            return Side.DEFENDER
        return None

    @staticmethod
    def king_pressure(board: Board, variant: Variant) -> int:
        """Number of king neighbours that count against the king."""
        king_sq = board.king_square
        if king_sq is None:
            return 0
        return sum(
            1
            for sq in neighbors(variant.size)[king_sq]
            if Rules.is_hostile_to_king(board, variant, sq)
        )


def _is_king_at(board: Board, sq: Square) -> bool:
    piece = board[sq]
    return piece is not None and piece.is_king


def _edge_directions(sq: Square, size: int) -> list[tuple[int, tuple[int, int]]]:
    """(inward direction, directions along the edge) for each edge *sq* is on."""
    row = row_of(sq, size)
    col = col_of(sq, size)
    last = size - 1
    result: list[tuple[int, tuple[int, int]]] = []
    if row == 0:
        result.append((_UP, (_LEFT, _RIGHT)))
    if row == last:
        result.append((_DOWN, (_LEFT, _RIGHT)))
    if col == 0:
        result.append((_RIGHT, (_DOWN, _UP)))
    if col == last:
        result.append((_LEFT, (_DOWN, _UP)))
    return result
