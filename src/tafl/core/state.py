"""GameState value object and the move applier (the game state machine).

Transitions::

    ONGOING ──apply──▶ ONGOING
            ──apply──▶ ATTACKER_WIN | DEFENDER_WIN | DRAW   (terminal)

No transition leaves a terminal state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from tafl.core.board import Board
from tafl.core.enums import EndReason, GameStatus, Side
from tafl.core.errors import ConfigurationError, IllegalMoveError
from tafl.core.move import Move
from tafl.core.move_generator import MoveGenerator
from tafl.core.notation import board_from_layout
from tafl.core.rules import Rules
from tafl.core.types import Square
from tafl.core.variant import Variant
from tafl.core.zobrist import piece_key, position_key, side_to_move_key

_LOGGER = logging.getLogger(__name__)

_WIN_STATUS: dict[Side, GameStatus] = {
    Side.ATTACKER: GameStatus.ATTACKER_WIN,
    Side.DEFENDER: GameStatus.DEFENDER_WIN,
}


@dataclass(slots=True, frozen=True)
class CaptureEvent:
    """Squares vacated by captures in a single move."""

    squares: frozenset[Square] = frozenset()

    def __bool__(self) -> bool:
        return bool(self.squares)

    def __len__(self) -> int:
        return len(self.squares)

    def __contains__(self, sq: object) -> bool:
        return sq in self.squares


@dataclass(slots=True, frozen=True)
class GameState:
    """Complete game state. Never mutated; :func:`apply` returns a new one.

    ``keys`` holds the Zobrist key of every position reached so far, the
    starting position first; it is what repetition detection counts.
    """

    variant: Variant
    board: Board
    side_to_move: Side
    status: GameStatus = GameStatus.ONGOING
    move_count: int = 0
    history: tuple[Move, ...] = ()
    keys: tuple[int, ...] = ()
    last_capture: CaptureEvent = field(default_factory=CaptureEvent)
    end_reason: EndReason = EndReason.NONE

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def new(
        cls,
        variant: Variant,
        layout: str | None = None,
        side_to_move: Side | None = None,
    ) -> GameState:
        """Starting state for *variant*, optionally from a custom *layout*.

        Raises:
            ConfigurationError: if *layout* is malformed or breaks the
                variant's placement rules.
        """
        if layout is None:
            board = variant.initial_board()
        else:
            try:
                board = board_from_layout(layout)
            except ValueError as exc:
                raise ConfigurationError(f"Invalid layout: {exc}") from exc
            variant.validate_board(board)
        side = variant.starting_side if side_to_move is None else side_to_move
        return cls(
            variant=variant,
            board=board,
            side_to_move=side,
            keys=(position_key(board, side),),
        )

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def is_over(self) -> bool:
        return self.status.is_over

    @property
    def key(self) -> int:
        if self.keys:
            return self.keys[-1]
        return position_key(self.board, self.side_to_move)

    @property
    def winner(self) -> Side | None:
        if self.status == GameStatus.ATTACKER_WIN:
            return Side.ATTACKER
        if self.status == GameStatus.DEFENDER_WIN:
            return Side.DEFENDER
        return None

    def repetition_count(self) -> int:
        """How many times the current position has occurred."""
        return max(self.keys.count(self.key), 1)

    def repetitions(self, side: Side) -> int:
        """Moves by *side* that recreated a position reached earlier."""
        last = len(self.keys) - 1
        seen: set[int] = set(self.keys[:1])
        count = 0
        for ply in range(1, last + 1):
            key = self.keys[ply]
            if (last - ply) % 2 == 0:
                mover = self.side_to_move.opposite
            else:
                mover = self.side_to_move
            if mover == side and key in seen:
                count += 1
            seen.add(key)
        return count

    def legal_moves(self) -> list[Move]:
        if self.is_over:
            return []
        return MoveGenerator(self.board, self.variant).generate_moves(self.side_to_move)

    def concluded(self, status: GameStatus, reason: EndReason) -> GameState:
        """Copy of this state ended with *status* for *reason*."""
        return replace(
            self, status=status, last_capture=CaptureEvent(), end_reason=reason
        )

    def resigned(self, side: Side) -> GameState:
        """Copy of this state in which *side* has resigned."""
        return self.concluded(_WIN_STATUS[side.opposite], EndReason.RESIGNATION)


# ── Applying moves ───────────────────────────────────────────────────────────


def apply(state: GameState, move: Move) -> GameState:
    """Validate *move* against *state* and return the resulting state.

    Raises:
        IllegalMoveError: if the game is over or *move* is not legal.
    """
    if state.is_over:
        raise IllegalMoveError(move, f"game is over ({state.status.name})")
    squares = len(state.board)
    if not (0 <= move.from_sq < squares and 0 <= move.to_sq < squares):
        raise IllegalMoveError(move, "square is off the board")
    piece = state.board[move.from_sq]
    side = state.side_to_move
    if piece is None or piece.side != side:
        raise IllegalMoveError(move, f"no {side} piece on the origin square")
    if not MoveGenerator(state.board, state.variant).is_legal(side, move):
        raise IllegalMoveError(move, "destination is not reachable")
    return apply_unchecked(state, move)


def apply_unchecked(state: GameState, move: Move) -> GameState:
    """Apply *move*, which the caller guarantees is legal in *state*.

    Used by the search on moves it has just generated.
    """
    variant = state.variant
    board = state.board.copy()
    piece = board[move.from_sq]
    assert piece is not None

    board.move_piece(move.from_sq, move.to_sq)
    key = state.key ^ side_to_move_key()
    key ^= piece_key(piece, move.from_sq) ^ piece_key(piece, move.to_sq)

    captured = Rules.captures(board, variant, move.to_sq)
    for sq in captured:
        victim = board[sq]
        if victim is not None:
            key ^= piece_key(victim, sq)
        board[sq] = None

    mover_side = state.side_to_move
    next_side = mover_side.opposite
    move_count = state.move_count + 1
    keys = state.keys + (key,)

    status = GameStatus.ONGOING
    reason = EndReason.NONE
    winner = Rules.winner(board, variant, move.to_sq)
    if winner is not None:
        status = _WIN_STATUS[winner]
        if winner == Side.ATTACKER:
            reason = EndReason.KING_CAPTURED
        else:
            reason = EndReason.KING_ESCAPED
    elif _repeated(keys, variant.repetition_limit):
        status = GameStatus.DRAW
        reason = EndReason.REPETITION
    elif variant.move_limit is not None and move_count >= variant.move_limit:
        status = GameStatus.DRAW
        reason = EndReason.MOVE_LIMIT
    elif not MoveGenerator(board, variant).has_moves(next_side):
        status = _WIN_STATUS[mover_side] if variant.no_moves_loses else GameStatus.DRAW
        reason = EndReason.NO_MOVES

    return GameState(
        variant=variant,
        board=board,
        side_to_move=next_side,
        status=status,
        move_count=move_count,
        history=state.history + (move,),
        keys=keys,
        last_capture=CaptureEvent(captured),
        end_reason=reason,
    )


def replay(variant: Variant, moves: list[Move] | tuple[Move, ...]) -> GameState:
    """Apply *moves* in order from the starting position of *variant*."""
    state = GameState.new(variant)
    for move in moves:
        state = apply(state, move)
    _LOGGER.debug("Replayed %d moves, status %s", len(moves), state.status.name)
    return state


def _repeated(keys: tuple[int, ...], limit: int | None) -> bool:
    return limit is not None and keys.count(keys[-1]) >= limit
