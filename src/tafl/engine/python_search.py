"""Pure-Python tafl search (negamax + alpha-beta, iterative deepening)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter, sleep

from tafl.core.enums import GameStatus, Side
from tafl.core.errors import InvalidSearchState
from tafl.core.move import Move
from tafl.core.move_generator import MoveGenerator
from tafl.core.rules import Rules
from tafl.core.state import GameState, apply_unchecked
from tafl.core.types import col_of, row_of
from tafl.engine.search import CancelCheck, IEngine, SearchLimits, SearchResult

_LOGGER = logging.getLogger(__name__)

_INF_SCORE = 10_000_000
_WIN_SCORE = 1_000_000
_DECISIVE_SCORE = _WIN_SCORE - 10_000
_TT_EXACT = 0
_TT_LOWER = 1
_TT_UPPER = 2
_MAX_KILLER_PLY = 128
_YIELD_EVERY_NODES = 4096

_ATTACKER_VALUE = 10
_DEFENDER_VALUE = 20
_KING_DISTANCE_WEIGHT = 6
_KING_PRESSURE_WEIGHT = 10
_MOBILITY_WEIGHT = 1
_REPETITION_WEIGHT = 10


def _never_cancelled() -> bool:
    return False


@dataclass(slots=True)
class _TTEntry:
    depth: int
    score: int
    bound: int
    best_move: Move | None


class PythonSearchEngine(IEngine):
    """Alpha-beta searcher over immutable :class:`GameState` values.

    Depth 1 always runs to completion. Deeper iterations stop early when the
    cancel callback fires or the deadline passes; an interrupted iteration is
    thrown away, so the result always comes from the last completed depth.
    """

    __slots__ = (
        "_cancel_check",
        "_deadline",
        "_nodes",
        "_last_yield_nodes",
        "_can_abort",
        "_aborted",
        "_tt",
        "_tt_max_entries",
        "_killer_moves",
    )

    def __init__(self) -> None:
        self._nodes = 0
        self._last_yield_nodes = 0
        self._deadline: float | None = None
        self._cancel_check: CancelCheck = _never_cancelled
        self._can_abort = False
        self._aborted = False
        self._tt: dict[int, _TTEntry] = {}
        self._tt_max_entries = 200_000
        self._killer_moves: list[list[Move | None]] = [
            [None, None] for _ in range(_MAX_KILLER_PLY)
        ]

    def search(
        self,
        state: GameState,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        if limits.max_depth <= 0:
            raise ValueError("Search depth must be >= 1")
        if state.is_over:
            raise InvalidSearchState(
                f"Cannot search a finished game ({state.status.name})"
            )

        root_moves = MoveGenerator(state.board, state.variant).generate_moves(
            state.side_to_move
        )
        if not root_moves:
            raise InvalidSearchState(f"{state.side_to_move} has no legal moves")

        self._nodes = 0
        self._last_yield_nodes = 0
        self._aborted = False
        self._tt.clear()
        self._killer_moves = [[None, None] for _ in range(_MAX_KILLER_PLY)]
        self._cancel_check = is_cancelled or _never_cancelled
        self._deadline = None
        if limits.time_limit_ms is not None:
            ms = max(limits.time_limit_ms, 1)
            self._deadline = perf_counter() + (ms / 1000.0)

        best_move: Move | None = None
        best_score = 0
        completed_depth = 0
        started = perf_counter()

        for depth in range(1, limits.max_depth + 1):
            if depth > 1 and self._stop_requested():
                break

            self._can_abort = depth > 1
            score, move = self._search_root(state, root_moves, depth)
            if self._aborted or move is None:
                break

            best_move = move
            best_score = score
            completed_depth = depth
            _LOGGER.debug(
                "depth %d: best %s score %d nodes %d",
                depth,
                move.notation(state.variant.size),
                score,
                self._nodes,
            )
            if abs(score) >= _DECISIVE_SCORE:
                break

        if best_move is None:
            raise RuntimeError("Search finished without completing depth 1")

        _LOGGER.info(
            "Searched %d nodes to depth %d in %.3fs; best %s, score %d",
            self._nodes,
            completed_depth,
            perf_counter() - started,
            best_move.notation(state.variant.size),
            best_score,
        )
        return SearchResult(best_move, best_score, completed_depth, self._nodes)

    def _search_root(
        self,
        state: GameState,
        root_moves: list[Move],
        depth: int,
    ) -> tuple[int, Move | None]:
        best_score = -_INF_SCORE
        best_move: Move | None = None
        alpha = -_INF_SCORE
        beta = _INF_SCORE

        # Generator order, strict improvement only: ties keep the first move.
        for move in root_moves:
            child = apply_unchecked(state, move)
            score = -self._negamax(child, depth - 1, -beta, -alpha, ply=1)
            if self._aborted:
                return best_score, None

            if score > best_score:
                best_score = score
                best_move = move
            if score > alpha:
                alpha = score

        return best_score, best_move

    def _negamax(
        self,
        state: GameState,
        depth: int,
        alpha: int,
        beta: int,
        ply: int,
    ) -> int:
        if self._should_stop():
            self._aborted = True
            return 0

        self._nodes += 1
        if state.is_over:
            return self._terminal_score(state, ply)
        if depth <= 0:
            return self._static_eval(state)

        alpha_orig = alpha
        beta_orig = beta
        tt_key = state.key
        tt_entry = self._tt.get(tt_key)
        tt_move = tt_entry.best_move if tt_entry is not None else None

        if tt_entry is not None and tt_entry.depth >= depth:
            if tt_entry.bound == _TT_EXACT:
                return tt_entry.score
            if tt_entry.bound == _TT_LOWER:
                alpha = max(alpha, tt_entry.score)
            else:
                beta = min(beta, tt_entry.score)
            if alpha >= beta:
                return tt_entry.score

        moves = MoveGenerator(state.board, state.variant).generate_moves(
            state.side_to_move
        )
        if not moves:
            if state.variant.no_moves_loses:
                return -(_WIN_SCORE - ply)
            return 0

        best_score = -_INF_SCORE
        best_move: Move | None = None

        for move in self._order_moves(moves, tt_move, ply):
            child = apply_unchecked(state, move)
            score = -self._negamax(child, depth - 1, -beta, -alpha, ply + 1)
            if self._aborted:
                return 0

            if score > best_score:
                best_score = score
                best_move = move
            if score > alpha:
                alpha = score
            if alpha >= beta:
                self._record_killer(move, ply)
                break

        bound = _TT_EXACT
        if best_score <= alpha_orig:
            bound = _TT_UPPER
        elif best_score >= beta_orig:
            bound = _TT_LOWER
        self._store_tt(tt_key, depth, best_score, bound, best_move=best_move)
        return best_score

    def _terminal_score(self, state: GameState, ply: int) -> int:
        """Score a finished game for the side to move; faster wins score higher."""
        if state.status == GameStatus.DRAW:
            return 0
        win = _WIN_SCORE - ply
        return win if state.winner == state.side_to_move else -win

    def _stop_requested(self) -> bool:
        if self._cancel_check():
            return True
        return self._deadline is not None and perf_counter() >= self._deadline

    def _should_stop(self) -> bool:
        if not self._can_abort:
            return False
        if self._nodes - self._last_yield_nodes >= _YIELD_EVERY_NODES:
            self._last_yield_nodes = self._nodes
            sleep(0.001)
        return self._stop_requested()

    def _order_moves(
        self,
        moves: list[Move],
        tt_move: Move | None = None,
        ply: int = 0,
    ) -> list[Move]:
        return sorted(
            moves,
            key=lambda move: self._move_order_score(move, tt_move, ply),
            reverse=True,
        )

    def _move_order_score(
        self,
        move: Move,
        tt_move: Move | None = None,
        ply: int = 0,
    ) -> int:
        if tt_move is not None and move == tt_move:
            return 2
        if ply < len(self._killer_moves) and move in self._killer_moves[ply]:
            return 1
        return 0

    def _record_killer(self, move: Move, ply: int) -> None:
        if ply < 0 or ply >= len(self._killer_moves):
            return
        killers = self._killer_moves[ply]
        if killers[0] == move:
            return
        killers[1] = killers[0]
        killers[0] = move

    def _store_tt(
        self,
        key: int,
        depth: int,
        score: int,
        bound: int,
        best_move: Move | None,
    ) -> None:
        existing = self._tt.get(key)
        if existing is not None and existing.depth > depth:
            return
        if len(self._tt) >= self._tt_max_entries and key not in self._tt:
            self._tt.clear()
        self._tt[key] = _TTEntry(
            depth=depth, score=score, bound=bound, best_move=best_move
        )

    def _static_eval(self, state: GameState) -> int:
        """Heuristic score for the side to move (positive = good for it)."""
        score = evaluate(state)
        if state.side_to_move == Side.DEFENDER:
            return score
        return -score


def evaluate(state: GameState) -> int:
    """Defender-positive heuristic: material, king freedom and mobility.

    Each side is also penalised for moves that recreated an earlier position.
    """
    board = state.board
    variant = state.variant
    size = variant.size
    king_sq = board.king_square

    attackers = board.count(Side.ATTACKER)
    defenders = board.count(Side.DEFENDER) - (1 if king_sq is not None else 0)
    score = defenders * _DEFENDER_VALUE - attackers * _ATTACKER_VALUE

    if king_sq is not None:
        row = row_of(king_sq, size)
        col = col_of(king_sq, size)
        row_gap = min(row, size - 1 - row)
        col_gap = min(col, size - 1 - col)
        if variant.edge_escape:
            distance = min(row_gap, col_gap)
        else:
            distance = row_gap + col_gap
        score -= distance * _KING_DISTANCE_WEIGHT
        score -= Rules.king_pressure(board, variant) * _KING_PRESSURE_WEIGHT

    score += state.repetitions(Side.ATTACKER) * _REPETITION_WEIGHT
    score -= state.repetitions(Side.DEFENDER) * _REPETITION_WEIGHT

    gen = MoveGenerator(board, variant)
    mobility = gen.count_moves(Side.DEFENDER) - gen.count_moves(Side.ATTACKER)
    return score + mobility * _MOBILITY_WEIGHT


def select_move(
    state: GameState,
    limits: SearchLimits | None = None,
    is_cancelled: CancelCheck | None = None,
) -> Move:
    """Choose a move for the side to move in *state*.

    Raises:
        InvalidSearchState: if the game is over or the side to move has no moves.
    """
    result = PythonSearchEngine().search(state, limits or SearchLimits(), is_cancelled)
    return result.best_move
