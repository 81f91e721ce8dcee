"""Tests for the built-in Python tafl engine."""

from __future__ import annotations

import pytest

from tafl.core.enums import GameStatus, Side
from tafl.core.errors import InvalidSearchState
from tafl.core.move import Move
from tafl.core.notation import moves_from_text
from tafl.core.state import GameState, apply
from tafl.core.types import parse_square
from tafl.core.variant import Variant
from tafl.engine import PythonSearchEngine, SearchLimits, evaluate, select_move

KING_TRAP = "......./..t..../.tKt.../......./......./..t..../......."
ESCAPE = ".....t./......./......./......./......./......./.K....."
NO_MOVES = "......./.....K./......./......./T....../tT...../.T....."
BRANDUBH_MINUS_ONE = "...t.../...t.../...T.../.tTKTtt/...T.../...t.../...t..."


def sq(name: str) -> int:
    return parse_square(name, 7)


class _TrackingEngine(PythonSearchEngine):
    def __init__(self) -> None:
        super().__init__()
        self.root_depths: list[int] = []

    def _search_root(self, state, root_moves, depth):
        self.root_depths.append(depth)
        return super()._search_root(state, root_moves, depth)


class TestPythonSearchEngine:
    def test_returns_legal_move_from_start(self) -> None:
        state = GameState.new(Variant.preset("brandubh"))
        engine = PythonSearchEngine()

        result = engine.search(state, SearchLimits(max_depth=2, time_limit_ms=None))

        assert result.best_move in state.legal_moves()
        assert result.depth == 2
        assert result.nodes > 0

    def test_finds_king_capture(self) -> None:
        state = GameState.new(Variant(layout=KING_TRAP))
        result = PythonSearchEngine().search(
            state, SearchLimits(max_depth=3, time_limit_ms=None)
        )

        assert result.best_move == Move(sq("c2"), sq("c4"))
        assert result.score > 0
        assert apply(state, result.best_move).status == GameStatus.ATTACKER_WIN

    def test_decisive_score_stops_deepening(self) -> None:
        state = GameState.new(Variant(layout=KING_TRAP))
        engine = _TrackingEngine()
        result = engine.search(state, SearchLimits(max_depth=4, time_limit_ms=None))

        assert result.depth == 1
        assert engine.root_depths == [1]

    def test_finds_escape_and_keeps_first_of_equal_moves(self) -> None:
        state = GameState.new(Variant(layout=ESCAPE), side_to_move=Side.DEFENDER)
        result = PythonSearchEngine().search(
            state, SearchLimits(max_depth=2, time_limit_ms=None)
        )
        # b1-g1 also escapes but comes later in generation order.
        assert result.best_move == Move(sq("b1"), sq("a1"))

    def test_deterministic(self) -> None:
        state = GameState.new(Variant.preset("brandubh"))
        limits = SearchLimits(max_depth=2, time_limit_ms=None)

        first = PythonSearchEngine().search(state, limits)
        second = PythonSearchEngine().search(state, limits)

        assert first == second

    def test_rejects_finished_game(self) -> None:
        state = GameState.new(Variant.preset("brandubh")).resigned(Side.DEFENDER)
        with pytest.raises(InvalidSearchState):
            PythonSearchEngine().search(state, SearchLimits())

    def test_rejects_side_without_moves(self) -> None:
        state = GameState.new(Variant(layout=NO_MOVES))
        with pytest.raises(InvalidSearchState, match="no legal moves"):
            PythonSearchEngine().search(state, SearchLimits())

    def test_rejects_non_positive_depth(self) -> None:
        state = GameState.new(Variant.preset("brandubh"))
        with pytest.raises(ValueError):
            PythonSearchEngine().search(state, SearchLimits(max_depth=0))

    def test_transposition_table_is_populated(self) -> None:
        state = GameState.new(Variant.preset("brandubh"))
        engine = PythonSearchEngine()
        engine.search(state, SearchLimits(max_depth=2, time_limit_ms=None))
        assert engine._tt

    @pytest.mark.parametrize(
        "limits",
        [
            SearchLimits(max_depth=1, time_limit_ms=None),
            SearchLimits(max_depth=2, time_limit_ms=None),
            SearchLimits(max_depth=3, time_limit_ms=200),
            SearchLimits(max_depth=8, time_limit_ms=1),
        ],
    )
    def test_select_move_is_legal_for_any_budget(self, limits: SearchLimits) -> None:
        for name in ("brandubh", "tablut"):
            state = GameState.new(Variant.preset(name))
            assert select_move(state, limits) in state.legal_moves()


class TestCancellation:
    def test_depth_one_completes_even_if_cancelled(self) -> None:
        state = GameState.new(Variant.preset("brandubh"))
        engine = _TrackingEngine()

        result = engine.search(
            state,
            SearchLimits(max_depth=4, time_limit_ms=None),
            is_cancelled=lambda: True,
        )

        assert result.depth == 1
        assert result.best_move in state.legal_moves()
        assert engine.root_depths == [1]

    def test_interrupted_depth_is_discarded(self) -> None:
        state = GameState.new(Variant.preset("brandubh"))
        depth_one = PythonSearchEngine().search(
            state, SearchLimits(max_depth=1, time_limit_ms=None)
        )

        calls = 0

        def cancel_inside_depth_two() -> bool:
            nonlocal calls
            calls += 1
            return calls > 1

        engine = _TrackingEngine()
        result = engine.search(
            state,
            SearchLimits(max_depth=3, time_limit_ms=None),
            is_cancelled=cancel_inside_depth_two,
        )

        assert engine.root_depths == [1, 2]
        assert result.depth == 1
        assert result.best_move == depth_one.best_move
        assert result.score == depth_one.score

    def test_time_limit_stops_deepening(self) -> None:
        state = GameState.new(Variant.preset("copenhagen"))
        result = PythonSearchEngine().search(
            state, SearchLimits(max_depth=30, time_limit_ms=50)
        )

        assert 1 <= result.depth < 30
        assert result.best_move in state.legal_moves()


class TestHelpers:
    def test_select_move(self) -> None:
        state = GameState.new(Variant(layout=ESCAPE), side_to_move=Side.DEFENDER)
        limits = SearchLimits(max_depth=1, time_limit_ms=None)
        assert select_move(state, limits) == Move(sq("b1"), sq("a1"))

    def test_select_move_raises_when_over(self) -> None:
        state = GameState.new(Variant(layout=ESCAPE), side_to_move=Side.DEFENDER)
        over = apply(state, Move(sq("b1"), sq("a1")))
        with pytest.raises(InvalidSearchState):
            select_move(over)

    def test_evaluate_rewards_defender_material(self) -> None:
        variant = Variant.preset("brandubh")
        full = GameState.new(variant)
        fewer_attackers = GameState.new(variant, layout=BRANDUBH_MINUS_ONE)

        assert evaluate(fewer_attackers) > evaluate(full)

    def test_evaluate_rewards_king_near_corner(self) -> None:
        variant = Variant(layout=ESCAPE)
        near = GameState.new(variant)
        far = GameState.new(
            variant, layout=".....t./......./......./...K.../......./......./......."
        )
        assert evaluate(near) > evaluate(far)

    def test_evaluate_penalises_repeating_side(self) -> None:
        layout = "......./.t...../......./......./......./....K../......."
        start = GameState.new(Variant(layout=layout, repetition_limit=None))
        state = start
        for move in moves_from_text("b6-b5 e2-e3 b5-b6 e3-e2", 7):
            state = apply(state, move)

        assert state.board == start.board
        assert evaluate(state) < evaluate(start)
