"""Tests for captures, king capture, escape and the end-of-game checks."""

from __future__ import annotations

from tafl.core.enums import EndReason, GameStatus, KingCapture, Side
from tafl.core.move import Move
from tafl.core.piece import DEFENDER
from tafl.core.rules import Rules
from tafl.core.state import GameState, apply
from tafl.core.types import parse_square
from tafl.core.variant import Variant

CUSTODIAN = "......./......./...K.../......./......./.tT..../...t..."
AGAINST_CORNER = "......./......./...K.../......./......./..t..../.T....."
AGAINST_THRONE = "......./.....K./......./......./...t.../......./...T..."
KING_ARMED = "......./......./......./......./......./K.tT.../......."
DOUBLE = "......./.....K./......./......./......./tT.Tt../..t...."
SAFE_ENTRY = "......./.....K./......./......./......./t.t..../.T....."
FOUR_SIDES = "......./..t..../.tKt.../......./......./..t..../......."
KING_BY_THRONE = "......./...t.../..tK.../......./......./......./....t.."
KING_AWAY = "......./tK...../......./......./......./..t..../......."
ESCAPE = ".....t./......./......./......./......./......./.K....."
EDGE = ".....t./......./......./......./.K...../......./......."
SHIELD_WALL = "......./...K.../......./......./....t../..tt.../.tTT..."
SHIELD_WALL_KING = "......./......./......./......./....t../..tt.../.tTK..."


def sq(name: str) -> int:
    return parse_square(name, 7)


def play(
    layout: str,
    move: str,
    side: Side = Side.ATTACKER,
    **rules: object,
) -> GameState:
    variant = Variant(layout=layout, **rules)
    state = GameState.new(variant, side_to_move=side)
    return apply(state, Move.parse(move, 7))


class TestCustodianCapture:
    def test_sandwich_between_soldiers(self) -> None:
        state = play(CUSTODIAN, "d1-d2")

        assert state.last_capture.squares == frozenset({sq("c2")})
        assert state.board[sq("c2")] is None
        assert state.board.count(Side.DEFENDER) == 1
        assert state.board.count(Side.ATTACKER) == 2

    def test_against_empty_corner(self) -> None:
        state = play(AGAINST_CORNER, "c2-c1")
        assert sq("b1") in state.last_capture

    def test_corner_not_hostile_when_disabled(self) -> None:
        state = play(AGAINST_CORNER, "c2-c1", hostile_corners=False)
        assert not state.last_capture
        assert state.board[sq("b1")] == DEFENDER

    def test_against_empty_throne(self) -> None:
        state = play(AGAINST_THRONE, "d1-d2", side=Side.DEFENDER)
        assert sq("d3") in state.last_capture

    def test_throne_not_hostile_when_disabled(self) -> None:
        state = play(AGAINST_THRONE, "d1-d2", side=Side.DEFENDER, hostile_throne=False)
        assert not state.last_capture

    def test_armed_king_captures(self) -> None:
        state = play(KING_ARMED, "a2-b2", side=Side.DEFENDER)
        assert sq("c2") in state.last_capture

    def test_unarmed_king_does_not_capture(self) -> None:
        state = play(KING_ARMED, "a2-b2", side=Side.DEFENDER, king_armed=False)
        assert not state.last_capture

    def test_two_captures_in_one_move(self) -> None:
        state = play(DOUBLE, "c1-c2")

        assert state.last_capture.squares == frozenset({sq("b2"), sq("d2")})
        assert len(state.last_capture) == 2
        assert state.board.count(Side.DEFENDER) == 1

    def test_moving_between_enemies_is_safe(self) -> None:
        state = play(SAFE_ENTRY, "b1-b2", side=Side.DEFENDER)

        assert not state.last_capture
        assert state.board[sq("b2")] == DEFENDER
        assert state.status == GameStatus.ONGOING

    def test_captures_computed_before_removal(self) -> None:
        # Board after the mover landed but before any removal.
        state = GameState.new(Variant(layout=DOUBLE))
        board = state.board.copy()
        board.move_piece(sq("c1"), sq("c2"))

        captured = Rules.captures(board, state.variant, sq("c2"))

        assert captured == frozenset({sq("b2"), sq("d2")})
        assert board[sq("b2")] == DEFENDER


class TestShieldWall:
    def test_wall_along_edge_is_captured(self) -> None:
        state = play(SHIELD_WALL, "e3-e1", shield_wall=True)
        assert state.last_capture.squares == frozenset({sq("c1"), sq("d1")})

    def test_no_wall_capture_without_rule(self) -> None:
        state = play(SHIELD_WALL, "e3-e1")
        assert not state.last_capture

    def test_king_in_wall_survives(self) -> None:
        state = play(SHIELD_WALL_KING, "e3-e1", shield_wall=True)

        assert state.last_capture.squares == frozenset({sq("c1")})
        assert state.board.king_square == sq("d1")
        assert state.status == GameStatus.ONGOING

    def test_wall_needs_every_piece_faced(self) -> None:
        layout = "......./...K.../......./......./....t../...t.../.tTT..."
        state = play(layout, "e3-e1", shield_wall=True)
        assert not state.last_capture


class TestKingCapture:
    def test_surrounded_on_four_sides(self) -> None:
        state = play(FOUR_SIDES, "c2-c4")

        assert state.status == GameStatus.ATTACKER_WIN
        assert state.end_reason == EndReason.KING_CAPTURED
        assert state.winner == Side.ATTACKER

    def test_king_stays_on_board(self) -> None:
        state = play(FOUR_SIDES, "c2-c4")
        assert state.board.king_square == sq("c5")

    def test_two_attackers_are_not_enough(self) -> None:
        state = play(KING_AWAY, "c2-c6")
        assert state.status == GameStatus.ONGOING

    def test_empty_throne_counts_against_king(self) -> None:
        state = play(KING_BY_THRONE, "e1-e5")
        assert state.status == GameStatus.ATTACKER_WIN

    def test_throne_not_hostile_to_king_when_disabled(self) -> None:
        state = play(KING_BY_THRONE, "e1-e5", king_captured_against_throne=False)
        assert state.status == GameStatus.ONGOING

    def test_custodian_king_capture(self) -> None:
        state = play(KING_AWAY, "c2-c6", king_capture=KingCapture.CUSTODIAN)
        assert state.status == GameStatus.ATTACKER_WIN

    def test_custodian_away_from_throne(self) -> None:
        state = play(KING_AWAY, "c2-c6", king_capture=KingCapture.FOUR_NEAR_THRONE)
        assert state.status == GameStatus.ATTACKER_WIN

    def test_four_sides_next_to_throne(self) -> None:
        # Next to the throne all four sides are needed; the empty throne is one.
        state = play(
            KING_BY_THRONE, "e1-e5", king_capture=KingCapture.FOUR_NEAR_THRONE
        )
        assert state.status == GameStatus.ATTACKER_WIN

    def test_four_sides_next_to_throne_needs_all(self) -> None:
        state = play(
            KING_BY_THRONE,
            "e1-e5",
            king_capture=KingCapture.FOUR_NEAR_THRONE,
            king_captured_against_throne=False,
        )
        assert state.status == GameStatus.ONGOING

    def test_defender_move_never_captures_king(self) -> None:
        layout = "......./..t..../.tKt.../......./......./......./.T....."
        state = play(layout, "b1-b2", side=Side.DEFENDER)
        assert state.status == GameStatus.ONGOING

    def test_edge_counts_when_enabled(self) -> None:
        layout = "......./......./......./......./......./..t..../..K.t.."
        assert (
            play(layout, "e1-d1", king_captured_against_edge=True).status
            == GameStatus.ONGOING
        )
        layout = "......./......./......./......./......./..t..../.tK.t.."
        state = play(layout, "e1-d1", king_captured_against_edge=True)
        assert state.status == GameStatus.ATTACKER_WIN


class TestEscape:
    def test_king_reaches_corner(self) -> None:
        state = play(ESCAPE, "b1-a1", side=Side.DEFENDER)

        assert state.status == GameStatus.DEFENDER_WIN
        assert state.end_reason == EndReason.KING_ESCAPED

    def test_edge_is_not_enough_by_default(self) -> None:
        state = play(EDGE, "b3-a3", side=Side.DEFENDER)
        assert state.status == GameStatus.ONGOING

    def test_edge_escape(self) -> None:
        state = play(EDGE, "b3-a3", side=Side.DEFENDER, edge_escape=True)
        assert state.status == GameStatus.DEFENDER_WIN

    def test_king_pressure(self) -> None:
        state = GameState.new(Variant(layout=FOUR_SIDES))
        assert Rules.king_pressure(state.board, state.variant) == 3
