"""Tests for Board, Piece, square helpers and layout notation."""

from __future__ import annotations

import pytest

from tafl.core.board import Board
from tafl.core.enums import PieceKind, Side
from tafl.core.move import Move
from tafl.core.notation import (
    board_from_layout,
    layout_from_board,
    moves_from_text,
    moves_to_text,
)
from tafl.core.piece import ATTACKER, DEFENDER, KING, Piece
from tafl.core.types import (
    center,
    corners,
    is_edge,
    make_square,
    neighbors,
    parse_square,
    rays,
    square_name,
)

BRANDUBH = "...t.../...t.../...T.../ttTKTtt/...T.../...t.../...t..."


class TestSquares:
    def test_a1_is_zero(self) -> None:
        assert parse_square("a1", 7) == 0
        assert square_name(0, 7) == "a1"

    def test_rows_count_from_the_bottom(self) -> None:
        assert parse_square("a2", 7) == 7
        assert parse_square("g7", 7) == 48

    def test_two_digit_rows(self) -> None:
        sq = make_square(12, 3, 13)
        assert square_name(sq, 13) == "d13"
        assert parse_square("d13", 13) == sq

    def test_parse_is_case_insensitive(self) -> None:
        assert parse_square(" C3 ", 7) == parse_square("c3", 7)

    @pytest.mark.parametrize("name", ["", "a", "h1", "a0", "a8", "11", "a-1"])
    def test_invalid_names_rejected(self, name: str) -> None:
        with pytest.raises(ValueError):
            parse_square(name, 7)

    def test_corners_and_center(self) -> None:
        assert corners(7) == (0, 6, 42, 48)
        assert center(7) == 24
        assert center(11) == 60

    def test_is_edge(self) -> None:
        assert is_edge(parse_square("a4", 7), 7)
        assert is_edge(parse_square("d7", 7), 7)
        assert not is_edge(parse_square("b2", 7), 7)

    def test_neighbors_off_board_are_none(self) -> None:
        up, right, down, left = neighbors(7)[0]
        assert up == 7
        assert right == 1
        assert down is None
        assert left is None

    def test_rays_nearest_first(self) -> None:
        up_ray = rays(7)[parse_square("d1", 7)][0]
        assert [square_name(sq, 7) for sq in up_ray] == [
            "d2",
            "d3",
            "d4",
            "d5",
            "d6",
            "d7",
        ]


class TestPiece:
    def test_layout_chars(self) -> None:
        assert str(ATTACKER) == "t"
        assert str(DEFENDER) == "T"
        assert str(KING) == "K"

    def test_from_char(self) -> None:
        assert Piece.from_char("K") == Piece(Side.DEFENDER, PieceKind.KING)
        assert Piece.from_char("t").side == Side.ATTACKER

    def test_from_char_rejects_unknown(self) -> None:
        with pytest.raises(ValueError):
            Piece.from_char("x")

    def test_attackers_have_no_king(self) -> None:
        with pytest.raises(ValueError):
            Piece(Side.ATTACKER, PieceKind.KING)

    def test_side_opposite(self) -> None:
        assert Side.ATTACKER.opposite == Side.DEFENDER
        assert Side.DEFENDER.opposite == Side.ATTACKER
        assert str(Side.DEFENDER) == "defender"


class TestBoard:
    def test_size_bounds(self) -> None:
        with pytest.raises(ValueError):
            Board(3)
        with pytest.raises(ValueError):
            Board(21)

    def test_set_tracks_sides_and_king(self) -> None:
        board = Board(7)
        board[10] = ATTACKER
        board[24] = KING
        board[25] = DEFENDER

        assert board.pieces(Side.ATTACKER) == [10]
        assert board.pieces(Side.DEFENDER) == [24, 25]
        assert board.count(Side.DEFENDER) == 2
        assert board.piece_count() == 3
        assert board.king_square == 24

    def test_clear_square(self) -> None:
        board = Board(7)
        board[24] = KING
        board[24] = None
        assert board.king_square is None
        assert board.count(Side.DEFENDER) == 0
        assert board.is_empty(24)

    def test_move_piece(self) -> None:
        board = Board(7)
        board[24] = KING
        board.move_piece(24, 31)
        assert board.king_square == 31
        assert board[24] is None
        assert board[31] == KING

    def test_move_from_empty_square_raises(self) -> None:
        with pytest.raises(ValueError):
            Board(7).move_piece(0, 1)

    def test_copy_is_independent(self) -> None:
        board = board_from_layout(BRANDUBH)
        clone = board.copy()
        clone[3] = None

        assert board[3] == ATTACKER
        assert board != clone
        assert board.count(Side.ATTACKER) == 8
        assert clone.count(Side.ATTACKER) == 7

    def test_repr_has_file_letters(self) -> None:
        text = repr(board_from_layout(BRANDUBH))
        assert text.splitlines()[-1].split() == list("abcdefg")
        assert text.splitlines()[3].startswith("4 t t T K T t t")


class TestLayoutNotation:
    def test_round_trip(self) -> None:
        board = board_from_layout(BRANDUBH)
        assert layout_from_board(board) == BRANDUBH

    def test_top_row_first(self) -> None:
        board = board_from_layout(BRANDUBH)
        assert board[parse_square("d7", 7)] == ATTACKER
        assert board[parse_square("d1", 7)] == ATTACKER
        assert board.king_square == parse_square("d4", 7)

    def test_newlines_and_whitespace_accepted(self) -> None:
        text = "\n".join(f"  {row}  " for row in BRANDUBH.split("/"))
        assert board_from_layout(text) == board_from_layout(BRANDUBH)

    def test_ragged_rows_rejected(self) -> None:
        with pytest.raises(ValueError, match="width"):
            board_from_layout("...../..../...../..K../.....")

    def test_unknown_char_rejected(self) -> None:
        with pytest.raises(ValueError):
            board_from_layout("...../...../..X../...../.....")

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            board_from_layout(" / ")


class TestMoveNotation:
    def test_notation(self) -> None:
        move = Move(parse_square("d1", 7), parse_square("d3", 7))
        assert move.notation(7) == "d1-d3"
        assert move.distance(7) == 2
        assert move.is_orthogonal(7)

    def test_diagonal_is_not_orthogonal(self) -> None:
        assert not Move(0, 8).is_orthogonal(7)
        assert not Move(5, 5).is_orthogonal(7)

    def test_parse(self) -> None:
        assert Move.parse("k11-k1", 11) == Move(120, 10)

    def test_parse_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            Move.parse("d1d3", 7)

    def test_move_lists(self) -> None:
        text = "d1-e1 d3-e3"
        moves = moves_from_text(text, 7)
        assert moves == [Move(3, 4), Move(17, 18)]
        assert moves_to_text(moves, 7) == text
