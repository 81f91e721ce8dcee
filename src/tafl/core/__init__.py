"""Core domain layer — pure tafl rules with zero external dependencies.

Quick start::

    from tafl.core import GameState, Variant, apply, generate_moves

    state = GameState.new(Variant.preset("copenhagen"))
    move = generate_moves(state)[0]
    state = apply(state, move)
"""

from tafl.core.board import Board
from tafl.core.enums import EndReason, GameStatus, KingCapture, PieceKind, Side, Terrain
from tafl.core.errors import (
    ConfigurationError,
    IllegalMoveError,
    InvalidSearchState,
    TaflError,
)
from tafl.core.move import Move
from tafl.core.move_generator import MoveGenerator, generate_moves
from tafl.core.notation import board_from_layout, layout_from_board
from tafl.core.piece import Piece
from tafl.core.rules import Rules
from tafl.core.state import CaptureEvent, GameState, apply, apply_unchecked, replay
from tafl.core.types import Square, make_square, parse_square, square_name
from tafl.core.variant import PRESET_NAMES, Variant

__all__ = [
    # Enums
    "EndReason",
    "GameStatus",
    "KingCapture",
    "PieceKind",
    "Side",
    "Terrain",
    # Errors
    "ConfigurationError",
    "IllegalMoveError",
    "InvalidSearchState",
    "TaflError",
    # Types / helpers
    "Square",
    "make_square",
    "parse_square",
    "square_name",
    # Domain objects
    "Board",
    "CaptureEvent",
    "GameState",
    "Move",
    "MoveGenerator",
    "Piece",
    "Rules",
    "Variant",
    "PRESET_NAMES",
    # Operations
    "apply",
    "apply_unchecked",
    "generate_moves",
    "replay",
    # Notation
    "board_from_layout",
    "layout_from_board",
]
