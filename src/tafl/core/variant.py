"""Variant — immutable rule-set configuration and named presets."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from tafl.core.board import Board
from tafl.core.enums import KingCapture, PieceKind, Side, Terrain
from tafl.core.errors import ConfigurationError
from tafl.core.notation import board_from_layout, layout_from_board, split_layout
from tafl.core.piece import Piece
from tafl.core.types import (
    MAX_SIZE,
    MIN_SIZE,
    Square,
    center,
    corners,
    parse_square,
    square_name,
)

# ── Starting layouts ─────────────────────────────────────────────────────────

COPENHAGEN_LAYOUT = "/".join(
    (
        "...ttttt...",
        ".....t.....",
        "...........",
        "t....T....t",
        "t...TTT...t",
        "tt.TTKTT.tt",
        "t...TTT...t",
        "t....T....t",
        "...........",
        ".....t.....",
        "...ttttt...",
    )
)

BRANDUBH_LAYOUT = "/".join(
    (
        "...t...",
        "...t...",
        "...T...",
        "ttTKTtt",
        "...T...",
        "...t...",
        "...t...",
    )
)

TABLUT_LAYOUT = "/".join(
    (
        "...ttt...",
        "....t....",
        "....T....",
        "t...T...t",
        "ttTTKTTtt",
        "t...T...t",
        "....T....",
        "....t....",
        "...ttt...",
    )
)


@dataclass(slots=True, frozen=True)
class Variant:
    """One Hnefatafl rule set, validated on construction.

    The board size is taken from *layout*. Everything else is a flag consulted
    by :class:`~tafl.core.rules.Rules` and the move generator; there is no
    subclass per variant.

    Raises:
        ConfigurationError: if any setting is inconsistent.
    """

    name: str = "custom"
    layout: str = COPENHAGEN_LAYOUT
    starting_side: Side = Side.ATTACKER
    throne_passable: bool = True
    restricted: tuple[str, ...] = ()
    special_corners: bool = True
    hostile_corners: bool = True
    hostile_throne: bool = True
    king_armed: bool = True
    king_capture: KingCapture = KingCapture.FOUR_SIDES
    king_captured_against_throne: bool = True
    king_captured_against_edge: bool = False
    shield_wall: bool = False
    edge_escape: bool = False
    repetition_limit: int | None = 3
    move_limit: int | None = None
    no_moves_loses: bool = True

    size: int = field(init=False, repr=False, compare=False)
    _terrain: tuple[Terrain, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        rows = split_layout(self.layout)
        size = len(rows)
        if not (MIN_SIZE <= size <= MAX_SIZE) or size % 2 == 0:
            raise ConfigurationError(
                f"Board size must be odd and within {MIN_SIZE}..{MAX_SIZE}, got {size}"
            )
        object.__setattr__(self, "size", size)

        terrain = [Terrain.NORMAL] * (size * size)
        if self.special_corners:
            for sq in corners(size):
                terrain[sq] = Terrain.CORNER
        elif not self.edge_escape:
            raise ConfigurationError(
                "Without corner squares the king needs edge_escape"
            )
        terrain[center(size)] = Terrain.THRONE
        for name in self.restricted:
            try:
                sq = parse_square(name, size)
            except ValueError as exc:
                raise ConfigurationError(
                    f"Restricted square out of bounds: {name!r}"
                ) from exc
            if terrain[sq] != Terrain.NORMAL:
                raise ConfigurationError(f"Square {name!r} already has special terrain")
            terrain[sq] = Terrain.RESTRICTED
        object.__setattr__(self, "_terrain", tuple(terrain))

        if self.repetition_limit is not None and self.repetition_limit < 2:
            raise ConfigurationError("repetition_limit must be >= 2 or None")
        if self.move_limit is not None and self.move_limit < 1:
            raise ConfigurationError("move_limit must be >= 1 or None")

        self.validate_board(self._parse_layout())

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def preset(cls, name: str) -> Variant:
        """Return the named preset (case-insensitive)."""
        try:
            factory = _PRESETS[name.strip().lower()]
        except KeyError:
            known = ", ".join(sorted(_PRESETS))
            raise ConfigurationError(
                f"Unknown variant {name!r} (known: {known})"
            ) from None
        return factory()

    @classmethod
    def from_placement(
        cls,
        size: int,
        placement: Mapping[str, Piece | str],
        **rules: Any,
    ) -> Variant:
        """Build a variant from ``{square name: piece}`` instead of a layout.

        Pieces may be given as :class:`Piece` objects or layout characters.
        """
        if not (MIN_SIZE <= size <= MAX_SIZE):
            raise ConfigurationError(f"Board size out of range: {size}")
        board = Board(size)
        for name, value in placement.items():
            try:
                sq = parse_square(name, size)
                piece = value if isinstance(value, Piece) else Piece.from_char(value)
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc
            board[sq] = piece
        return cls(layout=layout_from_board(board), **rules)

    def with_rules(self, **changes: Any) -> Variant:
        """Copy of this variant with some settings changed (re-validated)."""
        return replace(self, **changes)

    # ── Queries ──────────────────────────────────────────────────────────

    def terrain(self, sq: Square) -> Terrain:
        return self._terrain[sq]

    @property
    def throne(self) -> Square:
        return center(self.size)

    @property
    def corner_squares(self) -> tuple[Square, ...]:
        if not self.special_corners:
            return ()
        return corners(self.size)

    def initial_board(self) -> Board:
        """Fresh board with the starting layout."""
        return board_from_layout(self.layout)

    def can_land(self, piece: Piece, sq: Square) -> bool:
        """May *piece* end its move on *sq* (occupancy aside)?"""
        return piece.is_king or self._terrain[sq] == Terrain.NORMAL

    def square_name(self, sq: Square) -> str:
        return square_name(sq, self.size)

    # ── Validation ───────────────────────────────────────────────────────

    def _parse_layout(self) -> Board:
        try:
            return board_from_layout(self.layout)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid layout: {exc}") from exc

    def validate_board(self, board: Board) -> None:
        """Raise :class:`ConfigurationError` if *board* is not a legal setup."""
        if board.size != self.size:
            raise ConfigurationError(
                f"Board size {board.size} does not match variant size {self.size}"
            )
        kings = 0
        for side in Side:
            for sq in board.pieces(side):
                piece = board[sq]
                assert piece is not None
                if piece.kind == PieceKind.KING:
                    kings += 1
                    if self._terrain[sq] == Terrain.CORNER:
                        raise ConfigurationError("The king may not start on a corner")
                elif not self.can_land(piece, sq):
                    raise ConfigurationError(
                        f"{side} soldier placed on special square "
                        f"{self.square_name(sq)}"
                    )
        if kings != 1:
            raise ConfigurationError(
                f"Layout must contain exactly one king, found {kings}"
            )


# ── Presets ──────────────────────────────────────────────────────────────────


def copenhagen() -> Variant:
    """Copenhagen Hnefatafl, 11×11 with shield-wall captures."""
    return Variant(name="copenhagen", layout=COPENHAGEN_LAYOUT, shield_wall=True)


def fetlar() -> Variant:
    """Fetlar Hnefatafl, 11×11 without shield walls."""
    return Variant(name="fetlar", layout=COPENHAGEN_LAYOUT)


def brandubh() -> Variant:
    """Brandubh, 7×7; the king is taken by two unless on or next to the throne."""
    return Variant(
        name="brandubh",
        layout=BRANDUBH_LAYOUT,
        king_capture=KingCapture.FOUR_NEAR_THRONE,
    )


def tablut() -> Variant:
    """Tablut, 9×9 with edge escape; the corners are ordinary squares."""
    return Variant(
        name="tablut",
        layout=TABLUT_LAYOUT,
        throne_passable=False,
        special_corners=False,
        hostile_corners=False,
        king_capture=KingCapture.FOUR_NEAR_THRONE,
        edge_escape=True,
    )


_PRESETS = {
    "copenhagen": copenhagen,
    "fetlar": fetlar,
    "brandubh": brandubh,
    "tablut": tablut,
}

PRESET_NAMES: tuple[str, ...] = tuple(_PRESETS)
