"""Core enumerations for the tafl domain."""

from __future__ import annotations

from enum import IntEnum, auto


class Side(IntEnum):
    """Playing side. The king belongs to the defenders."""

    ATTACKER = 0
    DEFENDER = 1

    @property
    def opposite(self) -> Side:
        return Side(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceKind(IntEnum):
    """Kinds of pieces on the board."""

    SOLDIER = 1
    KING = 2


class Terrain(IntEnum):
    """Special-square classification."""

    NORMAL = 0
    CORNER = 1
    THRONE = 2
    RESTRICTED = 3  # only the king may stand here


class KingCapture(IntEnum):
    """How the king is captured."""

    FOUR_SIDES = auto()
    CUSTODIAN = auto()
    FOUR_NEAR_THRONE = auto()  # four sides on/next to the throne, two elsewhere


class GameStatus(IntEnum):
    """Outcome of a game."""

    ONGOING = 0
    ATTACKER_WIN = 1
    DEFENDER_WIN = 2
    DRAW = 3

    @property
    def is_over(self) -> bool:
        return self != GameStatus.ONGOING


class EndReason(IntEnum):
    """Why a game ended."""

    NONE = 0
    KING_CAPTURED = auto()
    KING_ESCAPED = auto()
    REPETITION = auto()
    MOVE_LIMIT = auto()
    NO_MOVES = auto()
    RESIGNATION = auto()
