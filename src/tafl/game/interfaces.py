"""Player and controller contracts of the game layer.

:class:`~tafl.game.controller.GameController` only talks to players through
:class:`IPlayer`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from tafl.core.enums import Side

if TYPE_CHECKING:
    from tafl.core.move import Move
    from tafl.core.state import GameState
    from tafl.core.variant import Variant


# ── Session phases ────────────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a game session."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    THINKING = auto()  # an engine player is searching
    GAME_OVER = auto()


# ── Participants and orchestration ────────────────────────────────────────────


class IPlayer(ABC):
    """One side of a tafl game: a person at the board or an engine."""

    @property
    @abstractmethod
    def side(self) -> Side: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...

    @abstractmethod
    def request_move(self, state: GameState) -> None:
        """Called when it is this player's turn in *state*.

        Engine players start searching; people answer later through
        ``submit_move``.
        """

    @abstractmethod
    def cancel(self) -> None:
        """Abandon a search in progress, if any."""


class IGameController(ABC):
    """Owns the current game and applies the moves players submit."""

    @abstractmethod
    def new_game(
        self,
        attacker: IPlayer,
        defender: IPlayer,
        variant: Variant | None = None,
        layout: str | None = None,
    ) -> None:
        """Start a game of *variant* (Copenhagen by default)."""

    @abstractmethod
    def submit_move(self, move: Move) -> bool:
        """Play *move* for the side to move; False if it is rejected."""

    @abstractmethod
    def resign(self, side: Side) -> None:
        """Player of *side* resigns."""

    @abstractmethod
    def undo_move(self) -> bool:
        """Take back the last move; False if there is nothing to undo."""
