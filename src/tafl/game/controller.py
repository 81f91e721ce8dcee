"""GameController — the session owner of a tafl game.

Coordinates: players, the current GameState and its predecessors.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from tafl.core.enums import EndReason, GameStatus, Side
from tafl.core.errors import IllegalMoveError
from tafl.core.move import Move
from tafl.core.state import CaptureEvent, GameState, apply
from tafl.core.variant import Variant
from tafl.game.interfaces import GamePhase, IGameController, IPlayer

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, CaptureEvent, GameState], None]
GameOverCallback = Callable[[GameState], None]
PhaseCallback = Callable[[GamePhase], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Validates and applies moves, switches turns, notifies listeners.

    Methods are meant to be called from a single (UI) thread. AI results
    arrive via ``submit_move``, which checks legality against the current
    state only. A stale move may still be legal there, so results for a
    superseded state must be dropped before they get here: ``_cancel_ai``
    cancels the pending search on undo and new game, and
    :class:`~tafl.engine.session.BackgroundSearch` discards any result whose
    request id is no longer the pending one.
    """

    __slots__ = ("_state", "_previous", "_players", "_phase", "events")

    def __init__(self) -> None:
        self._state = GameState.new(Variant.preset("copenhagen"))
        self._previous: list[GameState] = []
        self._players: dict[Side, IPlayer] = {}
        self._phase = GamePhase.NOT_STARTED
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def current_player(self) -> IPlayer | None:
        return self._players.get(self._state.side_to_move)

    def player(self, side: Side) -> IPlayer | None:
        return self._players.get(side)

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(
        self,
        attacker: IPlayer,
        defender: IPlayer,
        variant: Variant | None = None,
        layout: str | None = None,
    ) -> None:
        self._cancel_ai()
        self._players = {Side.ATTACKER: attacker, Side.DEFENDER: defender}
        self._state = GameState.new(variant or Variant.preset("copenhagen"), layout)
        self._previous = []
        _LOGGER.info("New %s game", self._state.variant.name)

        self._set_phase(GamePhase.AWAITING_MOVE)
        if not self._state.legal_moves():
            self._finish_moveless()
            return
        self._prompt_current_player()

    def submit_move(self, move: Move) -> bool:
        if self._phase not in (GamePhase.AWAITING_MOVE, GamePhase.THINKING):
            return False

        try:
            new_state = apply(self._state, move)
        except IllegalMoveError as exc:
            _LOGGER.debug("Rejected move: %s", exc)
            return False

        self._previous.append(self._state)
        self._state = new_state

        for cb in self.events.on_move:
            cb(move, new_state.last_capture, new_state)

        if new_state.is_over:
            self._emit_game_over()
            return True

        self._prompt_current_player()
        return True

    def resign(self, side: Side) -> None:
        if self._state.is_over:
            return
        self._cancel_ai()
        self._state = self._state.resigned(side)
        self._emit_game_over()

    def undo_move(self) -> bool:
        if not self._previous or self._state.end_reason == EndReason.RESIGNATION:
            return False

        self._cancel_ai()
        self._state = self._previous.pop()
        self._set_phase(GamePhase.AWAITING_MOVE)
        self._prompt_current_player()
        return True

    # ── Internal helpers ─────────────────────────────────────────────────

    def _prompt_current_player(self) -> None:
        """Ask the current player to move."""
        cp = self.current_player
        if cp is None:
            return

        if cp.is_human:
            self._set_phase(GamePhase.AWAITING_MOVE)
        else:
            self._set_phase(GamePhase.THINKING)
            cp.request_move(self._state)

    def _cancel_ai(self) -> None:
        for p in self._players.values():
            if not p.is_human:
                p.cancel()

    def _finish_moveless(self) -> None:
        """A custom start position left the side to move without moves."""
        loser = self._state.side_to_move
        if not self._state.variant.no_moves_loses:
            status = GameStatus.DRAW
        elif loser == Side.DEFENDER:
            status = GameStatus.ATTACKER_WIN
        else:
            status = GameStatus.DEFENDER_WIN
        self._state = self._state.concluded(status, EndReason.NO_MOVES)
        self._emit_game_over()

    def _emit_game_over(self) -> None:
        state = self._state
        _LOGGER.info(
            "Game over after %d moves: %s (%s)",
            state.move_count,
            state.status.name,
            state.end_reason.name,
        )
        self._set_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(state)

    def _set_phase(self, phase: GamePhase) -> None:
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)
