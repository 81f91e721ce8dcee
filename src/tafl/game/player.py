"""Concrete player implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from tafl.core.enums import Side
from tafl.game.interfaces import IPlayer

if TYPE_CHECKING:
    from tafl.core.state import GameState


class HumanPlayer(IPlayer):
    """A human participant; moves arrive through ``controller.submit_move()``."""

    __slots__ = ("_side", "_name")

    def __init__(self, side: Side, name: str = "") -> None:
        self._side = side
        self._name = name or f"Player ({side})"

    @property
    def side(self) -> Side:
        return self._side

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return True

    def request_move(self, state: GameState) -> None:
        pass

    def cancel(self) -> None:
        pass


class AIPlayer(IPlayer):
    """An AI participant that delegates computation to a callback.

    ``AIPlayer`` only holds a *bridge* callable invoked on ``request_move``;
    in an application that callable is usually
    :meth:`tafl.engine.BackgroundSearch.request`.

    Args:
        side: Side the AI plays.
        name: Display name.
        on_request_move: ``(GameState) -> None`` called when the controller
            asks the AI to start thinking.
        on_cancel: ``() -> None`` called to abort a running search.
    """

    __slots__ = ("_side", "_name", "_on_request_move", "_on_cancel")

    def __init__(
        self,
        side: Side,
        name: str = "Engine",
        on_request_move: Callable[[GameState], object] | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        self._side = side
        self._name = name
        self._on_request_move = on_request_move
        self._on_cancel = on_cancel

    @property
    def side(self) -> Side:
        return self._side

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return False

    def request_move(self, state: GameState) -> None:
        if self._on_request_move is not None:
            self._on_request_move(state)

    def cancel(self) -> None:
        if self._on_cancel is not None:
            self._on_cancel()
