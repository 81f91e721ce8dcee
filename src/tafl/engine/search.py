"""Shared engine search models and protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tafl.core.move import Move
    from tafl.core.state import GameState

CancelCheck = Callable[[], bool]


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation.

    Both bounds apply; ``time_limit_ms=None`` searches to ``max_depth``.
    """

    max_depth: int = 3
    time_limit_ms: int | None = 2000


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search.

    ``score`` is from the point of view of the side to move.
    """

    best_move: Move
    score: int
    depth: int
    nodes: int


class IEngine(Protocol):
    """Protocol for tafl engines used by the game layer."""

    def search(
        self,
        state: GameState,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult: ...
