"""EngineWorker: runs the tafl search on a Qt worker thread."""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from tafl.core.state import GameState
from tafl.engine.python_search import PythonSearchEngine
from tafl.engine.search import SearchLimits

_LOGGER = logging.getLogger(__name__)


class EngineWorker(QObject):
    """Thread-affine worker that computes engine moves on demand.

    ``search_cancelled`` still carries the move of the last completed depth;
    the receiver decides whether to play it or drop it.

    Cancellation is keyed by request id: ``cancel(n)`` stops request *n* and
    every earlier one, including requests still queued behind a running search.
    """

    best_move_ready = pyqtSignal(int, object, int, int, int)
    search_cancelled = pyqtSignal(int, object)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_lock", "_cancelled_upto", "_engine", "_limits")

    def __init__(
        self,
        *,
        max_depth: int = 3,
        time_limit_ms: int | None = 2000,
    ) -> None:
        super().__init__()
        self._engine = PythonSearchEngine()
        self._limits = SearchLimits(max_depth=max_depth, time_limit_ms=time_limit_ms)
        self._cancel_lock = threading.Lock()
        self._cancelled_upto = 0

    @property
    def limits(self) -> SearchLimits:
        return self._limits

    @pyqtSlot(object, int)
    def request_move(self, state_obj: object, request_id: int) -> None:
        """Search for the best move in *state_obj* and emit the result."""
        if not isinstance(state_obj, GameState):
            self.search_error.emit(request_id, "Engine received invalid game state")
            return

        def is_cancelled() -> bool:
            return self.is_cancelled(request_id)

        try:
            result = self._engine.search(
                state_obj,
                self._limits,
                is_cancelled=is_cancelled,
            )
        except Exception as exc:
            _LOGGER.exception("Search request %d failed", request_id)
            self.search_error.emit(request_id, str(exc))
            return

        if is_cancelled():
            self.search_cancelled.emit(request_id, result.best_move)
            return

        self.best_move_ready.emit(
            request_id,
            result.best_move,
            result.score,
            result.depth,
            result.nodes,
        )

    @pyqtSlot(int)
    def cancel(self, request_id: int) -> None:
        """Cancel request *request_id* and all earlier ones (thread-safe).

        A search already running stops at its next check; a queued one that
        starts later returns its depth-1 move as ``search_cancelled``.
        """
        with self._cancel_lock:
            if request_id > self._cancelled_upto:
                self._cancelled_upto = request_id

    def is_cancelled(self, request_id: int) -> bool:
        with self._cancel_lock:
            return request_id <= self._cancelled_upto

    @pyqtSlot(int, int)
    def set_limits(self, max_depth: int, time_limit_ms: int) -> None:
        """Update search limits (takes effect on the next search).

        A non-positive *time_limit_ms* disables the time bound.
        """
        self._limits = SearchLimits(
            max_depth=max_depth,
            time_limit_ms=time_limit_ms if time_limit_ms > 0 else None,
        )
