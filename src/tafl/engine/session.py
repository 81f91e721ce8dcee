"""Background search ownership: worker thread, request ids, stale-result filtering."""

from __future__ import annotations

import logging
from collections.abc import Callable

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from tafl.core.move import Move
from tafl.core.state import GameState
from tafl.engine.qt_bridge import EngineWorker

_LOGGER = logging.getLogger(__name__)


class _SearchCommandBus(QObject):
    """Signal bridge for issuing worker commands with queued delivery."""

    search_requested = pyqtSignal(object, int)
    set_limits_requested = pyqtSignal(int, int)


class BackgroundSearch:
    """Runs :class:`EngineWorker` on its own ``QThread``.

    Each request gets a fresh id. Results whose id is not the pending one
    (because a newer request or a cancel superseded it) are dropped, so the
    callback only ever sees a move for the state it asked about.
    """

    _SHUTDOWN_WAIT_MS = 2000

    __slots__ = (
        "__weakref__",
        "_on_move",
        "_on_error",
        "_command_bus",
        "_thread",
        "_worker",
        "_request_id",
        "_pending_request",
        "_pending_state",
        "_deliver_on_cancel",
        "_is_started",
    )

    def __init__(
        self,
        *,
        on_move: Callable[[Move, GameState], None],
        on_error: Callable[[str], None] | None = None,
        parent: QObject | None = None,
        max_depth: int = 3,
        time_limit_ms: int | None = 2000,
    ) -> None:
        self._on_move = on_move
        self._on_error = on_error
        self._command_bus = _SearchCommandBus(parent)
        self._thread = QThread(parent)
        self._worker = EngineWorker(max_depth=max_depth, time_limit_ms=time_limit_ms)
        self._request_id = 0
        self._pending_request: int | None = None
        self._pending_state: GameState | None = None
        self._deliver_on_cancel = False
        self._is_started = False

    @property
    def is_searching(self) -> bool:
        return self._pending_request is not None

    def setup(self) -> None:
        """Start the worker thread and connect signals."""
        if self._is_started:
            return
        self._worker.moveToThread(self._thread)
        self._command_bus.search_requested.connect(self._worker.request_move)
        self._command_bus.set_limits_requested.connect(self._worker.set_limits)
        self._worker.best_move_ready.connect(self._on_best_move)
        self._worker.search_cancelled.connect(self._on_cancelled)
        self._worker.search_error.connect(self._on_search_error)
        self._thread.start()
        self._is_started = True

    def shutdown(self) -> None:
        """Abandon any search and stop the worker thread."""
        if not self._is_started:
            return
        self.cancel()
        self._thread.quit()
        self._thread.wait(self._SHUTDOWN_WAIT_MS)
        self._is_started = False

    def set_limits(self, max_depth: int, time_limit_ms: int) -> None:
        """Update limits for subsequent searches (``time_limit_ms <= 0`` = none)."""
        if self._is_started:
            self._command_bus.set_limits_requested.emit(max_depth, time_limit_ms)
            return
        self._worker.set_limits(max_depth, time_limit_ms)

    def request(self, state: GameState) -> int:
        """Start searching *state*; any earlier request is abandoned."""
        self.cancel()
        self._request_id += 1
        self._pending_request = self._request_id
        self._pending_state = state
        self._deliver_on_cancel = False
        if self._is_started:
            self._command_bus.search_requested.emit(state, self._request_id)
        return self._request_id

    def stop(self) -> None:
        """Interrupt the search and deliver the best move found so far."""
        if self._pending_request is None:
            return
        self._deliver_on_cancel = True
        # Called directly: a queued slot call would wait behind the search.
        self._worker.cancel(self._pending_request)

    def cancel(self) -> None:
        """Interrupt the search and discard its result."""
        request_id = self._pending_request
        self._clear_pending()
        if request_id is not None:
            self._worker.cancel(request_id)

    # ── Worker callbacks ─────────────────────────────────────────────────

    def _on_best_move(
        self,
        request_id: int,
        move_obj: object,
        _score: int,
        _depth: int,
        _nodes: int,
    ) -> None:
        self._deliver(request_id, move_obj)

    def _on_cancelled(self, request_id: int, move_obj: object) -> None:
        if not self._deliver_on_cancel:
            if request_id == self._pending_request:
                self._clear_pending()
            return
        self._deliver(request_id, move_obj)

    def _on_search_error(self, request_id: int, message: str) -> None:
        if request_id != self._pending_request:
            return
        self._clear_pending()
        _LOGGER.error("Engine search failed: %s", message)
        if self._on_error is not None:
            self._on_error(message)

    def _deliver(self, request_id: int, move_obj: object) -> None:
        state = self._pending_state
        if request_id != self._pending_request or state is None:
            _LOGGER.debug("Dropping stale search result %d", request_id)
            return
        if not isinstance(move_obj, Move):
            return
        self._clear_pending()
        self._on_move(move_obj, state)

    def _clear_pending(self) -> None:
        self._pending_request = None
        self._pending_state = None
        self._deliver_on_cancel = False
