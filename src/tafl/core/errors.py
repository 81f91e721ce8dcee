"""Exception types raised by the rule engine and the search."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tafl.core.move import Move


class TaflError(Exception):
    """Base class for all tafl errors."""


class ConfigurationError(TaflError, ValueError):
    """A variant was built from inconsistent or out-of-range settings."""


class IllegalMoveError(TaflError, ValueError):
    """A move is not in the legal set of the current state."""

    def __init__(self, move: Move, reason: str = "") -> None:
        self.move = move
        self.reason = reason
        message = f"Illegal move {move}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InvalidSearchState(TaflError, RuntimeError):
    """Search was asked to move in a finished or moveless position."""
