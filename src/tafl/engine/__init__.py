"""Tafl engine package: search implementation and Qt worker bridge."""

from tafl.engine.python_search import PythonSearchEngine, evaluate, select_move
from tafl.engine.qt_bridge import EngineWorker
from tafl.engine.search import CancelCheck, IEngine, SearchLimits, SearchResult
from tafl.engine.session import BackgroundSearch

__all__ = [
    "BackgroundSearch",
    "CancelCheck",
    "EngineWorker",
    "IEngine",
    "PythonSearchEngine",
    "SearchLimits",
    "SearchResult",
    "evaluate",
    "select_move",
]
