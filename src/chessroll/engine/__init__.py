"""Move advisor package: greedy hint scoring and Qt worker bridge."""

from chessroll.engine.advisor import MAX_HINTS, PIECE_VALUES, Hint, evaluate_hints
from chessroll.engine.qt_bridge import HintWorker

__all__ = [
    "MAX_HINTS",
    "PIECE_VALUES",
    "Hint",
    "HintWorker",
    "evaluate_hints",
]
