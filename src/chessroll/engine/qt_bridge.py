"""Qt bridge to compute move hints in a worker thread."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chessroll.engine.advisor import MAX_HINTS, evaluate_hints
from chessroll.game.state import GameState


class HintWorker(QObject):
    """Thread-affine worker that scores hints for a game state on demand.

    The exhaustive scan behind :func:`evaluate_hints` can take noticeable
    time, so a front end moves this object to a ``QThread`` and talks to
    it through queued signals.
    """

    hints_ready = pyqtSignal(int, object)
    hints_error = pyqtSignal(int, str)

    __slots__ = ("_limit",)

    def __init__(self, *, limit: int = MAX_HINTS) -> None:
        super().__init__()
        self._limit = limit

    @pyqtSlot(object, int)
    def request_hints(self, state_obj: object, request_id: int) -> None:
        """Score hints for *state_obj* and emit the result."""
        if not isinstance(state_obj, GameState):
            self.hints_error.emit(request_id, "Hint worker received invalid state")
            return

        if state_obj.game_over:
            self.hints_ready.emit(request_id, [])
            return

        try:
            hints = evaluate_hints(
                state_obj.board,
                state_obj.current_player,
                state_obj.selected_pieces,
                state_obj.used_pieces_count,
                state_obj.en_passant_target,
                limit=self._limit,
            )
        except Exception as exc:
            self.hints_error.emit(request_id, str(exc))
            return

        self.hints_ready.emit(request_id, hints)

    @pyqtSlot(int)
    def set_limit(self, limit: int) -> None:
        """Change how many hints are returned (takes effect on the next request)."""
        self._limit = limit
