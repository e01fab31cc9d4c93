"""Countdown clock for both sides.

Two budgets are supported by :class:`TimeControl`:

* whole-game (classic, chaos, ai): each side spends one pool of seconds;
* per-turn (blitz): the side whose turn begins gets a full budget again.

Time is read from an injectable ``now`` callable so tests can drive it.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from chessroll.core.enums import Color
from chessroll.game.interfaces import IClock, TimeControl

TimeSource = Callable[[], float]


@dataclass(frozen=True, slots=True)
class ClockSnapshot:
    """Frozen copy of the budgets, used to rewind the clock on undo."""

    white_remaining: float
    black_remaining: float
    active_color: Color | None
    is_running: bool

    def remaining(self, color: Color) -> float:
        return self.white_remaining if color == Color.WHITE else self.black_remaining


class Clock(IClock):
    """Counts down the active side's budget while running."""

    __slots__ = ("_control", "_now", "_banked", "_active", "_since")

    def __init__(self, time_control: TimeControl, now: TimeSource = time.monotonic) -> None:
        self._control = time_control
        self._now = now
        self._banked: dict[Color, float] = dict.fromkeys(
            Color, time_control.initial_seconds
        )
        self._active: Color | None = None
        # Moment the active side's time started running; None while paused.
        self._since: float | None = None

    # ── IClock ───────────────────────────────────────────────────────────

    def start(self, color: Color) -> None:
        self._bank()
        self._active = color
        self._since = self._now()

    def stop(self) -> None:
        self._bank()
        self._since = None

    def switch(self) -> None:
        """Hand the running clock to the other side.

        Under a per-turn control the incoming side starts a fresh budget.
        """
        if self._active is None:
            return
        running = self._since is not None
        self._bank()
        self._active = self._active.opposite
        if self._control.per_turn:
            self._banked[self._active] = self._control.initial_seconds
        self._since = self._now() if running else None

    def remaining(self, color: Color) -> float:
        left = self._banked[color]
        if color == self._active and self._since is not None:
            left -= self._now() - self._since
        return max(0.0, left)

    def is_flag_fallen(self, color: Color) -> bool:
        return self.remaining(color) <= 0.0

    # ── Extras ───────────────────────────────────────────────────────────

    def flagged(self) -> Color | None:
        """Side to move if its time has run out, for periodic polling."""
        if self._active is not None and self.is_flag_fallen(self._active):
            return self._active
        return None

    def set_remaining(self, color: Color, seconds: float) -> None:
        """Override *color*'s budget (tests, adjudication)."""
        if color == self._active and self._since is not None:
            self._since = self._now()
        self._banked[color] = seconds

    @property
    def time_control(self) -> TimeControl:
        return self._control

    @property
    def is_running(self) -> bool:
        return self._since is not None

    @property
    def active_color(self) -> Color | None:
        return self._active

    @property
    def is_unlimited(self) -> bool:
        return self._control.initial_seconds == float("inf")

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            white_remaining=self.remaining(Color.WHITE),
            black_remaining=self.remaining(Color.BLACK),
            active_color=self._active,
            is_running=self.is_running,
        )

    def restore(self, snapshot: ClockSnapshot) -> None:
        for color in Color:
            self._banked[color] = snapshot.remaining(color)
        self._active = snapshot.active_color
        running = snapshot.is_running and snapshot.active_color is not None
        self._since = self._now() if running else None

    # ── Internal ─────────────────────────────────────────────────────────

    def _bank(self) -> None:
        """Move the running side's elapsed time into its stored budget."""
        if self._active is None or self._since is None:
            return
        now = self._now()
        self._banked[self._active] = max(
            0.0, self._banked[self._active] - (now - self._since)
        )
        self._since = now
