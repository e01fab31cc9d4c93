"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterable, Iterator

import pytest

from chessroll.core.allocation import available_piece_types
from chessroll.core.board import Board
from chessroll.core.enums import Color, PieceType

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


class ScriptedRandom:
    """Deterministic random source replaying fixed floats, then ``0.0``."""

    def __init__(self, values: Iterable[float] = ()) -> None:
        self._values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self._values[self.calls] if self.calls < len(self._values) else 0.0
        self.calls += 1
        return value


DrawsFor = Callable[..., list[float]]


def draws_for(board: Board, color: Color, *piece_types: PieceType) -> list[float]:
    """Floats that make the uniform sampler draw exactly *piece_types*."""
    choices = available_piece_types(board, color)
    return [(choices.index(pt) + 0.5) / len(choices) for pt in piece_types]


@pytest.fixture
def scripted() -> type[ScriptedRandom]:
    return ScriptedRandom


@pytest.fixture
def draws() -> DrawsFor:
    return draws_for


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication for signal tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


class FakeTime:
    """Manually advanced stand-in for :func:`time.monotonic`."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()
