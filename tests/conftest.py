"""Shared fixtures: headless Qt and a wheel driven by a hand-cranked tick source."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import math

import pytest
from PySide6.QtWidgets import QApplication

from spinwheel.model.state import WheelStateMachine
from spinwheel.model.ticks import ManualTickSource

CENTER = (0.0, 0.0)
RADIUS = 100.0


def rim(angle: float, radius: float = RADIUS) -> tuple[float, float]:
    """A point on the wheel at `angle`, far enough from the hub to be tracked."""
    return CENTER[0] + radius * math.cos(angle), CENTER[1] + radius * math.sin(angle)


class Recorder:
    """Collects everything a wheel emits."""

    def __init__(self, wheel: WheelStateMachine) -> None:
        self.rotations: list[float] = []
        self.selections: list[int] = []
        self.value_changes = 0
        self.statuses: list = []
        wheel.rotation_changed.connect(self.rotations.append)
        wheel.selection_ended.connect(self.selections.append)
        wheel.value_changed.connect(self._on_value_changed)
        wheel.status_changed.connect(self.statuses.append)

    def _on_value_changed(self) -> None:
        self.value_changes += 1


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def ticks() -> ManualTickSource:
    return ManualTickSource(ticks_per_second=60)


@pytest.fixture
def wheel(ticks) -> WheelStateMachine:
    return WheelStateMachine(4, ticks=ticks, center=CENTER)


@pytest.fixture
def recorder(wheel) -> Recorder:
    return Recorder(wheel)
