"""
Tick Sources
============
Periodic callbacks that drive the wheel animations.

The state machine only needs `subscribe`, `cancel` and the nominal rate, so
the same wheel runs on a Qt timer in the application and on a hand-cranked
source in tests.
"""
from __future__ import annotations

import itertools
import logging
from typing import Callable, Protocol

from PySide6.QtCore import QObject, QTimer, Qt

from spinwheel.config import TICKS_PER_SECOND

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickSource(Protocol):
    ticks_per_second: int

    def subscribe(self, callback: TickCallback) -> int: ...

    def cancel(self, handle: int) -> None: ...


class ManualTickSource:
    """Deterministic tick source: callbacks only run when `tick()` is called."""

    def __init__(self, ticks_per_second: int = TICKS_PER_SECOND) -> None:
        self.ticks_per_second = ticks_per_second
        self._callbacks: dict[int, TickCallback] = {}
        self._handles = itertools.count(1)

    @property
    def active_count(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: TickCallback) -> int:
        handle = next(self._handles)
        self._callbacks[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    def tick(self, count: int = 1) -> int:
        """
        Fire `count` ticks.

        Returns:
            How many ticks had at least one subscriber.
        """
        fired = 0
        for _ in range(count):
            if not self._callbacks:
                break
            for handle, callback in list(self._callbacks.items()):
                # a callback may cancel another subscription mid-tick
                if handle in self._callbacks:
                    callback()
            fired += 1
        return fired

    def run_until_idle(self, max_ticks: int = 100_000) -> int:
        """Tick until nobody is subscribed. Returns the number of ticks fired."""
        return self.tick(max_ticks)


class TimerTickSource(QObject):
    """One QTimer per subscription, firing at `ticks_per_second`."""

    def __init__(self, ticks_per_second: int = TICKS_PER_SECOND, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.ticks_per_second = ticks_per_second
        self._timers: dict[int, QTimer] = {}
        self._handles = itertools.count(1)

    @property
    def active_count(self) -> int:
        return len(self._timers)

    def subscribe(self, callback: TickCallback) -> int:
        handle = next(self._handles)
        timer = QTimer(self)
        timer.setTimerType(Qt.TimerType.PreciseTimer)
        timer.setInterval(max(1, round(1000 / self.ticks_per_second)))
        timer.timeout.connect(callback)
        self._timers[handle] = timer
        timer.start()
        logger.debug(f"Tick subscription {handle} started ({self.ticks_per_second}/s).")
        return handle

    def cancel(self, handle: int) -> None:
        timer = self._timers.pop(handle, None)
        if timer is None:
            return
        timer.stop()
        timer.deleteLater()
        logger.debug(f"Tick subscription {handle} cancelled.")
