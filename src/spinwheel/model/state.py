"""
Wheel State Machine
===================
Owns the orientation of the wheel and drives its two animations.

Why is this file needed?
------------------------
1. State Management: orientation, status, velocity and the snap target live
   in one place; the widget only reads them.
2. Decoupling: the renderer and the input layer talk to the wheel through
   plain method calls and Qt signals, so the motion logic can be exercised
   without a window (see `ManualTickSource`).

Lifecycle:
    IDLE --drag--> (tracking) --release--> DECELERATING --slow enough--> SNAPPING --close enough--> IDLE
    A release without a fling, a tap, or `select_wedge()` goes straight to SNAPPING.
    A new drag interrupts either animation and finalizes it on the spot.

Classes:
    WheelStatus: The three animation states.
    SnapTarget: Destination of the running snap.
    WheelStateMachine: The controller itself.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from spinwheel.config import DEFAULT_CONFIG, WheelConfig
from spinwheel.model.angle_math import (
    Point, Radians, angle_for_point, distance_from_center, nearest_wedge_index,
    nearest_wedge_offset, normalize_shortest, snap_destination,
)
from spinwheel.model.layout import SpinWheelDirection, StaticWedgeSource, WedgeLayout, WedgeSource, build_layout
from spinwheel.model.motion import MotionModel
from spinwheel.model.ticks import TickSource, TimerTickSource

logger = logging.getLogger(__name__)


class WheelStatus(Enum):
    IDLE = "idle"
    DECELERATING = "decelerating"
    SNAPPING = "snapping"


@dataclass
class SnapTarget:
    destination: Radians
    increment_per_tick: Radians = 0.0


class WheelStateMachine(QObject):
    """
    Angular motion controller of a spin wheel.

    Deceleration is scaled by the rate of the tick source in use. Without an
    injected source a `TimerTickSource` is built at `config.ticks_per_second`.

    Signals:
        rotation_changed(float): Orientation changed by the given delta (drag or animation).
        selection_ended(int): A snap completed on the given wedge index.
        value_changed(): Emitted right after `selection_ended`.
        status_changed(object): The new `WheelStatus`.
        layout_changed(object): The new `WedgeLayout`, or None for an empty wheel.
    """
    rotation_changed = Signal(float)
    selection_ended = Signal(int)
    value_changed = Signal()
    status_changed = Signal(object)
    layout_changed = Signal(object)

    def __init__(
        self,
        source: WedgeSource | int | None = None,
        ticks: TickSource | None = None,
        config: WheelConfig | None = None,
        reference: SpinWheelDirection = SpinWheelDirection.UP,
        center: Point = (0.0, 0.0),
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.config = config or DEFAULT_CONFIG
        self.ticks: TickSource = ticks if ticks is not None else TimerTickSource(self.config.ticks_per_second, self)
        self.direction = reference
        self.reference: Radians = reference.radians
        self._center: Point = center

        self._source: Optional[WedgeSource] = None
        self._layout: Optional[WedgeLayout] = None
        self._orientation: Radians = 0.0
        self._status = WheelStatus.IDLE
        self._selected_index: int = 0

        self._motion = MotionModel(self.config)
        self._tracking = False
        self._detecting_tap = False

        self._velocity: float = 0.0
        self._snap_target: Optional[SnapTarget] = None
        self._tick_handle: Optional[int] = None

        self.reload(source)

    # ------------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------------

    @property
    def orientation(self) -> Radians:
        return self._orientation

    @property
    def status(self) -> WheelStatus:
        return self._status

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def layout(self) -> Optional[WedgeLayout]:
        return self._layout

    @property
    def velocity(self) -> float:
        return self._velocity

    @property
    def snap_target(self) -> Optional[SnapTarget]:
        return self._snap_target

    @property
    def is_tracking(self) -> bool:
        return self._tracking

    @property
    def center(self) -> Point:
        return self._center

    def set_center(self, center: Point) -> None:
        self._center = center

    def wedge_label(self, index: int) -> str:
        label = getattr(self._source, "wedge_label", None)
        if callable(label):
            return str(label(index))
        return str(index)

    def current_index(self) -> Optional[int]:
        """Wedge currently closest to the marker (None for an empty wheel)."""
        if self._layout is None:
            return None
        return nearest_wedge_index(self._orientation, self._layout.wedge_width, self._layout.wedge_count, self.reference)

    # ------------------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------------------

    def reload(self, source: WedgeSource | int | None = None) -> None:
        """
        Rebuild the layout and put the wheel back in its rest pose.

        Args:
            source: New wedge source; an int is shorthand for that many numbered wedges.
                    When omitted the current source is queried again.
        """
        self._cancel_ticks()
        self._tracking = False
        self._detecting_tap = False
        self._velocity = 0.0
        self._snap_target = None

        if source is not None:
            self._source = StaticWedgeSource(source) if isinstance(source, int) else source

        count = self._source.wedge_count() if self._source is not None else None
        self._layout = build_layout(count)
        self._orientation = self._layout.rest_orientation(self.reference) if self._layout else 0.0
        self._set_status(WheelStatus.IDLE)

        if self._layout is not None:
            logger.info(f"Wheel reloaded with {self._layout.wedge_count} wedges.")
        self.layout_changed.emit(self._layout)

    def clear(self) -> None:
        """Stop all motion and drop the layout. Nothing is drawn until the next reload."""
        self._cancel_ticks()
        self._tracking = False
        self._detecting_tap = False
        self._velocity = 0.0
        self._snap_target = None
        self._layout = None
        self._set_status(WheelStatus.IDLE)
        logger.info("Wheel cleared.")
        self.layout_changed.emit(None)

    # ------------------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------------------

    def begin_tracking(self, point: Point, time: float) -> bool:
        """
        A pointer went down at `point`.

        Returns:
            True if the wheel follows this pointer, False if it is ignored
            (empty wheel, or too close to the hub).
        """
        if self._layout is None:
            return False
        if distance_from_center(point, self._center) < self.config.min_distance_from_center:
            return False

        if self._status is WheelStatus.IDLE:
            self._detecting_tap = True
        else:
            self._detecting_tap = False
            self._interrupt()

        self._motion.reset(angle_for_point(point, self._center), time)
        self._tracking = True
        return True

    def continue_tracking(self, point: Point, time: float) -> bool:
        """The tracked pointer moved: the wheel follows the finger."""
        if not self._tracking:
            return False

        self._detecting_tap = False
        if distance_from_center(point, self._center) < self.config.min_distance_from_center:
            self._motion.advance_time(time)
            return True

        self._motion.record_sample(angle_for_point(point, self._center), time)
        delta = self._motion.delta()
        if delta:
            self._rotate(delta)
        return True

    def end_tracking(self, point: Optional[Point] = None, time: Optional[float] = None, tap_count: int = 0) -> None:
        """
        The tracked pointer was released.

        The release position is not sampled; the fling velocity comes from the
        last two moves.
        """
        if not self._tracking:
            return
        self._tracking = False

        was_tap = self._detecting_tap and tap_count > 0
        self._detecting_tap = False
        if was_tap:
            logger.debug("Tap released; snapping to the nearest wedge.")
            self.snap_to_nearest_wedge()
            return

        velocity = self._motion.compute_velocity()
        if velocity != 0:
            self._begin_deceleration(velocity)
        else:
            self.snap_to_nearest_wedge()

    # ------------------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------------------

    def select_wedge(self, index: int, animated: bool = True) -> None:
        """
        Center wedge `index` on the marker.

        Does nothing when the wheel is empty, while a pointer is dragging it,
        or when the wedge is already there.
        """
        if self._layout is None:
            return
        if self._tracking:
            logger.debug(f"Ignoring selection of wedge {index} during a drag.")
            return

        destination = snap_destination(index, self._layout.wedge_width, self.reference)
        if abs(normalize_shortest(destination - self._orientation)) <= self.config.snap_proximity:
            logger.debug(f"Wedge {index} is already selected.")
            return

        logger.debug(f"Select wedge at index {index} (animated={animated}).")
        self._velocity = 0.0
        if animated:
            self._start_snap(destination)
        else:
            self._cancel_ticks()
            self._snap_target = SnapTarget(destination)
            self._finish_snap(land=True)

    def snap_to_nearest_wedge(self) -> None:
        if self._layout is None:
            return
        offset = nearest_wedge_offset(self._orientation, self._layout.wedge_width, self.reference)
        self._start_snap(snap_destination(offset, self._layout.wedge_width, self.reference))

    # ------------------------------------------------------------------------------
    # Animations
    # ------------------------------------------------------------------------------

    def _begin_deceleration(self, velocity: float) -> None:
        self._velocity = velocity
        self._set_status(WheelStatus.DECELERATING)
        self._start_ticking(self._deceleration_step)

    def _deceleration_step(self) -> None:
        self._velocity *= self.config.deceleration_multiplier
        self._rotate(-self._velocity / self.ticks.ticks_per_second)

        if abs(self._velocity) <= self.config.speed_to_snap:
            self._velocity = 0.0
            self.snap_to_nearest_wedge()

    def _start_snap(self, destination: Radians) -> None:
        self._snap_target = SnapTarget(destination)
        self._set_status(WheelStatus.SNAPPING)
        self._start_ticking(self._snap_step)

    def _snap_step(self) -> None:
        target = self._snap_target
        remaining = normalize_shortest(target.destination - self._orientation)

        if abs(remaining) <= self.config.snap_proximity:
            self._finish_snap(land=True)
            return

        # exponential approach: a fixed fraction of what is left
        target.increment_per_tick = remaining / self.config.snap_velocity_multiplier
        self._rotate(target.increment_per_tick)

    def _finish_snap(self, land: bool) -> None:
        self._cancel_ticks()
        target = self._snap_target
        self._snap_target = None

        if land:
            residual = normalize_shortest(target.destination - self._orientation)
            if residual:
                self._rotate(residual)

        layout = self._layout
        index = nearest_wedge_index(target.destination, layout.wedge_width, layout.wedge_count, self.reference)
        self._selected_index = index
        self._set_status(WheelStatus.IDLE)

        logger.debug(f"Snap ended on wedge {index}.")
        self.selection_ended.emit(index)
        self.value_changed.emit()

    def _interrupt(self) -> None:
        """Finalize the running animation where the wheel currently is."""
        self._cancel_ticks()
        self._velocity = 0.0
        # nearest wedge of where the wheel stopped
        offset = nearest_wedge_offset(self._orientation, self._layout.wedge_width, self.reference)
        self._snap_target = SnapTarget(snap_destination(offset, self._layout.wedge_width, self.reference))
        logger.debug(f"Interrupted while {self._status.value}.")
        self._finish_snap(land=False)

    # ------------------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------------------

    def _rotate(self, delta: Radians) -> None:
        self._orientation += delta
        self.rotation_changed.emit(delta)

    def _set_status(self, status: WheelStatus) -> None:
        if status is self._status:
            return
        logger.debug(f"Status {self._status.value} -> {status.value}")
        self._status = status
        self.status_changed.emit(status)

    def _start_ticking(self, step: Callable[[], None]) -> None:
        self._cancel_ticks()
        handle: Optional[int] = None

        def on_tick() -> None:
            # a cancelled subscription may still deliver one queued tick
            if handle is not None and handle == self._tick_handle:
                step()

        handle = self.ticks.subscribe(on_tick)
        self._tick_handle = handle

    def _cancel_ticks(self) -> None:
        if self._tick_handle is not None:
            self.ticks.cancel(self._tick_handle)
            self._tick_handle = None
