"""
Configuration & Motion Constants
================================
This module serves as the central registry for the tunables of the wheel.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (thresholds, multipliers, frame
   rates) scattered throughout the state machine and the widget.
2. Validation: `WheelConfig` rejects values that would make the animations
   non-terminating, before a wheel is ever built with them.

Exports:
    WheelConfig: Frozen set of tunables injected into the state machine.
    DEFAULT_CONFIG: The configuration used when none is given.
"""
from __future__ import annotations

from dataclasses import dataclass

# Global Constants
MIN_SPIN_RADIANS: float = 0.1          # smaller drags are taps, not flings
MIN_DIST_FROM_CENTER: float = 30.0     # touches closer to the hub are ignored
MAX_VELOCITY: float = 20.0             # rad/s
DECELERATION_MULTIPLIER: float = 0.98  # must stay below MAX_DECELERATION_MULTIPLIER
MAX_DECELERATION_MULTIPLIER: float = 0.99
SPEED_TO_SNAP: float = 0.1             # rad/s
SNAP_PROXIMITY: float = 0.001          # rad
WEDGE_SNAP_MULTIPLIER: float = 10.0
TICKS_PER_SECOND: int = 60


@dataclass(frozen=True)
class WheelConfig:
    """Motion tunables of a single wheel."""
    min_spin_radians: float = MIN_SPIN_RADIANS
    min_distance_from_center: float = MIN_DIST_FROM_CENTER
    max_velocity: float = MAX_VELOCITY
    deceleration_multiplier: float = DECELERATION_MULTIPLIER
    speed_to_snap: float = SPEED_TO_SNAP
    snap_proximity: float = SNAP_PROXIMITY
    snap_velocity_multiplier: float = WEDGE_SNAP_MULTIPLIER
    # rate of the default TimerTickSource; an injected TickSource keeps its own
    ticks_per_second: int = TICKS_PER_SECOND

    def __post_init__(self) -> None:
        if not 0.0 < self.deceleration_multiplier < MAX_DECELERATION_MULTIPLIER:
            raise ValueError(
                f"deceleration_multiplier must be in (0, {MAX_DECELERATION_MULTIPLIER}), "
                f"got {self.deceleration_multiplier}"
            )
        if self.snap_velocity_multiplier < 1.0:
            raise ValueError(
                f"snap_velocity_multiplier must be >= 1, got {self.snap_velocity_multiplier}"
            )
        if self.ticks_per_second <= 0:
            raise ValueError(f"ticks_per_second must be positive, got {self.ticks_per_second}")
        for name in ("min_spin_radians", "max_velocity", "speed_to_snap", "snap_proximity"):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.min_distance_from_center < 0.0:
            raise ValueError(
                f"min_distance_from_center must not be negative, got {self.min_distance_from_center}"
            )


DEFAULT_CONFIG = WheelConfig()
