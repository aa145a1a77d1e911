from __future__ import annotations

from dataclasses import dataclass

from spinwheel.config import DEFAULT_CONFIG, WheelConfig
from spinwheel.model.angle_math import Radians, normalize_shortest


@dataclass
class MotionSample:
    angle: Radians
    timestamp: float


class MotionModel:
    """
    Estimates the fling velocity of a drag from its last two samples.

    Only the previous and the current sample are kept. A positive velocity
    means the finger moved toward decreasing angles.
    """

    def __init__(self, config: WheelConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.previous = MotionSample(0.0, 0.0)
        self.current = MotionSample(0.0, 0.0)

    def reset(self, angle: Radians, time: float) -> None:
        """Start a new drag at `angle`."""
        self.previous = MotionSample(angle, time)
        self.current = MotionSample(angle, time)

    def record_sample(self, angle: Radians, time: float) -> None:
        """
        Push a new sample. The angle is unwrapped against the last one, so a
        drag across the ±pi seam of atan2 reads as a small step.
        """
        unwrapped = self.current.angle + normalize_shortest(angle - self.current.angle)
        self.previous = self.current
        self.current = MotionSample(unwrapped, time)

    def advance_time(self, time: float) -> None:
        """Move the time window forward without taking a new angle (pointer over the hub)."""
        self.previous = MotionSample(self.previous.angle, self.current.timestamp)
        self.current = MotionSample(self.current.angle, time)

    def delta(self) -> Radians:
        """Rotation between the previous and the current sample."""
        return self.current.angle - self.previous.angle

    def compute_velocity(self) -> float:
        elapsed = self.current.timestamp - self.previous.timestamp
        if elapsed == 0:
            return 0.0

        travelled = self.previous.angle - self.current.angle
        if abs(travelled) < self.config.min_spin_radians:
            return 0.0

        v_max = self.config.max_velocity
        return max(-v_max, min(v_max, travelled / elapsed))
