"""
Angle Math
==========
Pure helpers for the wheel's angular bookkeeping.

All angles are in radians. Orientations are unwrapped (they may grow past
±pi while the wheel spins) and are only ever compared through
`normalize_shortest`, so the ±pi seam never produces a jump.
"""
from __future__ import annotations

import math

Radians = float
Point = tuple[float, float]


def normalize_shortest(delta: Radians) -> Radians:
    """
    Signed shortest-path equivalent of `delta`, in (-pi, pi].

    Args:
        delta: Any angle difference.

    Returns:
        An angle with the same sine and cosine as `delta`.
    """
    result = math.atan2(math.sin(delta), math.cos(delta))
    if result <= -math.pi:
        return math.pi
    return result


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    magnitude = abs(value)
    rounded = math.floor(magnitude)
    if magnitude - rounded >= 0.5:
        rounded += 1
    return rounded if value >= 0 else -rounded


def nearest_wedge_offset(current: Radians, wedge_width: Radians, reference: Radians) -> int:
    """
    Unreduced index of the wedge closest to the reference angle.

    The result is not wrapped into [0, count), so `snap_destination` of it lies
    within half a wedge of `current` even when the orientation is unwrapped.
    """
    return round_half_away((current + wedge_width / 2 + reference) / wedge_width)


def nearest_wedge_index(current: Radians, wedge_width: Radians, wedge_count: int, reference: Radians) -> int:
    """
    Index in [0, wedge_count) of the wedge closest to the reference angle.

    Args:
        current: Current (unwrapped) orientation of the wheel.
        wedge_width: Angular width of one wedge (2*pi / wedge_count).
        wedge_count: Number of wedges on the wheel.
        reference: The angle at which a wedge counts as selected.
    """
    return nearest_wedge_offset(current, wedge_width, reference) % wedge_count


def snap_destination(index: int, wedge_width: Radians, reference: Radians) -> Radians:
    """Orientation at which wedge `index` is centered on the reference angle."""
    return -reference + index * wedge_width - wedge_width / 2


def distance_from_center(point: Point, center: Point) -> float:
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return math.hypot(dx, dy)


def angle_for_point(point: Point, center: Point) -> Radians:
    """Angle of `point` as seen from `center`, in [-pi, pi]."""
    return math.atan2(point[1] - center[1], point[0] - center[0])
