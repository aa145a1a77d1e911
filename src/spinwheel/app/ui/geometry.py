from __future__ import annotations

import numpy as np
from numpy import typing as npt


def arc_points(
    center: tuple[float, float],
    radius: float,
    start_angle: float,
    end_angle: float,
    n_points: int = 32
) -> npt.NDArray[np.float64]:
    """
    Generate points along a circular arc from `start_angle` to `end_angle`.

    Args:
        center: Circle center (cx, cy).
        radius: Circle radius.
        start_angle: Angle of the first point, in radians.
        end_angle: Angle of the last point, in radians.
        n_points: Number of points to generate along the arc (including endpoints).

    Returns:
        Array of shape (n_points, 2) containing the (x, y) coordinates of the points along the arc.
    """
    cx, cy = center
    angles = np.linspace(start_angle, end_angle, n_points)
    return np.column_stack((cx + radius * np.cos(angles), cy + radius * np.sin(angles)))


def wedge_span(index: int, wedge_width: float) -> tuple[float, float]:
    """
    Start/end angle of wedge `index` in the wheel's own frame.

    Wedges are laid out toward decreasing angles, so wedge k sits on the
    marker exactly when the orientation is `snap_destination(k)`.
    """
    return -index * wedge_width, (1 - index) * wedge_width


def wedge_polygon(
    center: tuple[float, float],
    radius: float,
    start_angle: float,
    end_angle: float,
    n_points: int = 32
) -> npt.NDArray[np.float64]:
    """
    Closed fan polygon of one wedge: the center followed by its rim arc.

    Returns:
        An array of shape (n_points + 1, 2).
    """
    rim = arc_points(center, radius, start_angle, end_angle, n_points)
    return np.vstack((np.asarray(center, dtype=np.float64), rim))


def polar_point(center: tuple[float, float], radius: float, angle: float) -> tuple[float, float]:
    cx, cy = center
    return cx + radius * float(np.cos(angle)), cy + radius * float(np.sin(angle))


def marker_triangle(
    center: tuple[float, float],
    radius: float,
    angle: float,
    size: float
) -> npt.NDArray[np.float64]:
    """
    Triangle pointing at the rim from outside, at `angle`.

    Returns:
        An array of shape (3, 2): the tip on the rim, then the two base corners.
    """
    tip = polar_point(center, radius, angle)
    base_mid = polar_point(center, radius + size, angle)
    # unit vector perpendicular to the radius
    px, py = -np.sin(angle), np.cos(angle)
    half = size / 2
    return np.array([
        tip,
        (base_mid[0] + px * half, base_mid[1] + py * half),
        (base_mid[0] - px * half, base_mid[1] - py * half),
    ], dtype=np.float64)
