"""
Wedge Layout
============
Describes how the wheel is partitioned and where the selection marker sits.

Classes:
    SpinWheelDirection: The four marker directions and their reference angles.
    WedgeLayout: Immutable wedge count / width pair.
    WedgeSource: Protocol of the object that supplies the wedge count (and labels).
    StaticWedgeSource: A fixed list of labels.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, Sequence, runtime_checkable

from spinwheel.model.angle_math import Radians, snap_destination

logger = logging.getLogger(__name__)

CIRCLE_RADIANS: Radians = 2.0 * math.pi


class SpinWheelDirection(Enum):
    """Where on the wheel a wedge counts as selected."""
    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"

    @property
    def radians(self) -> Radians:
        return {
            SpinWheelDirection.UP: math.pi / 2,
            SpinWheelDirection.RIGHT: 0.0,
            SpinWheelDirection.DOWN: -math.pi / 2,
            SpinWheelDirection.LEFT: math.pi,
        }[self]


@dataclass(frozen=True)
class WedgeLayout:
    """N equal wedges. Rejects wheels with fewer than two wedges."""
    wedge_count: int
    wedge_width: Radians = field(init=False)

    def __post_init__(self) -> None:
        if self.wedge_count < 2:
            raise ValueError(f"A wheel needs at least 2 wedges, got {self.wedge_count}.")
        object.__setattr__(self, "wedge_width", CIRCLE_RADIANS / self.wedge_count)

    @property
    def degrees_per_wedge(self) -> float:
        return 360.0 / self.wedge_count

    def rest_orientation(self, reference: Radians) -> Radians:
        """Orientation after a reload: wedge 0 centered on the marker."""
        return snap_destination(0, self.wedge_width, reference)


def build_layout(wedge_count: Optional[int]) -> Optional[WedgeLayout]:
    """Layout for `wedge_count`, or None when no wheel can be drawn."""
    if wedge_count is None:
        logger.debug("No wedge source; the wheel stays empty.")
        return None
    if wedge_count < 2:
        logger.warning(f"Invalid wedge count {wedge_count}; the wheel stays empty.")
        return None
    return WedgeLayout(int(wedge_count))


@runtime_checkable
class WedgeSource(Protocol):
    """Supplies the number of wedges. `wedge_label(index)` is optional."""
    def wedge_count(self) -> int: ...


class StaticWedgeSource:
    """Wedge source over a fixed list of labels."""

    def __init__(self, labels: Sequence[str] | int) -> None:
        if isinstance(labels, int):
            labels = [f"Label #{i}" for i in range(labels)]
        self.labels: list[str] = list(labels)

    def wedge_count(self) -> int:
        return len(self.labels)

    def wedge_label(self, index: int) -> str:
        return self.labels[index]

    def __repr__(self) -> str:
        return f"StaticWedgeSource({len(self.labels)} wedges)"
