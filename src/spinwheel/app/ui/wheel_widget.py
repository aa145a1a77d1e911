from __future__ import annotations

import math
import time

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QMouseEvent, QPainter, QPaintEvent, QPen, QPolygonF, QResizeEvent
from PySide6.QtWidgets import QWidget

from spinwheel.app.ui.geometry import marker_triangle, polar_point, wedge_polygon, wedge_span
from spinwheel.config import DEFAULT_CONFIG, WheelConfig
from spinwheel.model.layout import WedgeSource
from spinwheel.model.state import WheelStateMachine
from spinwheel.model.ticks import TimerTickSource

WEDGE_COLORS = [
    "#1f3fbf", "#8b5a2b", "#00bcd4", "#505050", "#2e9d3a", "#c2185b", "#d32f2f",
    "#f57c00", "#212121", "#808080", "#b0b0b0", "#6a1b9a", "#fbc02d", "#f5f5f5",
]

RIM_MARGIN = 24.0
MARKER_SIZE = 18.0


def _polygon(points) -> QPolygonF:
    return QPolygonF([QPointF(float(x), float(y)) for x, y in points])


class SpinWheelWidget(QWidget):
    """
    Draws the wheel and feeds mouse input into its state machine.

    The wedges are painted in the wheel's own frame and rotated by the
    current orientation; the marker stays fixed at the reference direction.
    """
    def __init__(
        self,
        source: WedgeSource | int | None = None,
        config: WheelConfig | None = None,
        parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self.setMinimumSize(240, 240)

        config = config or DEFAULT_CONFIG
        self.ticks = TimerTickSource(config.ticks_per_second, parent=self)
        self.wheel = WheelStateMachine(source, ticks=self.ticks, config=config, parent=self)

        self._moved = False

        self.wheel.rotation_changed.connect(self._on_wheel_changed)
        self.wheel.layout_changed.connect(self._on_wheel_changed)

    # ------------------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------------------

    def wheel_center(self) -> tuple[float, float]:
        return self.width() / 2, self.height() / 2

    def wheel_radius(self) -> float:
        return max(0.0, min(self.width(), self.height()) / 2 - RIM_MARGIN)

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self.wheel.set_center(self.wheel_center())

    def _on_wheel_changed(self, *_) -> None:
        self.update()

    # ------------------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------------------

    @staticmethod
    def _point(event: QMouseEvent) -> tuple[float, float]:
        pos = event.position()
        return pos.x(), pos.y()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        self._moved = False
        if self.wheel.begin_tracking(self._point(event), time.monotonic()):
            event.accept()
        else:
            event.ignore()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if not self.wheel.is_tracking:
            super().mouseMoveEvent(event)
            return
        self._moved = True
        self.wheel.continue_tracking(self._point(event), time.monotonic())

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton or not self.wheel.is_tracking:
            super().mouseReleaseEvent(event)
            return
        tap_count = 0 if self._moved else 1
        self.wheel.end_tracking(self._point(event), time.monotonic(), tap_count)

    # ------------------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------------------

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.fillRect(self.rect(), self.palette().window())

            layout = self.wheel.layout
            if layout is None:
                return

            cx, cy = self.wheel_center()
            radius = self.wheel_radius()

            painter.save()
            painter.translate(cx, cy)
            painter.rotate(math.degrees(self.wheel.orientation))
            for index in range(layout.wedge_count):
                self._draw_wedge(painter, index, layout.wedge_width, radius)
            for index in range(layout.wedge_count):
                self._draw_label(painter, index, layout.wedge_width, radius)
            painter.restore()

            # marker in screen space (y grows downward, so "up" is -pi/2)
            marker = marker_triangle((cx, cy), radius, -self.wheel.reference, MARKER_SIZE)
            painter.setPen(QPen(QColor("black"), 1.5))
            painter.setBrush(QBrush(QColor("#ff5252")))
            painter.drawPolygon(_polygon(marker))
        finally:
            painter.end()

    def _draw_wedge(self, painter: QPainter, index: int, wedge_width: float, radius: float) -> None:
        start, end = wedge_span(index, wedge_width)
        points = wedge_polygon((0.0, 0.0), radius, start, end)
        painter.setPen(QPen(QColor("black"), 3.0))
        painter.setBrush(QBrush(QColor(WEDGE_COLORS[index % len(WEDGE_COLORS)])))
        painter.drawPolygon(_polygon(points))

    def _draw_label(self, painter: QPainter, index: int, wedge_width: float, radius: float) -> None:
        start, end = wedge_span(index, wedge_width)
        x, y = polar_point((0.0, 0.0), radius * 0.62, (start + end) / 2)
        box = QRectF(x - radius / 4, y - 12.0, radius / 2, 24.0)
        painter.setPen(QPen(QColor("white")))
        painter.drawText(box, Qt.AlignmentFlag.AlignCenter, self.wheel.wedge_label(index))
