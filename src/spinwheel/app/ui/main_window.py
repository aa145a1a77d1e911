"""
Demo main window: the wheel, a small control panel and an event log.
"""
from __future__ import annotations

from datetime import datetime

from PySide6.QtCore import Qt, Slot
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QFormLayout, QGroupBox, QLabel,
    QSpinBox, QPushButton, QCheckBox, QDockWidget, QPlainTextEdit
)

from spinwheel.app.application import VISIBLE_APP_NAME
from spinwheel.app.ui.wheel_widget import SpinWheelWidget
from spinwheel.model.layout import StaticWedgeSource
from spinwheel.model.state import WheelStatus


class WheelEventLog(QPlainTextEdit):
    """Read-only feed of wheel events, newest at the bottom."""
    MAX_LINES = 500

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setMaximumBlockCount(self.MAX_LINES)

    def record(self, event: str, detail: str) -> None:
        self.appendPlainText(f"{datetime.now():%H:%M:%S}  {event:<9} {detail}")


class MainWindow(QMainWindow):
    def __init__(self, wedge_count: int = 8):
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(900, 640)

        central = QWidget(self)
        h = QHBoxLayout(central)

        self.wheel_widget = SpinWheelWidget(StaticWedgeSource(wedge_count), parent=central)
        h.addWidget(self.wheel_widget, 1)
        h.addWidget(self._build_controls(wedge_count), 0)
        self.setCentralWidget(central)

        # ---- Event log dock ----
        self.event_log = WheelEventLog(self)
        dock = QDockWidget(self.tr("Events"), self)
        dock.setWidget(self.event_log)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, dock)

        wheel = self.wheel_widget.wheel
        wheel.status_changed.connect(self._on_status_changed)
        wheel.selection_ended.connect(self._on_selection_ended)
        wheel.layout_changed.connect(self._on_layout_changed)
        self._on_layout_changed(wheel.layout)

    def _build_controls(self, wedge_count: int) -> QWidget:
        box = QGroupBox(self.tr("Wheel"), self)
        v = QVBoxLayout(box)
        form = QFormLayout()
        v.addLayout(form)

        self.spin_count = QSpinBox(box)
        self.spin_count.setRange(0, 24)
        self.spin_count.setValue(wedge_count)
        form.addRow(self.tr("Wedges:"), self.spin_count)

        self.btn_reload = QPushButton(self.tr("Reload"), box)
        self.btn_reload.clicked.connect(self._on_reload)
        form.addRow(self.btn_reload)

        self.spin_index = QSpinBox(box)
        self.spin_index.setRange(0, max(0, wedge_count - 1))
        form.addRow(self.tr("Wedge:"), self.spin_index)

        self.chk_animated = QCheckBox(self.tr("Animated"), box)
        self.chk_animated.setChecked(True)
        form.addRow(self.chk_animated)

        self.btn_select = QPushButton(self.tr("Select"), box)
        self.btn_select.clicked.connect(self._on_select)
        form.addRow(self.btn_select)

        self.lbl_status = QLabel(WheelStatus.IDLE.value, box)
        form.addRow(self.tr("Status:"), self.lbl_status)
        self.lbl_selected = QLabel("0", box)
        form.addRow(self.tr("Selected:"), self.lbl_selected)

        v.addStretch()
        return box

    @Slot()
    def _on_reload(self) -> None:
        self.wheel_widget.wheel.reload(StaticWedgeSource(self.spin_count.value()))

    @Slot()
    def _on_select(self) -> None:
        self.wheel_widget.wheel.select_wedge(self.spin_index.value(), animated=self.chk_animated.isChecked())

    def _on_status_changed(self, status: WheelStatus) -> None:
        self.lbl_status.setText(status.value)

    def _on_selection_ended(self, index: int) -> None:
        label = self.wheel_widget.wheel.wedge_label(index)
        self.lbl_selected.setText(f"{index} ({label})")
        self.event_log.record("selected", f"wedge {index}: {label}")

    def _on_layout_changed(self, layout) -> None:
        if layout is None:
            self.spin_index.setRange(0, 0)
            self.btn_select.setEnabled(False)
            self.event_log.record("empty", "at least 2 wedges are needed")
            return
        self.spin_index.setRange(0, layout.wedge_count - 1)
        self.btn_select.setEnabled(True)
        self.event_log.record("reloaded", f"{layout.wedge_count} wedges, {layout.degrees_per_wedge:g}° each")
