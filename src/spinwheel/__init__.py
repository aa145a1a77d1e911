"""
spinwheel
=========
A drag-to-spin wheel selector: the user flings a disc of N wedges, it
decelerates, then snaps the nearest wedge onto a fixed marker.

Subpackages:
- model : angle math, velocity estimation, ticking and the wheel state machine
- app   : PySide6 widget, demo window and application bootstrap
"""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("spinwheel")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
