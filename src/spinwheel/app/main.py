"""
Run with: python -m spinwheel
"""
from __future__ import annotations

import argparse
import logging
import sys

from spinwheel.app.application import create_app
from spinwheel.app.ui.main_window import MainWindow
from spinwheel.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="spinwheel", description="Drag-to-spin wheel selector demo.")
    p.add_argument("--wedges", type=int, default=8, help="Number of wedges (default: 8)")
    p.add_argument("--debug", action="store_true", help="Log state transitions")
    p.add_argument("--log-file", type=str, default=None, help="Also write the log to this file")
    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    app = create_app()
    win = MainWindow(wedge_count=args.wedges)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
