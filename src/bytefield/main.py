"""
Application Initialization
==========================
This module constructs the Model-View-Controller pieces and starts the Qt
Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Instantiates the Engine State (model).
2. Instantiates the Main Window (view), which owns the animation driver.
3. Optionally preloads a file given on the command line.
"""
import argparse
import sys
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from bytefield import config
from bytefield.logging_config import setup_logging
from bytefield.model.state import EngineState
from bytefield.view.main_window import MainWindow


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="bytefield", description="Visualize a file as a 3D field of instances.")
    parser.add_argument("path", nargs="?", help="File to load on startup.")
    parser.add_argument("--bytes", action="store_true", help="Read the file as raw bytes instead of text.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ...).")
    parser.add_argument("--log-file", default=None, help="Optional path to also write logs to.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=args.log_level, log_file=args.log_file)

    # 2. Create the Qt Application
    app = QApplication(sys.argv[:1])
    app.setApplicationName(config.APP_NAME)

    # 3. Initialize the Data Model
    state = EngineState()

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(state)
    window.show()

    if args.path:
        window.load_path(args.path, raw_bytes=args.bytes)

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
