"""Allow running Pomodoro as a module: python -m pomodoro."""

import argparse
import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db, app_support_dir
from .app import PomodoroWindow

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pomodoro", description="Focus/Break interval timer")
    parser.add_argument(
        "--data-dir",
        help="directory for the settings database and sound cache",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="log debug output",
    )
    # Qt consumes its own flags from the remaining arguments
    return parser.parse_known_args(argv)[0]


def main() -> None:
    args = _parse_args(sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.data_dir:
        os.environ["POMODORO_HOME"] = args.data_dir

    init_db()
    logger.info("Pomodoro ready (data in %s)", app_support_dir())

    app = QApplication(sys.argv)
    app.setApplicationName("Pomodoro")
    app.setOrganizationName("Pomodoro")

    window = PomodoroWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
