"""Application bootstrap for the studieasy desktop shell."""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication

from .application.main_window import MainWindow
from .config import get_config

__all__ = ["MainWindow", "main"]

logger = logging.getLogger(__name__)


def main() -> int:
    """Launch the studieasy Qt application."""

    logging.basicConfig(
        level=get_config().log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("Starting studieasy application")
    app = QApplication.instance()
    owns_application = False

    if app is None:
        app = QApplication(sys.argv)
        owns_application = True

    window = MainWindow()
    window.resize(960, 640)
    window.show()

    if owns_application:
        result = app.exec()
        logger.info("Qt event loop exited with code: %s", result)
        return result

    return 0
