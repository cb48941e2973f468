"""Interactive directory grant through the platform folder dialog."""

from __future__ import annotations

import logging

from PySide6.QtWidgets import QFileDialog, QWidget

from ..handles import DirectoryHandle, grant_directory

__all__ = ["request_directory_access"]

logger = logging.getLogger(__name__)


def request_directory_access(
    parent: QWidget | None = None,
    *,
    start_directory: str = "",
) -> DirectoryHandle | None:
    """Ask the user for a directory and return a handle granting access to it.

    Returns ``None`` when the user cancels the dialog. A selection that cannot
    be granted raises :class:`~studieasy.errors.HandleInvalid`.
    """

    selected = QFileDialog.getExistingDirectory(
        parent,
        "Choose a directory",
        start_directory,
        QFileDialog.ShowDirsOnly,
    )
    if not selected:
        logger.debug("Directory selection cancelled")
        return None
    return grant_directory(selected)
