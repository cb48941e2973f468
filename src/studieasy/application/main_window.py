"""Main Qt window for the studieasy desktop shell."""

from __future__ import annotations

import logging

from PySide6.QtCore import QCoreApplication, QSize, Slot
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..config import get_config
from ..errors import HandleInvalid
from ..session import WorkspaceSession
from ..ui.directory_picker import request_directory_access
from ..ui.workspace_grid import WorkspaceGridView
from .settings import APPLICATION_NAME, ORGANIZATION_NAME, RecentPathsStore

WINDOW_TITLE = "StudiEasy"

NO_DIRECTORY_TEXT = "No directory chosen"

logger = logging.getLogger(__name__)

__all__ = ["MainWindow"]


class MainWindow(QMainWindow):
    """Primary window: directory chooser, recent paths and the workspace grid."""

    def __init__(self, session: WorkspaceSession | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        QCoreApplication.setOrganizationName(ORGANIZATION_NAME)
        QCoreApplication.setApplicationName(APPLICATION_NAME)

        self._session = session or WorkspaceSession(RecentPathsStore())
        config = get_config()

        self._choose_button = QPushButton("Choose Directory", self)
        self._choose_button.setObjectName("directoryBtn")
        self._choose_button.clicked.connect(self._choose_directory)

        self._up_button = QPushButton("Up", self)
        self._up_button.setToolTip("Go to the parent directory")
        self._up_button.setEnabled(False)
        self._up_button.clicked.connect(self._go_up)

        self._path_label = QLabel(NO_DIRECTORY_TEXT, self)
        self._path_label.setObjectName("directoryPath")

        self._recent = QComboBox(self)
        self._recent.setObjectName("recentPaths")
        self._recent.setPlaceholderText("Recent directories")
        self._recent.setMinimumContentsLength(20)
        self._recent.activated.connect(self._open_recent)

        self._grid = WorkspaceGridView(self, icon_size=QSize(*config.thumbnail_size))
        self._grid.directoryActivated.connect(self._enter_directory)
        self._grid.fileActivated.connect(self._show_file_path)
        self._grid.loadFailed.connect(self._handle_load_failed)

        header = QHBoxLayout()
        header.setContentsMargins(0, 0, 0, 0)
        header.setSpacing(6)
        header.addWidget(self._choose_button)
        header.addWidget(self._up_button)
        header.addWidget(self._path_label, 1)
        header.addWidget(self._recent)

        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)
        layout.addLayout(header)
        layout.addWidget(self._grid, 1)
        self.setCentralWidget(central)

        self._refresh_recent_paths()

    @property
    def session(self) -> WorkspaceSession:
        return self._session

    @property
    def grid(self) -> WorkspaceGridView:
        return self._grid

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    @Slot()
    def _choose_directory(self) -> None:
        try:
            handle = request_directory_access(self)
        except HandleInvalid as exc:
            logger.error("Error selecting directory: %s", exc)
            self._update_directory_display("Error selecting directory")
            self.statusBar().showMessage(str(exc))
            return

        if handle is None:
            return

        self._session.select_directory(handle)
        self._refresh_recent_paths()
        self._show_current_directory()

    @Slot(int)
    def _open_recent(self, index: int) -> None:
        path = self._recent.itemText(index)
        if not path:
            return

        relative = self._session.locate(path)
        self._refresh_recent_paths()
        if relative is None:
            self._update_directory_display(path)
            self.statusBar().showMessage(f"Choose {path!r} again to grant access to it.")
            return
        self._show_current_directory()

    @Slot(str)
    def _enter_directory(self, name: str) -> None:
        self._session.enter(name)
        self._refresh_recent_paths()
        self._show_current_directory()

    @Slot()
    def _go_up(self) -> None:
        if self._session.root is None:
            return
        self._session.go_up()
        self._show_current_directory()

    @Slot(str)
    def _show_file_path(self, relative_path: str) -> None:
        self.statusBar().showMessage(relative_path)

    @Slot(str)
    def _handle_load_failed(self, message: str) -> None:
        self.statusBar().showMessage(f"Unable to open directory: {message}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _show_current_directory(self) -> None:
        root = self._session.root
        if root is None:
            return
        self._update_directory_display(self._session.current_path)
        self._up_button.setEnabled(bool(self._session.relative_path))
        self.statusBar().clearMessage()
        self._grid.show_directory(root, self._session.relative_path)

    def _update_directory_display(self, text: str | None) -> None:
        self._path_label.setText(text or NO_DIRECTORY_TEXT)

    def _refresh_recent_paths(self) -> None:
        was_blocked = self._recent.blockSignals(True)
        try:
            self._recent.clear()
            self._recent.addItems(self._session.recent_paths)
            self._recent.setCurrentIndex(-1)
        finally:
            self._recent.blockSignals(was_blocked)
