"""Tests for the main window wiring between session, recent paths and grid."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtWidgets", exc_type=ImportError)

from studieasy.application import main_window as main_window_module
from studieasy.application.main_window import NO_DIRECTORY_TEXT, MainWindow
from studieasy.application.settings import RecentPathsStore
from studieasy.errors import HandleInvalid
from studieasy.handles import grant_directory
from studieasy.session import WorkspaceSession


@pytest.fixture()
def window(qapp, settings_store):
    win = MainWindow(WorkspaceSession(RecentPathsStore(settings_store)))
    shown: list[tuple[str, str]] = []
    win.grid.show_directory = lambda root, relative_path="": shown.append((root.name, relative_path)) or 1
    win.shown = shown
    try:
        yield win
    finally:
        win.deleteLater()
        qapp.processEvents()


def test_initial_state(window: MainWindow) -> None:
    assert window._path_label.text() == NO_DIRECTORY_TEXT
    assert window._recent.count() == 0
    assert not window._up_button.isEnabled()


def test_choose_directory_renders_root(window: MainWindow, workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main_window_module, "request_directory_access", lambda parent: grant_directory(workspace))

    window._choose_directory()

    assert window._path_label.text() == "workspace"
    assert window.shown == [("workspace", "")]
    assert [window._recent.itemText(i) for i in range(window._recent.count())] == ["workspace"]


def test_cancelled_choice_changes_nothing(window: MainWindow, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main_window_module, "request_directory_access", lambda parent: None)

    window._choose_directory()

    assert window._path_label.text() == NO_DIRECTORY_TEXT
    assert window.shown == []


def test_failed_choice_reports_error(window: MainWindow, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(parent):
        raise HandleInvalid("gone")

    monkeypatch.setattr(main_window_module, "request_directory_access", fail)

    window._choose_directory()

    assert window._path_label.text() == "Error selecting directory"
    assert window.statusBar().currentMessage() == "gone"


def test_navigation_updates_path_and_grid(window: MainWindow, workspace: Path) -> None:
    window.session.select_directory(grant_directory(workspace))

    window._enter_directory("docs")
    assert window._path_label.text() == "workspace/docs"
    assert window._up_button.isEnabled()

    window._go_up()
    assert window._path_label.text() == "workspace"
    assert not window._up_button.isEnabled()
    assert window.shown == [("workspace", "docs"), ("workspace", "")]


def test_recent_path_outside_root(window: MainWindow, workspace: Path) -> None:
    window.session.select_directory(grant_directory(workspace))
    window._recent.addItem("elsewhere")

    window._open_recent(window._recent.count() - 1)

    assert window._path_label.text() == "elsewhere"
    assert window.shown == []
    assert window._recent.itemText(0) == "elsewhere"


def test_recent_path_inside_root(window: MainWindow, workspace: Path) -> None:
    window.session.select_directory(grant_directory(workspace))
    window._refresh_recent_paths()
    window._recent.addItem("workspace/docs/drafts")

    window._open_recent(window._recent.count() - 1)

    assert window.shown == [("workspace", "docs/drafts")]
    assert window._path_label.text() == "workspace/docs/drafts"
