"""Tests for the Qt workspace grid view and its render worker."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtCore", exc_type=ImportError)
pytest.importorskip("PySide6.QtWidgets", exc_type=ImportError)

from PySide6.QtCore import QSize

from studieasy.classifier import classify
from studieasy.grid import FOLDER_PREVIEW
from studieasy.handles import HandleKind, grant_directory
from studieasy.listing import EntryDescriptor
from studieasy.thumbnails import RenderableImage
from studieasy.ui.workspace_grid import GridRenderWorker, WorkspaceGridView, render_label_icon


def _entry(name: str, kind: HandleKind = HandleKind.FILE, parent: str = "") -> EntryDescriptor:
    relative = f"{parent}/{name}" if parent else name
    return EntryDescriptor(name, relative, kind)


def test_render_label_icon_has_requested_size(qapp) -> None:
    image = render_label_icon("pdf", QSize(64, 48))

    assert not image.isNull()
    assert (image.width(), image.height()) == (64, 48)


def test_handlers_populate_current_pass(qapp, make_png) -> None:
    view = WorkspaceGridView(icon_size=QSize(48, 48))
    try:
        token = view.begin_pass()
        view._handle_cleared(token)
        view._handle_slot_added(token, 0, _entry("docs", HandleKind.DIRECTORY), FOLDER_PREVIEW)
        view._handle_slot_added(token, 1, _entry("photo.png"), classify("photo.png"))

        assert view.item_count() == 2
        assert view.item(0).text() == "docs"
        before = view.item(1).icon().cacheKey()

        view._handle_slot_updated(token, 1, RenderableImage("image/png", make_png((20, 20))))

        assert view.item(1).icon().cacheKey() != before
        assert not view.is_showing_empty_notice()
    finally:
        view.deleteLater()
        qapp.processEvents()


def test_stale_tokens_are_ignored(qapp) -> None:
    view = WorkspaceGridView()
    try:
        stale = view.begin_pass()
        current = view.begin_pass()

        view._handle_slot_added(stale, 0, _entry("old.txt"), classify("old.txt"))
        view._handle_emptied(stale)
        assert view.item_count() == 0
        assert not view.is_showing_empty_notice()

        view._handle_slot_added(current, 0, _entry("new.txt"), classify("new.txt"))
        assert view.item_count() == 1
        assert view.current_token == current
    finally:
        view.deleteLater()
        qapp.processEvents()


def test_empty_notice_replaces_grid(qapp) -> None:
    view = WorkspaceGridView()
    try:
        token = view.begin_pass()
        view._handle_cleared(token)
        view._handle_emptied(token)

        assert view.is_showing_empty_notice()
        assert view.item_count() == 0

        next_token = view.begin_pass()
        view._handle_cleared(next_token)
        assert not view.is_showing_empty_notice()
    finally:
        view.deleteLater()
        qapp.processEvents()


def test_activation_emits_directory_and_file_signals(qapp) -> None:
    view = WorkspaceGridView()
    try:
        directories: list[str] = []
        files: list[str] = []
        view.directoryActivated.connect(directories.append)
        view.fileActivated.connect(files.append)

        token = view.begin_pass()
        view._handle_slot_added(token, 0, _entry("drafts", HandleKind.DIRECTORY, "docs"), FOLDER_PREVIEW)
        view._handle_slot_added(token, 1, _entry("report.pdf", parent="docs"), classify("report.pdf"))

        view._handle_item_activated(view.item(0))
        view._handle_item_activated(view.item(1))

        assert directories == ["drafts"]
        assert files == ["docs/report.pdf"]
    finally:
        view.deleteLater()
        qapp.processEvents()


def test_errors_only_reported_for_current_pass(qapp) -> None:
    view = WorkspaceGridView()
    try:
        failures: list[str] = []
        view.loadFailed.connect(failures.append)

        stale = view.begin_pass()
        current = view.begin_pass()
        view._handle_error(stale, "old failure")
        view._handle_error(current, "Directory 'docs' no longer exists")

        assert failures == ["Directory 'docs' no longer exists"]
    finally:
        view.deleteLater()
        qapp.processEvents()


@pytest.mark.asyncio
async def test_worker_emits_pass_signals(qapp, workspace: Path) -> None:
    worker = GridRenderWorker(7, grant_directory(workspace), "docs", thumbnail_size=(32, 32))
    events: list[tuple] = []
    worker.signals.cleared.connect(lambda token: events.append(("cleared", token)))
    worker.signals.slotAdded.connect(lambda token, slot, entry, preview: events.append(("added", token, entry.name)))

    await worker.render()

    assert events == [("cleared", 7), ("added", 7, "drafts"), ("added", 7, "report.pdf")]


@pytest.mark.asyncio
async def test_cancelled_worker_does_not_render(qapp, workspace: Path) -> None:
    worker = GridRenderWorker(1, grant_directory(workspace), "")
    events: list[int] = []
    worker.signals.cleared.connect(events.append)

    worker.cancel()
    await worker.render()

    assert events == []
