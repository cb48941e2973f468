"""Grid widget showing one directory level with icons and thumbnails."""

from __future__ import annotations

import asyncio
import logging

from PySide6.QtCore import QObject, QRunnable, QSize, Qt, QThreadPool, Signal, Slot
from PySide6.QtGui import QColor, QFont, QIcon, QImage, QPainter, QPixmap
from PySide6.QtWidgets import (
    QAbstractItemView,
    QLabel,
    QListView,
    QListWidget,
    QListWidgetItem,
    QStackedLayout,
    QWidget,
)

from ..classifier import PreviewClass, fallback_icon, icon_label
from ..errors import WorkspaceError
from ..grid import RenderPass, WorkspaceGridRenderer
from ..handles import DirectoryHandle
from ..listing import EntryDescriptor
from ..resolver import resolve_directory
from ..thumbnails import RenderableImage, ThumbnailPipeline

__all__ = ["EMPTY_DIRECTORY_NOTICE", "GridRenderWorker", "WorkspaceGridView", "render_label_icon"]

logger = logging.getLogger(__name__)

EMPTY_DIRECTORY_NOTICE = "This directory is empty."

_ENTRY_ROLE = Qt.UserRole + 1


class GridRenderWorkerSignals(QObject):
    """Signals emitted by :class:`GridRenderWorker`."""

    cleared = Signal(int)
    emptied = Signal(int)
    slotAdded = Signal(int, int, object, object)
    slotUpdated = Signal(int, int, object)
    finished = Signal(int)
    error = Signal(int, str)


class _SignalTarget:
    """Render target forwarding every write to the GUI thread as a signal."""

    def __init__(self, token: int, signals: GridRenderWorkerSignals) -> None:
        self._token = token
        self._signals = signals
        self._next_slot = 0

    def clear(self) -> None:
        self._next_slot = 0
        self._signals.cleared.emit(self._token)

    def show_empty_notice(self) -> None:
        self._signals.emptied.emit(self._token)

    def add_slot(self, entry: EntryDescriptor, preview: PreviewClass) -> int:
        slot = self._next_slot
        self._next_slot += 1
        self._signals.slotAdded.emit(self._token, slot, entry, preview)
        return slot

    def update_slot(self, slot: int, image: RenderableImage) -> None:
        self._signals.slotUpdated.emit(self._token, slot, image)


class GridRenderWorker(QRunnable):
    """Background task running one render pass on its own event loop."""

    def __init__(
        self,
        token: int,
        root: DirectoryHandle,
        relative_path: str,
        *,
        thumbnail_size: tuple[int, int] | None = None,
        sort_entries: bool = True,
    ) -> None:
        super().__init__()
        self._token = token
        self._root = root
        self._relative_path = relative_path
        self._thumbnail_size = thumbnail_size
        self._sort_entries = sort_entries
        self._loop: asyncio.AbstractEventLoop | None = None
        self._render_pass: RenderPass | None = None
        self._cancelled = False
        self.signals = GridRenderWorkerSignals()

    @property
    def token(self) -> int:
        return self._token

    def cancel(self) -> None:
        """Ask the worker to abandon pending thumbnails; safe from any thread."""

        self._cancelled = True
        loop = self._loop
        if loop is not None and not loop.is_closed():
            try:
                loop.call_soon_threadsafe(self._cancel_pending)
            except RuntimeError:  # loop closed between the check and the call
                pass

    def run(self) -> None:  # pragma: no cover - executed via Qt threads
        try:
            asyncio.run(self.render())
        except WorkspaceError as exc:
            logger.warning("Unable to render %r: %s", self._relative_path or self._root.name, exc)
            self.signals.error.emit(self._token, str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to render directory %r", self._relative_path)
            self.signals.error.emit(self._token, str(exc) or exc.__class__.__name__)
        else:
            self.signals.finished.emit(self._token)

    async def render(self) -> None:
        """Resolve the directory, render it and wait for its thumbnails."""

        self._loop = asyncio.get_running_loop()
        if self._cancelled:
            return
        handle = await resolve_directory(self._root, self._relative_path)
        renderer = WorkspaceGridRenderer(
            ThumbnailPipeline(size=self._thumbnail_size),
            sort_entries=self._sort_entries,
        )
        target = _SignalTarget(self._token, self.signals)
        self._render_pass = await renderer.render(handle, target, self._relative_path)
        if self._cancelled:
            self._render_pass.cancel()
        await self._render_pass.wait()

    def _cancel_pending(self) -> None:
        if self._render_pass is not None:
            self._render_pass.cancel()


def render_label_icon(icon_id: str, size: QSize) -> QImage:
    """Paint the static icon *icon_id* as a rounded label tile."""

    text, color = icon_label(icon_id)
    w, h = max(16, size.width()), max(16, size.height())
    img = QImage(w, h, QImage.Format_ARGB32)
    img.fill(QColor(0, 0, 0, 0))
    painter = QPainter(img)
    try:
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setBrush(QColor(*color))
        painter.setPen(QColor(0, 0, 0, 0))
        margin = int(min(w, h) * 0.08)
        painter.drawRoundedRect(margin, margin, w - 2 * margin, h - 2 * margin, 10, 10)
        painter.setPen(QColor(255, 255, 255))
        font = QFont()
        font.setBold(True)
        font.setPointSize(max(6, int(min(w, h) * 0.22)))
        painter.setFont(font)
        painter.drawText(0, 0, w, h, Qt.AlignCenter, text[:4])
    finally:
        painter.end()
    return img


class WorkspaceGridView(QWidget):
    """Icon grid for one directory level fed by :class:`GridRenderWorker`."""

    directoryActivated = Signal(str)
    """Emitted with the child directory name when a folder is activated."""

    fileActivated = Signal(str)
    """Emitted with the root-relative path when a file is activated."""

    loadFailed = Signal(str)
    """Emitted when the listing for the requested directory failed."""

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        icon_size: QSize | None = None,
        thread_pool: QThreadPool | None = None,
    ) -> None:
        super().__init__(parent)
        self._icon_size = icon_size or QSize(96, 96)
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        self._token = 0
        self._worker: GridRenderWorker | None = None
        self._items: dict[int, QListWidgetItem] = {}
        self._icon_cache: dict[str, QIcon] = {}

        self._list = QListWidget(self)
        self._list.setObjectName("workspaceGrid")
        self._list.setViewMode(QListView.IconMode)
        self._list.setResizeMode(QListView.Adjust)
        self._list.setMovement(QListView.Static)
        self._list.setUniformItemSizes(True)
        self._list.setWordWrap(True)
        self._list.setIconSize(self._icon_size)
        self._list.setGridSize(QSize(self._icon_size.width() + 32, self._icon_size.height() + 40))
        self._list.setSelectionMode(QAbstractItemView.SingleSelection)
        self._list.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self._list.itemActivated.connect(self._handle_item_activated)

        self._notice = QLabel(EMPTY_DIRECTORY_NOTICE, self)
        self._notice.setObjectName("workspaceEmptyNotice")
        self._notice.setAlignment(Qt.AlignCenter)

        self._stack = QStackedLayout(self)
        self._stack.setContentsMargins(0, 0, 0, 0)
        self._stack.addWidget(self._list)
        self._stack.addWidget(self._notice)
        self._stack.setCurrentWidget(self._list)

    @property
    def current_token(self) -> int:
        return self._token

    def is_showing_empty_notice(self) -> bool:
        return self._stack.currentWidget() is self._notice

    def item_count(self) -> int:
        return self._list.count()

    def item(self, slot: int) -> QListWidgetItem | None:
        return self._items.get(slot)

    def show_directory(self, root: DirectoryHandle, relative_path: str = "") -> int:
        """Start rendering *relative_path* beneath *root*; returns the pass token."""

        token = self.begin_pass()
        worker = GridRenderWorker(
            token,
            root,
            relative_path,
            thumbnail_size=(self._icon_size.width(), self._icon_size.height()),
        )
        worker.signals.cleared.connect(self._handle_cleared)
        worker.signals.emptied.connect(self._handle_emptied)
        worker.signals.slotAdded.connect(self._handle_slot_added)
        worker.signals.slotUpdated.connect(self._handle_slot_updated)
        worker.signals.error.connect(self._handle_error)
        worker.signals.finished.connect(self._handle_finished)
        self._worker = worker
        self._thread_pool.start(worker)
        return token

    def begin_pass(self) -> int:
        """Invalidate the running pass and return the token of a new one."""

        if self._worker is not None:
            self._worker.cancel()
            self._worker = None
        self._token += 1
        return self._token

    def clear(self) -> None:
        self._list.clear()
        self._items.clear()
        self._stack.setCurrentWidget(self._list)

    # ------------------------------------------------------------------
    # Worker signal handlers
    # ------------------------------------------------------------------
    @Slot(int)
    def _handle_cleared(self, token: int) -> None:
        if token != self._token:
            return
        self.clear()

    @Slot(int)
    def _handle_emptied(self, token: int) -> None:
        if token != self._token:
            return
        self._stack.setCurrentWidget(self._notice)

    @Slot(int, int, object, object)
    def _handle_slot_added(self, token: int, slot: int, entry: object, preview: object) -> None:
        if token != self._token or not isinstance(entry, EntryDescriptor):
            return
        icon_id = fallback_icon(preview) if isinstance(preview, PreviewClass) else "unrecognized"
        item = QListWidgetItem(self._icon_for(icon_id), entry.name)
        item.setData(_ENTRY_ROLE, entry)
        item.setToolTip(entry.relative_path)
        self._list.addItem(item)
        self._items[slot] = item

    @Slot(int, int, object)
    def _handle_slot_updated(self, token: int, slot: int, payload: object) -> None:
        if token != self._token or not isinstance(payload, RenderableImage):
            return
        item = self._items.get(slot)
        if item is None:
            return
        image = QImage()
        if not image.loadFromData(payload.data):
            logger.debug("Qt could not load %s thumbnail for slot %d", payload.mime_type, slot)
            return
        pixmap = QPixmap.fromImage(image).scaled(self._icon_size, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        item.setIcon(QIcon(pixmap))

    @Slot(int, str)
    def _handle_error(self, token: int, message: str) -> None:
        if token != self._token:
            return
        self._worker = None
        self.loadFailed.emit(message)

    @Slot(int)
    def _handle_finished(self, token: int) -> None:
        if token == self._token:
            self._worker = None

    def _handle_item_activated(self, item: QListWidgetItem | None) -> None:
        if item is None:
            return
        entry = item.data(_ENTRY_ROLE)
        if not isinstance(entry, EntryDescriptor):
            return
        if entry.is_directory:
            self.directoryActivated.emit(entry.name)
        else:
            self.fileActivated.emit(entry.relative_path)

    def _icon_for(self, icon_id: str) -> QIcon:
        icon = self._icon_cache.get(icon_id)
        if icon is None:
            icon = QIcon(QPixmap.fromImage(render_label_icon(icon_id, self._icon_size)))
            self._icon_cache[icon_id] = icon
        return icon
