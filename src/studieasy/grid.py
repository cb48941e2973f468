"""Assemble the workspace grid render model for one directory level.

The listing is rendered immediately with static icons and placeholders;
thumbnails are generated afterwards and injected into their own slot as each
one resolves. Every call to :meth:`WorkspaceGridRenderer.render` starts a new
render pass; once its listing succeeds it cancels the thumbnails still pending
from the previous pass and takes over the target.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from .classifier import FOLDER_ICON, PreviewClass, classify, fallback_icon
from .errors import WorkspaceError
from .handles import DirectoryHandle, FileHandle
from .listing import EntryDescriptor, Listing, list_directory, sort_listing
from .thumbnails import RenderableImage, ThumbnailPipeline

__all__ = [
    "FOLDER_PREVIEW",
    "GridModel",
    "GridSlot",
    "RenderPass",
    "RenderTarget",
    "WorkspaceGridRenderer",
]

logger = logging.getLogger(__name__)

FOLDER_PREVIEW = PreviewClass.static_icon(FOLDER_ICON)


class RenderTarget(Protocol):
    """Container the renderer clears and repopulates on every pass."""

    def clear(self) -> None: ...

    def show_empty_notice(self) -> None: ...

    def add_slot(self, entry: EntryDescriptor, preview: PreviewClass) -> int: ...

    def update_slot(self, slot: int, image: RenderableImage) -> None: ...


@dataclass(slots=True)
class GridSlot:
    """One rendered entry: its descriptor, icon and optional thumbnail."""

    entry: EntryDescriptor
    preview: PreviewClass
    icon_id: str
    image: RenderableImage | None = None

    @property
    def awaiting_thumbnail(self) -> bool:
        return self.preview.is_thumbnail and self.image is None


@dataclass(slots=True)
class GridModel:
    """In-memory :class:`RenderTarget` holding the current render model."""

    slots: list[GridSlot] = field(default_factory=list)
    empty_notice: bool = False
    updates: list[int] = field(default_factory=list)

    def clear(self) -> None:
        self.slots.clear()
        self.updates.clear()
        self.empty_notice = False

    def show_empty_notice(self) -> None:
        self.empty_notice = True

    def add_slot(self, entry: EntryDescriptor, preview: PreviewClass) -> int:
        self.slots.append(GridSlot(entry, preview, fallback_icon(preview)))
        return len(self.slots) - 1

    def update_slot(self, slot: int, image: RenderableImage) -> None:
        self.slots[slot].image = image
        self.updates.append(slot)

    def slot_named(self, name: str) -> GridSlot:
        for slot in self.slots:
            if slot.entry.name == name:
                return slot
        raise KeyError(name)


class RenderPass:
    """Handle on one render of a directory and its pending thumbnail jobs."""

    def __init__(self, renderer: WorkspaceGridRenderer, token: int) -> None:
        self._renderer = renderer
        self.token = token
        self.listing: Listing | None = None
        self.failures: dict[int, BaseException] = {}
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def is_current(self) -> bool:
        return self._renderer.active_pass is self

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def cancel(self) -> None:
        """Cancel every thumbnail job of this pass that has not finished."""

        for task in self._tasks:
            task.cancel()

    async def wait(self) -> None:
        """Wait until every thumbnail job of this pass has settled."""

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _track(self, task: asyncio.Task[None]) -> None:
        self._tasks.append(task)


class WorkspaceGridRenderer:
    """Drive listing, classification and thumbnail generation for a grid."""

    def __init__(
        self,
        pipeline: ThumbnailPipeline | None = None,
        *,
        sort_entries: bool = False,
    ) -> None:
        self._pipeline = pipeline or ThumbnailPipeline()
        self._sort_entries = sort_entries
        self._token = 0
        self._active: RenderPass | None = None

    @property
    def current_token(self) -> int:
        return self._token

    @property
    def active_pass(self) -> RenderPass | None:
        """The pass currently allowed to write to its target."""

        return self._active

    async def render(
        self,
        handle: DirectoryHandle | None,
        target: RenderTarget,
        base_path: str = "",
    ) -> RenderPass:
        """Render the directory behind *handle* into *target*.

        Listing failures propagate before *target* is touched and leave the
        previous pass filling its slots. Thumbnail failures are logged and
        leave the affected slot on its fallback icon.
        """

        self._token += 1
        render_pass = RenderPass(self, self._token)

        listing = await list_directory(handle, base_path)
        if self._sort_entries:
            listing = sort_listing(listing)
        render_pass.listing = listing

        if render_pass.token != self._token:
            logger.debug("Discarding listing of %r superseded by a newer render", base_path)
            return render_pass

        if self._active is not None:
            self._active.cancel()
        self._active = render_pass

        previews = [classify(entry.name) for entry in listing.files]

        target.clear()
        if listing.is_empty:
            target.show_empty_notice()
            return render_pass

        for entry in listing.directories:
            target.add_slot(entry, FOLDER_PREVIEW)

        for entry, preview in zip(listing.files, previews, strict=True):
            slot = target.add_slot(entry, preview)
            if preview.is_thumbnail:
                task = asyncio.create_task(self._fill_slot(render_pass, target, slot, handle, entry, preview))
                render_pass._track(task)

        return render_pass

    async def _fill_slot(
        self,
        render_pass: RenderPass,
        target: RenderTarget,
        slot: int,
        directory: DirectoryHandle,
        entry: EntryDescriptor,
        preview: PreviewClass,
    ) -> None:
        try:
            file_handle = entry.handle
            if not isinstance(file_handle, FileHandle):
                file_handle = await directory.get_file_handle(entry.name)
            image = await self._pipeline.produce_preview(file_handle, preview)
        except WorkspaceError as exc:
            logger.warning("Thumbnail unavailable for %s: %s", entry.relative_path, exc)
            render_pass.failures[slot] = exc
            return
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected failure generating thumbnail for %s", entry.relative_path)
            render_pass.failures[slot] = exc
            return

        if not render_pass.is_current:
            logger.debug("Dropping stale thumbnail for %s", entry.relative_path)
            return
        target.update_slot(slot, image)
