"""Explicit per-window workspace state: the granted root and current location."""

from __future__ import annotations

import logging

from .application.settings import RecentPathsStore
from .errors import HandleInvalid
from .handles import DirectoryHandle
from .listing import Listing, list_directory
from .readers import FileContent, read_file_as_base64, read_file_as_text
from .resolver import resolve_directory
from .utils.paths import join_relative_path, split_relative_path

__all__ = ["WorkspaceSession"]

logger = logging.getLogger(__name__)


class WorkspaceSession:
    """Hold the granted root handle and the location currently browsed.

    Workspace paths start with the root's name followed by ``/``-separated
    segments, e.g. ``"notes/lectures/week1"``. The current location is kept as
    a path relative to the root; handles below the root are always obtained
    by walking from it.
    """

    def __init__(self, recent_paths: RecentPathsStore | None = None) -> None:
        self._recent = recent_paths or RecentPathsStore()
        self._root: DirectoryHandle | None = None
        self._relative_path = ""

    @property
    def root(self) -> DirectoryHandle | None:
        return self._root

    @property
    def relative_path(self) -> str:
        """Location of the current directory relative to the root."""

        return self._relative_path

    @property
    def current_path(self) -> str:
        """Workspace path of the current directory, or ``""`` without a root."""

        if self._root is None:
            return ""
        return join_relative_path(self._root.name, self._relative_path)

    @property
    def recent_paths(self) -> list[str]:
        return self._recent.get()

    def select_directory(self, handle: DirectoryHandle) -> str:
        """Adopt *handle* as the new root and record it as recently opened."""

        self._root = handle
        self._relative_path = ""
        self._recent.add(handle.name)
        logger.info("Directory selected: %s", handle.name)
        return handle.name

    def locate(self, path: str) -> str | None:
        """Record *path* as opened and return its location relative to the root.

        Returns ``None`` when *path* does not lie beneath the granted root.
        """

        self._recent.add(path)
        segments = split_relative_path(path)
        if self._root is None or not segments or segments[0] != self._root.name:
            logger.info("Path %r is outside the granted directory", path)
            return None
        self._relative_path = "/".join(segments[1:])
        return self._relative_path

    def enter(self, name: str) -> str:
        """Move into the child directory *name* and return the new location."""

        self._require_root()
        self._relative_path = join_relative_path(self._relative_path, name)
        self._recent.add(self.current_path)
        return self._relative_path

    def go_up(self) -> str:
        """Move to the parent directory; the root is its own parent."""

        self._require_root()
        self._relative_path = "/".join(split_relative_path(self._relative_path)[:-1])
        return self._relative_path

    async def open_path(self, path: str) -> DirectoryHandle | None:
        """Navigate to the workspace *path* and return its directory handle."""

        relative = self.locate(path)
        if relative is None:
            return None
        handle = await resolve_directory(self._root, relative)
        logger.info("Opened path: %s", path)
        return handle

    async def current_directory(self) -> DirectoryHandle:
        """Walk from the root to the current location."""

        return await resolve_directory(self._require_root(), self._relative_path)

    async def listing(self) -> Listing:
        """List the current directory."""

        handle = await self.current_directory()
        return await list_directory(handle, self._relative_path)

    async def read_base64(self, file_path: str) -> FileContent:
        """Read *file_path* (relative to the root) as base64."""

        return await read_file_as_base64(self._require_root(), file_path)

    async def read_text(self, file_path: str) -> FileContent:
        """Read *file_path* (relative to the root) as text."""

        return await read_file_as_text(self._require_root(), file_path)

    def _require_root(self) -> DirectoryHandle:
        if self._root is None:
            raise HandleInvalid("Please select a directory first.")
        return self._root
