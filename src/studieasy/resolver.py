"""Resolve ``/``-separated relative paths by descending from a root handle."""

from __future__ import annotations

import logging

from .errors import HandleInvalid, PathNotFound
from .handles import DirectoryHandle, FileHandle
from .utils.paths import split_relative_path

__all__ = ["resolve_directory", "resolve_path"]

logger = logging.getLogger(__name__)


async def resolve_path(root: DirectoryHandle | None, relative_path: str) -> FileHandle:
    """Return the :class:`FileHandle` at *relative_path* beneath *root*.

    Every call walks from *root*; intermediate handles are never cached.
    """

    if root is None:
        raise HandleInvalid("No directory handle available")

    segments = split_relative_path(relative_path)
    if not segments:
        raise PathNotFound(f"No file named in path {relative_path!r}")

    current = await _descend(root, segments[:-1])
    return await current.get_file_handle(segments[-1])


async def resolve_directory(root: DirectoryHandle | None, relative_path: str) -> DirectoryHandle:
    """Return the nested :class:`DirectoryHandle` at *relative_path*.

    An empty path (or one made only of separators) resolves to *root*.
    """

    if root is None:
        raise HandleInvalid("No directory handle available")

    return await _descend(root, split_relative_path(relative_path))


async def _descend(root: DirectoryHandle, segments: list[str]) -> DirectoryHandle:
    current = root
    for segment in segments:
        current = await current.get_directory_handle(segment)
    logger.debug("Descended %d segment(s) from %r", len(segments), root.name)
    return current
