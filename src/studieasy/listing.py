"""Single-level directory listings built from a :class:`DirectoryHandle`."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime

from .errors import HandleInvalid, WorkspaceError
from .handles import DirectoryHandle, FileHandle, FileMetadata, HandleKind
from .utils.paths import join_relative_path

__all__ = ["EntryDescriptor", "Listing", "list_directory", "sort_listing"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntryDescriptor:
    """Immutable description of one directory child at listing time."""

    name: str
    relative_path: str
    kind: HandleKind
    size: int | None = None
    mime_hint: str | None = None
    last_modified: datetime | None = None
    handle: DirectoryHandle | FileHandle | None = field(default=None, compare=False, repr=False)

    @property
    def is_directory(self) -> bool:
        return self.kind is HandleKind.DIRECTORY


@dataclass(slots=True)
class Listing:
    """Files and subdirectories of one directory, in enumeration order."""

    path: str
    files: list[EntryDescriptor] = field(default_factory=list)
    directories: list[EntryDescriptor] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.files and not self.directories

    def entries(self) -> list[EntryDescriptor]:
        """Return directories followed by files."""

        return [*self.directories, *self.files]


async def list_directory(handle: DirectoryHandle | None, base_path: str = "") -> Listing:
    """Return the direct children of *handle* as a :class:`Listing`.

    File metadata is fetched concurrently once enumeration completes. Any
    failure aborts the whole call; partial listings are never returned.
    """

    if handle is None:
        raise HandleInvalid("No directory handle available")

    listing = Listing(path=base_path)
    pending: list[tuple[str, FileHandle]] = []

    async for name, child in handle.entries():
        relative_path = join_relative_path(base_path, name)
        if child.kind is HandleKind.DIRECTORY:
            listing.directories.append(
                EntryDescriptor(name, relative_path, HandleKind.DIRECTORY, handle=child)
            )
        else:
            pending.append((relative_path, child))

    metadata = await asyncio.gather(*(_fetch_metadata(child) for _, child in pending))
    for (relative_path, child), info in zip(pending, metadata, strict=True):
        listing.files.append(
            EntryDescriptor(
                info.name,
                relative_path,
                HandleKind.FILE,
                size=info.size,
                mime_hint=info.mime_hint,
                last_modified=info.last_modified,
                handle=child,
            )
        )

    logger.debug(
        "Listed %r: %d directories, %d files",
        base_path or handle.name,
        len(listing.directories),
        len(listing.files),
    )
    return listing


async def _fetch_metadata(child: FileHandle) -> FileMetadata:
    try:
        return await child.metadata()
    except WorkspaceError as exc:
        if exc.entry is None:
            exc.entry = child.name
        raise


def sort_listing(listing: Listing) -> Listing:
    """Return a copy of *listing* with each group ordered by name."""

    def key(entry: EntryDescriptor) -> tuple[str, str]:
        return entry.name.casefold(), entry.name

    return replace(
        listing,
        files=sorted(listing.files, key=key),
        directories=sorted(listing.directories, key=key),
    )
