"""Capability handles granting scoped access to local directories and files.

A :class:`DirectoryHandle` is only obtainable through :func:`grant_directory`
(or by deriving it from another directory handle). Handles never expose an
"open by string path" operation; every lookup walks one child at a time.
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import os
from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from .errors import HandleInvalid, IOFailure, PathNotFound
from .utils.paths import coerce_required_path

__all__ = [
    "DirectoryHandle",
    "FileHandle",
    "FileMetadata",
    "HandleKind",
    "grant_directory",
]

logger = logging.getLogger(__name__)


class HandleKind(str, Enum):
    """The two kinds of filesystem node a handle can refer to."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class FileMetadata:
    """Size, type hint and modification time reported for a file."""

    name: str
    size: int
    mime_hint: str
    last_modified: datetime


class _Grant:
    """Shared permission state for every handle derived from one user grant."""

    __slots__ = ("root", "revoked")

    def __init__(self, root: Path) -> None:
        self.root = root
        self.revoked = False


def grant_directory(path: str | Path | os.PathLike[str]) -> DirectoryHandle:
    """Return a root :class:`DirectoryHandle` for *path*.

    Raises :class:`HandleInvalid` when *path* is not an existing directory.
    """

    try:
        root = coerce_required_path(path, empty_error="Directory path cannot be empty")
    except ValueError as exc:
        raise HandleInvalid(str(exc)) from exc

    if not root.is_dir():
        raise HandleInvalid(f"{root} is not an accessible directory", entry=root.name)

    logger.debug("Granted directory access to %s", root)
    return DirectoryHandle(root, _Grant(root))


def _validate_child_name(name: str) -> None:
    if not name or name in {".", ".."} or "/" in name or os.sep in name:
        raise PathNotFound(f"Invalid entry name: {name!r}", entry=name)


class DirectoryHandle:
    """Capability to enumerate and open the children of one directory."""

    kind = HandleKind.DIRECTORY

    __slots__ = ("_path", "_grant")

    def __init__(self, path: Path, grant: _Grant) -> None:
        self._path = path
        self._grant = grant

    def __repr__(self) -> str:
        return f"DirectoryHandle({self.name!r})"

    @property
    def name(self) -> str:
        return self._path.name

    def revoke(self) -> None:
        """Withdraw the grant; this handle and all handles derived from it become invalid."""

        self._grant.revoked = True

    async def entries(self) -> AsyncIterator[tuple[str, DirectoryHandle | FileHandle]]:
        """Yield ``(name, handle)`` pairs for the direct children of this directory.

        The order is whatever the operating system reports.
        """

        self._ensure_valid()
        children = await asyncio.to_thread(self._scan)
        for name, is_dir in children:
            child_path = self._path / name
            if is_dir:
                yield name, DirectoryHandle(child_path, self._grant)
            else:
                yield name, FileHandle(child_path, self._grant)

    async def get_directory_handle(self, name: str) -> DirectoryHandle:
        """Open the child directory called *name*."""

        child = await self._open_child(name, want_directory=True)
        return DirectoryHandle(child, self._grant)

    async def get_file_handle(self, name: str) -> FileHandle:
        """Open the child file called *name*."""

        child = await self._open_child(name, want_directory=False)
        return FileHandle(child, self._grant)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _ensure_valid(self) -> None:
        if self._grant.revoked:
            raise HandleInvalid(f"Access to {self.name!r} has been revoked", entry=self.name)

    def _scan(self) -> list[tuple[str, bool]]:
        children: list[tuple[str, bool]] = []
        try:
            with os.scandir(self._path) as iterator:
                for entry in iterator:
                    try:
                        if entry.is_dir():
                            children.append((entry.name, True))
                        elif entry.is_file():
                            children.append((entry.name, False))
                    except OSError as exc:
                        raise IOFailure(f"Unable to inspect {entry.name!r}: {exc}", entry=entry.name) from exc
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise HandleInvalid(f"Directory {self.name!r} no longer exists", entry=self.name) from exc
        except OSError as exc:
            raise IOFailure(f"Unable to enumerate {self.name!r}: {exc}", entry=self.name) from exc
        return children

    async def _open_child(self, name: str, *, want_directory: bool) -> Path:
        self._ensure_valid()
        _validate_child_name(name)
        return await asyncio.to_thread(self._stat_child, name, want_directory)

    def _stat_child(self, name: str, want_directory: bool) -> Path:
        if not self._path.is_dir():
            raise HandleInvalid(f"Directory {self.name!r} no longer exists", entry=self.name)

        child = self._path / name
        try:
            is_dir = child.is_dir()
            is_file = child.is_file()
        except OSError as exc:
            raise IOFailure(f"Unable to inspect {name!r}: {exc}", entry=name) from exc

        if want_directory and not is_dir:
            raise PathNotFound(f"{name!r} is not a directory in {self.name!r}", entry=name)
        if not want_directory and not is_file:
            raise PathNotFound(f"{name!r} is not a file in {self.name!r}", entry=name)
        return child


class FileHandle:
    """Read-only capability for one file's bytes and metadata."""

    kind = HandleKind.FILE

    __slots__ = ("_path", "_grant")

    def __init__(self, path: Path, grant: _Grant) -> None:
        self._path = path
        self._grant = grant

    def __repr__(self) -> str:
        return f"FileHandle({self.name!r})"

    @property
    def name(self) -> str:
        return self._path.name

    async def metadata(self) -> FileMetadata:
        """Return size, MIME hint and last-modified time for the file."""

        self._ensure_valid()
        return await asyncio.to_thread(self._stat)

    async def read_bytes(self) -> bytes:
        """Return the raw contents of the file."""

        self._ensure_valid()
        return await asyncio.to_thread(self._read)

    def _ensure_valid(self) -> None:
        if self._grant.revoked:
            raise HandleInvalid(f"Access to {self.name!r} has been revoked", entry=self.name)

    def _stat(self) -> FileMetadata:
        try:
            stat = self._path.stat()
        except FileNotFoundError as exc:
            raise HandleInvalid(f"File {self.name!r} no longer exists", entry=self.name) from exc
        except OSError as exc:
            raise IOFailure(f"Unable to read metadata for {self.name!r}: {exc}", entry=self.name) from exc

        mime_hint, _ = mimetypes.guess_type(self.name)
        return FileMetadata(
            name=self.name,
            size=int(stat.st_size),
            mime_hint=mime_hint or "",
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
        )

    def _read(self) -> bytes:
        try:
            return self._path.read_bytes()
        except FileNotFoundError as exc:
            raise HandleInvalid(f"File {self.name!r} no longer exists", entry=self.name) from exc
        except OSError as exc:
            raise IOFailure(f"Unable to read {self.name!r}: {exc}", entry=self.name) from exc
