"""Read file contents beneath a granted directory as base64 or text payloads."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from .errors import DecodeFailure
from .handles import DirectoryHandle
from .resolver import resolve_path

__all__ = ["FileContent", "read_file_as_base64", "read_file_as_text"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileContent:
    """File payload together with the metadata reported by its handle."""

    name: str
    type: str
    size: int
    last_modified: datetime
    content: str
    encoding: Literal["base64", "text"]


async def read_file_as_base64(root: DirectoryHandle | None, file_path: str) -> FileContent:
    """Return the file at *file_path* with its bytes base64 encoded."""

    handle = await resolve_path(root, file_path)
    info = await handle.metadata()
    payload = await handle.read_bytes()
    return FileContent(
        name=info.name,
        type=info.mime_hint,
        size=info.size,
        last_modified=info.last_modified,
        content=base64.b64encode(payload).decode("ascii"),
        encoding="base64",
    )


async def read_file_as_text(
    root: DirectoryHandle | None,
    file_path: str,
    *,
    encoding: str = "utf-8",
) -> FileContent:
    """Return the file at *file_path* decoded as text."""

    handle = await resolve_path(root, file_path)
    info = await handle.metadata()
    payload = await handle.read_bytes()
    try:
        text = payload.decode(encoding)
    except UnicodeDecodeError as exc:
        logger.debug("Failed to decode %s as %s", file_path, encoding)
        raise DecodeFailure(f"{info.name!r} is not valid {encoding} text", entry=info.name) from exc

    return FileContent(
        name=info.name,
        type=info.mime_hint,
        size=info.size,
        last_modified=info.last_modified,
        content=text,
        encoding="text",
    )
