"""Helpers for filesystem paths and ``/``-separated workspace-relative paths."""

from __future__ import annotations

from os import PathLike
from pathlib import Path

__all__ = ["coerce_required_path", "join_relative_path", "split_relative_path"]


def coerce_required_path(
    value: str | Path | PathLike[str],
    *,
    empty_error: str | None = None,
) -> Path:
    """Return *value* coerced into an absolute :class:`~pathlib.Path`.

    Parameters
    ----------
    value:
        Path-like object that must resolve to a non-empty filesystem location.
    empty_error:
        Optional custom error message raised when *value* cannot be coerced
        because it resolves to an empty string.
    """

    if isinstance(value, Path):
        candidate = value
    else:
        text = str(value).strip()
        if not text:
            msg = empty_error or "Path value cannot be empty."
            raise ValueError(msg)
        candidate = Path(text)

    return candidate.expanduser().resolve()


def split_relative_path(relative_path: str) -> list[str]:
    """Split *relative_path* on ``/`` discarding empty segments.

    Leading, trailing and repeated separators are therefore tolerated:
    ``"/a//b/"`` yields ``["a", "b"]``.
    """

    return [segment for segment in relative_path.split("/") if segment]


def join_relative_path(parent: str, name: str) -> str:
    """Return the workspace-relative path of *name* inside *parent*."""

    if not name:
        return parent
    return f"{parent}/{name}" if parent else name
