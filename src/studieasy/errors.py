"""Exception hierarchy shared by the workspace browsing pipeline."""

from __future__ import annotations

__all__ = [
    "DecodeFailure",
    "HandleInvalid",
    "IOFailure",
    "PathNotFound",
    "WorkspaceError",
]


class WorkspaceError(RuntimeError):
    """Base class for failures raised while browsing a granted directory."""

    def __init__(self, message: str, *, entry: str | None = None) -> None:
        super().__init__(message)
        self.entry = entry


class HandleInvalid(WorkspaceError):
    """Raised when a capability handle is missing, revoked or stale."""


class PathNotFound(WorkspaceError):
    """Raised when a path segment does not exist or has the wrong kind."""


class IOFailure(WorkspaceError):
    """Raised when enumeration, metadata fetch or a byte read fails."""


class DecodeFailure(WorkspaceError):
    """Raised when bytes cannot be interpreted as the expected media type."""
