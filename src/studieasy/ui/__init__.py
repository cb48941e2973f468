"""Reusable UI widgets for the studieasy shell."""

from __future__ import annotations

from .directory_picker import request_directory_access
from .workspace_grid import WorkspaceGridView

__all__ = ["WorkspaceGridView", "request_directory_access"]
