"""Persistence helpers for user state that survives between sessions."""

from __future__ import annotations

import json
import logging
from typing import Final

from PySide6.QtCore import QSettings

__all__ = [
    "APPLICATION_NAME",
    "MAX_RECENT_PATHS",
    "ORGANIZATION_NAME",
    "RECENT_PATHS_KEY",
    "RecentPathsStore",
]

logger = logging.getLogger(__name__)

ORGANIZATION_NAME: Final[str] = "StudiEasy"
"""Organization identifier used when storing Qt settings."""

APPLICATION_NAME: Final[str] = "studieasy"
"""Application identifier used when storing Qt settings."""

RECENT_PATHS_KEY: Final[str] = "workspace/recentPaths"
"""Settings key holding the JSON encoded recent-paths list."""

MAX_RECENT_PATHS: Final[int] = 10
"""Default number of recently opened paths that are remembered."""


def _settings_storage() -> QSettings:
    return QSettings(ORGANIZATION_NAME, APPLICATION_NAME)


def _decode_paths(value: object) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable recent paths entry")
            return []
    else:
        parsed = value
    if not isinstance(parsed, list):
        logger.warning("Ignoring recent paths entry of type %s", type(parsed).__name__)
        return []
    return [item for item in parsed if isinstance(item, str)]


class RecentPathsStore:
    """Bounded most-recently-used list of opened directory paths."""

    def __init__(
        self,
        storage: QSettings | None = None,
        *,
        capacity: int = MAX_RECENT_PATHS,
    ) -> None:
        if capacity < 1:
            raise ValueError("Recent paths capacity must be at least 1")
        self._storage = storage if storage is not None else _settings_storage()
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self) -> list[str]:
        """Return stored paths, most recent first."""

        paths = _decode_paths(self._storage.value(RECENT_PATHS_KEY))
        return paths[: self._capacity]

    def add(self, path: str) -> list[str]:
        """Move *path* to the front of the list and persist the result."""

        paths = [existing for existing in self.get() if existing != path]
        paths.insert(0, path)
        del paths[self._capacity :]
        self._storage.setValue(RECENT_PATHS_KEY, json.dumps(paths))
        self._storage.sync()
        return paths

    def clear(self) -> None:
        self._storage.remove(RECENT_PATHS_KEY)
        self._storage.sync()
