"""Configuration helpers for the studieasy application."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Final

__all__ = [
    "AppConfig",
    "DEFAULT_FFMPEG_EXECUTABLE",
    "DEFAULT_THUMBNAIL_SIZE",
    "FFMPEG_ENV_VAR",
    "LOG_LEVEL_ENV_VAR",
    "MAX_THUMBNAIL_JOBS_ENV_VAR",
    "THUMBNAIL_SIZE_ENV_VAR",
    "configure",
    "get_config",
]

THUMBNAIL_SIZE_ENV_VAR: Final[str] = "STUDIEASY_THUMBNAIL_SIZE"
"""Environment variable overriding the thumbnail edge length, e.g. ``"160"`` or ``"160x120"``."""

MAX_THUMBNAIL_JOBS_ENV_VAR: Final[str] = "STUDIEASY_MAX_THUMBNAIL_JOBS"
"""Environment variable bounding concurrent thumbnail generations (``0`` means unbounded)."""

FFMPEG_ENV_VAR: Final[str] = "STUDIEASY_FFMPEG"
"""Environment variable naming the ffmpeg executable used for video frames."""

LOG_LEVEL_ENV_VAR: Final[str] = "STUDIEASY_LOG_LEVEL"
"""Environment variable selecting the root logging level."""

DEFAULT_THUMBNAIL_SIZE: Final[tuple[int, int]] = (160, 160)
"""Default pixel bounds for generated thumbnails."""

DEFAULT_FFMPEG_EXECUTABLE: Final[str] = "ffmpeg"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Runtime configuration for the studieasy application."""

    thumbnail_size: tuple[int, int] = DEFAULT_THUMBNAIL_SIZE
    max_thumbnail_jobs: int | None = None
    ffmpeg_executable: str = DEFAULT_FFMPEG_EXECUTABLE
    log_level: int = logging.INFO

    def __post_init__(self) -> None:
        width, height = self.thumbnail_size
        if width < 1 or height < 1:
            raise ValueError("Thumbnail dimensions must be positive")
        if self.max_thumbnail_jobs is not None and self.max_thumbnail_jobs < 1:
            object.__setattr__(self, "max_thumbnail_jobs", None)


_CONFIG: AppConfig | None = None


def get_config() -> AppConfig:
    """Return the cached :class:`AppConfig` instance."""

    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _build_config()
    return _CONFIG


def configure(
    *,
    thumbnail_size: tuple[int, int] | None = None,
    max_thumbnail_jobs: int | None = None,
    ffmpeg_executable: str | None = None,
    log_level: int | str | None = None,
) -> AppConfig:
    """Rebuild the global configuration with optional overrides."""

    global _CONFIG
    _CONFIG = _build_config(
        thumbnail_size=thumbnail_size,
        max_thumbnail_jobs=max_thumbnail_jobs,
        ffmpeg_executable=ffmpeg_executable,
        log_level=log_level,
    )
    return _CONFIG


def _build_config(
    *,
    thumbnail_size: tuple[int, int] | None = None,
    max_thumbnail_jobs: int | None = None,
    ffmpeg_executable: str | None = None,
    log_level: int | str | None = None,
) -> AppConfig:
    if thumbnail_size is None:
        thumbnail_size = _parse_size(os.environ.get(THUMBNAIL_SIZE_ENV_VAR))

    if max_thumbnail_jobs is None:
        raw_jobs = (os.environ.get(MAX_THUMBNAIL_JOBS_ENV_VAR) or "").strip()
        max_thumbnail_jobs = int(raw_jobs) if raw_jobs.isdigit() else None

    if ffmpeg_executable is None:
        ffmpeg_executable = (os.environ.get(FFMPEG_ENV_VAR) or "").strip() or DEFAULT_FFMPEG_EXECUTABLE

    if log_level is None:
        log_level = os.environ.get(LOG_LEVEL_ENV_VAR)

    return AppConfig(
        thumbnail_size=thumbnail_size,
        max_thumbnail_jobs=max_thumbnail_jobs,
        ffmpeg_executable=ffmpeg_executable,
        log_level=_parse_log_level(log_level),
    )


def _parse_size(value: str | None) -> tuple[int, int]:
    if not value:
        return DEFAULT_THUMBNAIL_SIZE
    width_text, _, height_text = value.strip().lower().partition("x")
    try:
        width = int(width_text)
        height = int(height_text) if height_text else width
    except ValueError:
        return DEFAULT_THUMBNAIL_SIZE
    if width < 1 or height < 1:
        return DEFAULT_THUMBNAIL_SIZE
    return width, height


def _parse_log_level(value: int | str | None) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip():
        level = logging.getLevelName(value.strip().upper())
        if isinstance(level, int):
            return level
    return logging.INFO
