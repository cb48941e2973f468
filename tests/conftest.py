"""Pytest configuration helpers for studieasy tests."""

from __future__ import annotations

import io
import os
import sys
from pathlib import Path

import pytest
from PIL import Image

# Run Qt headless unless a platform is explicitly configured.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:  # pragma: no cover - dependency availability varies between environments
    from PySide6.QtCore import QSettings
    from PySide6.QtWidgets import QApplication
except ImportError:  # pragma: no cover - used when Qt is unavailable
    QApplication = None  # type: ignore[assignment]
    QSettings = None  # type: ignore[assignment]

# Ensure the source directory is importable without requiring an editable install.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def reset_app_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure each test runs with the default application configuration."""

    from studieasy.config import (
        FFMPEG_ENV_VAR,
        LOG_LEVEL_ENV_VAR,
        MAX_THUMBNAIL_JOBS_ENV_VAR,
        THUMBNAIL_SIZE_ENV_VAR,
        configure,
    )

    for name in (FFMPEG_ENV_VAR, LOG_LEVEL_ENV_VAR, MAX_THUMBNAIL_JOBS_ENV_VAR, THUMBNAIL_SIZE_ENV_VAR):
        monkeypatch.delenv(name, raising=False)
    configure()
    yield
    configure()


@pytest.fixture(scope="session")
def qapp():
    """Provide a ``QApplication`` instance for UI-oriented tests."""

    if QApplication is None:
        pytest.skip("PySide6 is unavailable in this environment")

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture()
def settings_store(tmp_path: Path):
    """Return an isolated INI backed ``QSettings`` instance."""

    if QSettings is None:
        pytest.skip("PySide6 is unavailable in this environment")
    return QSettings(str(tmp_path / "settings.ini"), QSettings.IniFormat)


def png_bytes(size: tuple[int, int] = (64, 48), color: tuple[int, int, int] = (200, 40, 40)) -> bytes:
    """Encode a solid-colour PNG of *size*."""

    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    """Create a small directory tree used by listing and resolver tests.

    ::

        workspace/
            notes.txt
            photo.png
            clip.mp4
            docs/
                report.pdf
                drafts/
                    outline.md
    """

    root = tmp_path / "workspace"
    (root / "docs" / "drafts").mkdir(parents=True)
    (root / "notes.txt").write_text("hello workspace", encoding="utf-8")
    (root / "photo.png").write_bytes(png_bytes())
    (root / "clip.mp4").write_bytes(b"\x00\x00\x00\x18ftypmp42")
    (root / "docs" / "report.pdf").write_bytes(b"%PDF-1.4\n")
    (root / "docs" / "drafts" / "outline.md").write_text("# Outline\n", encoding="utf-8")
    return root


@pytest.fixture()
def make_png():
    """Return the :func:`png_bytes` helper."""

    return png_bytes
