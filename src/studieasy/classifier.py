"""Map file names onto the preview strategy used by the workspace grid."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

__all__ = [
    "FOLDER_ICON",
    "ICON_TABLE",
    "IMAGE_THUMBNAIL",
    "IMAGE_THUMBNAIL_EXTENSIONS",
    "PreviewClass",
    "PreviewKind",
    "UNRECOGNIZED_ICON",
    "VIDEO_THUMBNAIL",
    "VIDEO_THUMBNAIL_EXTENSIONS",
    "classify",
    "extension_of",
    "fallback_icon",
    "icon_label",
]


class PreviewKind(str, Enum):
    STATIC_ICON = "static_icon"
    IMAGE_THUMBNAIL = "image_thumbnail"
    VIDEO_THUMBNAIL = "video_thumbnail"


@dataclass(frozen=True, slots=True)
class PreviewClass:
    """How an entry is represented in the grid."""

    kind: PreviewKind
    icon_id: str | None = None

    @classmethod
    def static_icon(cls, icon_id: str) -> PreviewClass:
        return cls(PreviewKind.STATIC_ICON, icon_id)

    @property
    def is_thumbnail(self) -> bool:
        return self.kind is not PreviewKind.STATIC_ICON


IMAGE_THUMBNAIL: Final[PreviewClass] = PreviewClass(PreviewKind.IMAGE_THUMBNAIL)
VIDEO_THUMBNAIL: Final[PreviewClass] = PreviewClass(PreviewKind.VIDEO_THUMBNAIL)

FOLDER_ICON: Final[str] = "folder"
"""Icon rendered for every directory regardless of its name."""

UNRECOGNIZED_ICON: Final[str] = "unrecognized"
"""Icon rendered for files whose extension is not in :data:`ICON_TABLE`."""

IMAGE_THUMBNAIL_EXTENSIONS: Final[frozenset[str]] = frozenset({"png", "jpg", "jpeg", "gif", "svg"})
VIDEO_THUMBNAIL_EXTENSIONS: Final[frozenset[str]] = frozenset({"mp4", "mkv", "mov", "wmv"})


def _table(icon_id: str, *extensions: str) -> dict[str, str]:
    return {extension: icon_id for extension in extensions}


ICON_TABLE: Final[dict[str, str]] = {
    **_table(
        "code",
        ".py", ".js", ".mjs", ".ts", ".jsx", ".tsx", ".html", ".htm", ".css", ".scss",
        ".json", ".xml", ".yaml", ".yml", ".toml", ".c", ".h", ".cpp", ".hpp", ".java",
        ".rs", ".go", ".rb", ".php", ".sh", ".bat", ".ps1", ".sql", ".swift", ".kt",
        ".cs", ".lua", ".ipynb",
    ),
    **_table("pdf", ".pdf"),
    **_table("word", ".doc", ".docx", ".odt", ".rtf"),
    **_table("spreadsheet", ".xls", ".xlsx", ".ods", ".csv", ".tsv"),
    **_table("presentation", ".ppt", ".pptx", ".odp", ".key"),
    **_table("archive", ".zip", ".7z", ".rar", ".tar", ".gz", ".tgz", ".bz2", ".xz"),
    **_table("font", ".ttf", ".otf", ".woff", ".woff2", ".eot"),
    **_table("audio", ".mp3", ".wav", ".ogg", ".flac", ".aac", ".m4a", ".wma", ".opus"),
    **_table("video", ".avi", ".webm", ".flv", ".m4v", ".mpg", ".mpeg", ".3gp"),
    **_table("image", ".bmp", ".tif", ".tiff", ".webp", ".ico", ".heic", ".psd", ".raw"),
    **_table("text", ".txt", ".md", ".markdown", ".rst", ".log", ".ini", ".cfg", ".conf"),
}
"""Static icon per extension (with the leading dot) for non-thumbnail files."""

_ICON_LABELS: Final[dict[str, tuple[str, tuple[int, int, int]]]] = {
    FOLDER_ICON: ("DIR", (215, 160, 40)),
    "code": ("CODE", (120, 80, 180)),
    "pdf": ("PDF", (192, 48, 48)),
    "word": ("DOC", (30, 100, 200)),
    "spreadsheet": ("XLS", (16, 124, 16)),
    "presentation": ("PPT", (209, 72, 54)),
    "archive": ("ZIP", (215, 140, 0)),
    "font": ("FONT", (90, 90, 140)),
    "audio": ("AUD", (200, 60, 140)),
    "video": ("VID", (40, 120, 160)),
    "image": ("IMG", (36, 153, 99)),
    "text": ("TXT", (60, 120, 200)),
    UNRECOGNIZED_ICON: ("?", (110, 110, 110)),
}


def extension_of(name: str) -> str:
    """Return the lower-cased extension of *name* including the dot, or ``""``."""

    index = name.rfind(".")
    if index == -1:
        return ""
    return name[index:].lower()


def classify(name: str) -> PreviewClass:
    """Return the :class:`PreviewClass` for a file called *name*."""

    extension = extension_of(name)
    bare = extension[1:]
    if bare in IMAGE_THUMBNAIL_EXTENSIONS:
        return IMAGE_THUMBNAIL
    if bare in VIDEO_THUMBNAIL_EXTENSIONS:
        return VIDEO_THUMBNAIL
    return PreviewClass.static_icon(ICON_TABLE.get(extension, UNRECOGNIZED_ICON))


def icon_label(icon_id: str) -> tuple[str, tuple[int, int, int]]:
    """Return the short caption and RGB accent used to paint *icon_id*."""

    return _ICON_LABELS.get(icon_id, _ICON_LABELS[UNRECOGNIZED_ICON])


def fallback_icon(preview: PreviewClass) -> str:
    """Return the icon shown for *preview* until (or unless) a thumbnail arrives."""

    if preview.kind is PreviewKind.IMAGE_THUMBNAIL:
        return "image"
    if preview.kind is PreviewKind.VIDEO_THUMBNAIL:
        return "video"
    return preview.icon_id or UNRECOGNIZED_ICON
