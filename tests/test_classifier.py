"""Tests for mapping file names onto preview strategies."""

from __future__ import annotations

import pytest

from studieasy.classifier import (
    FOLDER_ICON,
    ICON_TABLE,
    IMAGE_THUMBNAIL,
    UNRECOGNIZED_ICON,
    VIDEO_THUMBNAIL,
    PreviewClass,
    PreviewKind,
    classify,
    extension_of,
    fallback_icon,
    icon_label,
)
from studieasy.grid import FOLDER_PREVIEW


@pytest.mark.parametrize("name", ["a.png", "B.JPG", "c.jpeg", "d.Gif", "logo.svg", "x.tar.PNG"])
def test_image_extensions_get_image_thumbnails(name: str) -> None:
    assert classify(name) == IMAGE_THUMBNAIL


@pytest.mark.parametrize("name", ["a.mp4", "b.MKV", "c.mov", "d.wmv"])
def test_video_extensions_get_video_thumbnails(name: str) -> None:
    assert classify(name) == VIDEO_THUMBNAIL


def test_every_table_extension_maps_to_its_static_icon() -> None:
    for extension, icon in ICON_TABLE.items():
        result = classify(f"file{extension.upper()}")
        assert result == PreviewClass.static_icon(icon), extension


def test_pdf_is_a_static_icon() -> None:
    result = classify("paper.pdf")

    assert result.kind is PreviewKind.STATIC_ICON
    assert result.icon_id == "pdf"
    assert not result.is_thumbnail


@pytest.mark.parametrize("name", ["Makefile", "archive.unknownext", "trailing.", ""])
def test_unlisted_extensions_fall_back_to_unrecognized(name: str) -> None:
    assert classify(name) == PreviewClass.static_icon(UNRECOGNIZED_ICON)


def test_thumbnail_extensions_are_not_in_icon_table() -> None:
    for extension in ("mp4", "mkv", "mov", "wmv", "svg", "jpg", "jpeg", "gif", "png"):
        assert f".{extension}" not in ICON_TABLE


def test_extension_uses_last_dot() -> None:
    assert extension_of("archive.tar.GZ") == ".gz"
    assert extension_of("README") == ""


def test_folder_preview_is_fixed() -> None:
    assert FOLDER_PREVIEW == PreviewClass.static_icon(FOLDER_ICON)
    assert icon_label(FOLDER_ICON)[0] == "DIR"


def test_fallback_icons_for_thumbnails() -> None:
    assert fallback_icon(IMAGE_THUMBNAIL) == "image"
    assert fallback_icon(VIDEO_THUMBNAIL) == "video"
    assert fallback_icon(PreviewClass.static_icon("pdf")) == "pdf"


def test_icon_label_for_unknown_icon_uses_unrecognized() -> None:
    assert icon_label("no-such-icon") == icon_label(UNRECOGNIZED_ICON)
