"""Thumbnail generation for image and video entries of a workspace listing."""

from __future__ import annotations

import asyncio
import base64
import io
import logging
import shutil
import tempfile
import weakref
from dataclasses import dataclass
from pathlib import Path
from xml.etree import ElementTree

from PIL import Image, ImageOps, UnidentifiedImageError

from ..classifier import PreviewClass, PreviewKind, extension_of
from ..config import get_config
from ..errors import DecodeFailure
from ..handles import FileHandle

__all__ = [
    "RenderableImage",
    "ThumbnailPipeline",
    "VideoFrameExtractor",
    "decode_image_thumbnail",
    "decode_svg",
    "draw_video_frame",
]

logger = logging.getLogger(__name__)

_BACKGROUND: tuple[int, int, int, int] = (18, 22, 28, 255)
_SVG_MIME = "image/svg+xml"


@dataclass(frozen=True, slots=True)
class RenderableImage:
    """Encoded preview ready to be displayed in a grid slot."""

    mime_type: str
    data: bytes
    size: tuple[int, int] | None = None

    @property
    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def _encode_png(image: Image.Image) -> RenderableImage:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return RenderableImage("image/png", buffer.getvalue(), (image.width, image.height))


def _open_image(payload: bytes, name: str) -> Image.Image:
    try:
        with Image.open(io.BytesIO(payload)) as img:
            img.load()
            return ImageOps.exif_transpose(img).convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeFailure(f"Unable to decode image {name!r}: {exc}", entry=name) from exc


def decode_image_thumbnail(payload: bytes, *, name: str, size: tuple[int, int]) -> RenderableImage:
    """Decode *payload* and return a PNG thumbnail no larger than *size*."""

    image = _open_image(payload, name)
    image.thumbnail(size, Image.Resampling.LANCZOS)
    return _encode_png(image)


def decode_svg(payload: bytes, *, name: str) -> RenderableImage:
    """Validate *payload* as SVG markup and pass it through unrasterised."""

    try:
        root = ElementTree.fromstring(payload)
    except ElementTree.ParseError as exc:
        raise DecodeFailure(f"Unable to parse SVG {name!r}: {exc}", entry=name) from exc
    if root.tag.rsplit("}", 1)[-1] != "svg":
        raise DecodeFailure(f"{name!r} does not contain an <svg> document", entry=name)
    return RenderableImage(_SVG_MIME, payload)


def draw_video_frame(
    frame: bytes,
    *,
    name: str,
    size: tuple[int, int],
    background: tuple[int, int, int, int] = _BACKGROUND,
) -> RenderableImage:
    """Draw an extracted video *frame* centred on a surface of *size*."""

    image = _open_image(frame, name)
    image.thumbnail(size, Image.Resampling.LANCZOS)

    surface = Image.new("RGBA", size, background)
    offset = ((size[0] - image.width) // 2, (size[1] - image.height) // 2)
    surface.paste(image, offset, image)
    return _encode_png(surface)


def _write_temporary_media(payload: bytes, suffix: str) -> Path:
    with tempfile.NamedTemporaryFile(prefix="studieasy-", suffix=suffix, delete=False) as handle:
        handle.write(payload)
        return Path(handle.name)


class VideoFrameExtractor:
    """Pull the first decodable frame out of video bytes using ffmpeg."""

    def __init__(self, *, executable: str | None = None) -> None:
        self.executable = executable or get_config().ffmpeg_executable

    async def extract_frame(self, payload: bytes, *, name: str) -> bytes:
        """Return the first frame of the video in *payload* as PNG bytes."""

        executable = shutil.which(self.executable)
        if executable is None:
            raise DecodeFailure(f"Video previews need {self.executable!r}, which was not found", entry=name)

        media_path = await asyncio.to_thread(_write_temporary_media, payload, extension_of(name))
        try:
            stdout, stderr, returncode = await self._run(executable, media_path)
        finally:
            await asyncio.to_thread(media_path.unlink, missing_ok=True)

        if returncode != 0 or not stdout:
            detail = stderr.decode("utf-8", errors="replace").strip() or f"exit status {returncode}"
            raise DecodeFailure(f"No frame could be extracted from {name!r}: {detail}", entry=name)
        return stdout

    async def _run(self, executable: str, media_path: Path) -> tuple[bytes, bytes, int]:
        command = [
            executable,
            "-v",
            "error",
            "-nostdin",
            "-i",
            str(media_path),
            "-frames:v",
            "1",
            "-f",
            "image2pipe",
            "-vcodec",
            "png",
            "-",
        ]
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            proc.kill()
            await proc.wait()
            raise
        return stdout, stderr, proc.returncode or 0


class ThumbnailPipeline:
    """Produce previews for previewable files, one independent job per file."""

    def __init__(
        self,
        *,
        size: tuple[int, int] | None = None,
        max_concurrency: int | None = None,
        frame_extractor: VideoFrameExtractor | None = None,
    ) -> None:
        config = get_config()
        self._size = size or config.thumbnail_size
        self._max_concurrency = max_concurrency if max_concurrency is not None else config.max_thumbnail_jobs
        self._frame_extractor = frame_extractor or VideoFrameExtractor()
        self._semaphores: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Semaphore] = (
            weakref.WeakKeyDictionary()
        )

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    async def produce_preview(self, file_handle: FileHandle, preview_class: PreviewClass) -> RenderableImage:
        """Return a :class:`RenderableImage` for *file_handle*.

        Raises :class:`DecodeFailure` when the bytes cannot be interpreted and
        propagates handle or I/O failures from the byte read.
        """

        if not preview_class.is_thumbnail:
            raise ValueError(f"{preview_class!r} does not produce a thumbnail")

        semaphore = self._semaphore()
        if semaphore is None:
            return await self._produce(file_handle, preview_class)
        async with semaphore:
            return await self._produce(file_handle, preview_class)

    async def _produce(self, file_handle: FileHandle, preview_class: PreviewClass) -> RenderableImage:
        name = file_handle.name
        payload = await file_handle.read_bytes()

        if preview_class.kind is PreviewKind.IMAGE_THUMBNAIL:
            if extension_of(name) == ".svg":
                result = await asyncio.to_thread(decode_svg, payload, name=name)
            else:
                result = await asyncio.to_thread(decode_image_thumbnail, payload, name=name, size=self._size)
        else:
            frame = await self._frame_extractor.extract_frame(payload, name=name)
            result = await asyncio.to_thread(draw_video_frame, frame, name=name, size=self._size)

        logger.debug("Generated %s preview for %s", preview_class.kind.value, name)
        return result

    def _semaphore(self) -> asyncio.Semaphore | None:
        if not self._max_concurrency:
            return None
        loop = asyncio.get_running_loop()
        semaphore = self._semaphores.get(loop)
        if semaphore is None:
            semaphore = asyncio.Semaphore(self._max_concurrency)
            self._semaphores[loop] = semaphore
        return semaphore
