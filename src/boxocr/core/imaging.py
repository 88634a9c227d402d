"""Resolve image files and measure their dimensions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Tuple

from PIL import Image, UnidentifiedImageError

from ..utils.geometry import parse_dimensions
from .errors import CropToolFailed, ImageMetadataUnavailable, ToolError, UnsupportedImageFormat
from .tools import CommandRunner, run_checked

log = logging.getLogger(__name__)

EMBEDDABLE_EXTENSIONS = {".png", ".jpg", ".jpeg"}
CONVERTED_IMAGE_NAME = "converted.png"


class ImageProbe(Protocol):
    """Measures the pixel size of an image file."""

    def probe(self, path: Path) -> Tuple[int, int]:
        """Return ``(width, height)`` of ``path``."""


class PillowImageProbe:
    """Reads the dimensions from the image header with Pillow."""

    def probe(self, path: Path) -> Tuple[int, int]:
        try:
            with Image.open(path) as image:
                width, height = image.size
        except (OSError, UnidentifiedImageError) as exc:
            raise ImageMetadataUnavailable(f"cannot read image header of {path}: {exc}") from exc
        if width <= 0 or height <= 0:
            raise ImageMetadataUnavailable(f"{path} reports an empty image ({width}x{height})")
        return width, height


class IdentifyImageProbe:
    """Parses the ``Geometry`` field of ``identify -verbose``."""

    def __init__(self, runner: CommandRunner, identify_cmd: str = "identify") -> None:
        self.runner = runner
        self.identify_cmd = identify_cmd

    def probe(self, path: Path) -> Tuple[int, int]:
        try:
            proc = run_checked(
                self.runner, [self.identify_cmd, "-verbose", str(path)], ToolError
            )
        except ToolError as exc:
            raise ImageMetadataUnavailable(f"identify failed for {path}: {exc}") from exc
        return parse_dimensions(proc.stdout or "")


class ImageConverter:
    """Converts images the overlay cannot embed into PNG with ``convert``."""

    def __init__(self, runner: CommandRunner, convert_cmd: str = "convert") -> None:
        self.runner = runner
        self.convert_cmd = convert_cmd

    def to_png(self, source: Path, destination: Path) -> Path:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.unlink(missing_ok=True)
        try:
            run_checked(
                self.runner,
                [self.convert_cmd, str(source), str(destination)],
                CropToolFailed,
            )
        except CropToolFailed as exc:
            raise UnsupportedImageFormat(f"cannot convert {source} to PNG: {exc}") from exc
        if not destination.exists():
            raise UnsupportedImageFormat(f"converting {source} produced no {destination}")
        return destination


def resolve_image_source(source: Path, converter: ImageConverter, workspace: Path) -> Path:
    """Return a PNG or JPEG path for ``source``, converting it when needed."""

    source = Path(source)
    if not source.is_file():
        raise UnsupportedImageFormat(f"{source} does not exist or is not a file")
    if source.suffix.lower() in EMBEDDABLE_EXTENSIONS:
        return source
    log.info("Converting %s to PNG", source)
    return converter.to_png(source, workspace / CONVERTED_IMAGE_NAME)


__all__ = [
    "CONVERTED_IMAGE_NAME",
    "EMBEDDABLE_EXTENSIONS",
    "IdentifyImageProbe",
    "ImageConverter",
    "ImageProbe",
    "PillowImageProbe",
    "resolve_image_source",
]
