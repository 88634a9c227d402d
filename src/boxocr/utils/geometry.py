"""Geometry helpers shared between the controller and the crop pipeline."""

from __future__ import annotations

import re
from typing import Tuple

from ..core.errors import ImageMetadataUnavailable, InvalidGeometry
from ..core.models import Box, Point

_GEOMETRY_FIELD = re.compile(r"Geometry:\s*(\d+)x(\d+)")
_BARE_DIMENSIONS = re.compile(r"\b(\d+)x(\d+)\b")


def compute_box(top_left: Point, bottom_right: Point) -> Box:
    """Return the box spanned by two corners.

    The corners are normalised per axis, so marking them in reverse order
    yields the same box instead of a negative width or height.  The result
    is not clamped to the image bounds.
    """

    return Box.from_corners(top_left, bottom_right)


def format_geometry(box: Box) -> str:
    """Render ``box`` in the ``WxH+X+Y`` grammar understood by ``convert -crop``.

    Boxes starting left of or above the image are rejected, and so are boxes
    with a zero width or height, which ``convert`` would read as the full
    image extent.
    """

    if box.x < 0 or box.y < 0:
        raise InvalidGeometry(f"box offset ({box.x}, {box.y}) lies outside the image")
    if box.width == 0 or box.height == 0:
        raise InvalidGeometry(f"box {box.width}x{box.height} is empty")
    return f"{box.width}x{box.height}+{box.x}+{box.y}"


def parse_dimensions(text: str) -> Tuple[int, int]:
    """Extract ``(width, height)`` from the textual output of an image probe.

    ``identify -verbose`` prints a ``Geometry: 800x600+0+0`` line; the plain
    ``identify`` format only has the bare ``800x600`` token, which is used
    when no ``Geometry`` field exists.
    """

    match = _GEOMETRY_FIELD.search(text) or _BARE_DIMENSIONS.search(text)
    if match is None:
        raise ImageMetadataUnavailable("no WxH geometry found in probe output")
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise ImageMetadataUnavailable(f"probe reported an empty image ({width}x{height})")
    return width, height


__all__ = ["compute_box", "format_geometry", "parse_dimensions"]
