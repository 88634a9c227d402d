"""Render the annotation overlay as an SVG document."""

from __future__ import annotations

from html import escape
from typing import Optional

from ..config import OverlayConfig
from .models import Box

_DOCUMENT = (
    '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" '
    'version="1.1" width="{width}" height="{height}" viewBox="0 0 {width} {height}">\n'
    '  <rect x="0" y="0" width="{width}" height="{height}" fill="{background}"/>\n'
    '  <image x="0" y="0" width="{width}" height="{height}" '
    'preserveAspectRatio="none" xlink:href="{href}"/>\n'
    '  <rect x="{box_x}" y="{box_y}" width="{box_width}" height="{box_height}" '
    'fill="{fill}" fill-opacity="{opacity}" stroke="{stroke}" stroke-width="{stroke_width}"/>\n'
    "</svg>\n"
)


def render_overlay(
    image_url: str,
    image_width: int,
    image_height: int,
    box: Box,
    style: Optional[OverlayConfig] = None,
) -> str:
    """Return the overlay for ``box`` drawn over the image at ``image_url``.

    Layers, bottom to top: a flat background shown while the image loads
    (or if it fails to), the image stretched to the canvas, and the
    translucent highlight.  The canvas is always ``image_width`` by
    ``image_height``; the highlight is not clamped, so a box reaching past
    the image is simply cut off by the canvas.
    """

    style = style or OverlayConfig()
    return _DOCUMENT.format(
        width=int(image_width),
        height=int(image_height),
        background=escape(style.background_color),
        href=escape(image_url),
        box_x=box.x,
        box_y=box.y,
        box_width=box.width,
        box_height=box.height,
        fill=escape(style.highlight_color),
        opacity=f"{style.highlight_opacity:g}",
        stroke=escape(style.stroke_color),
        stroke_width=style.stroke_width,
    )


__all__ = ["render_overlay"]
