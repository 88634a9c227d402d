"""Shared utility helpers."""

from .geometry import compute_box, format_geometry, parse_dimensions

__all__ = ["compute_box", "format_geometry", "parse_dimensions"]
