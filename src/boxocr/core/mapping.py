"""Translate pointer events from the display surface into image pixels."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from math import floor
from typing import Any, Optional, Tuple

from .errors import MissingCoordinates
from .models import Point


def _event_position(event: Any) -> Optional[Tuple[float, float]]:
    if event is None:
        return None
    if isinstance(event, Mapping):
        if "x" in event and "y" in event:
            return event["x"], event["y"]
        return None
    if isinstance(event, Sequence) and not isinstance(event, (str, bytes)):
        if len(event) == 2:
            return event[0], event[1]
        return None
    # Qt 6 mouse events expose ``position()``, older bindings only ``pos()``.
    for accessor in ("position", "pos"):
        method = getattr(event, accessor, None)
        if callable(method):
            point = method()
            if point is None:
                continue
            return point.x(), point.y()
    x = getattr(event, "x", None)
    y = getattr(event, "y", None)
    if x is None or y is None:
        return None
    if callable(x) and callable(y):
        return x(), y()
    return x, y


class CoordinateMapper:
    """Identity mapping used when the image is displayed at 1:1 scale."""

    def map_event(self, event: Any) -> Point:
        position = _event_position(event)
        if position is None:
            raise MissingCoordinates(f"event {event!r} carries no position")
        try:
            x, y = float(position[0]), float(position[1])
        except (TypeError, ValueError) as exc:
            raise MissingCoordinates(f"event {event!r} has a non-numeric position") from exc
        return self.to_image(x, y)

    def to_image(self, x: float, y: float) -> Point:
        return int(floor(x)), int(floor(y))


class ScaledCoordinateMapper(CoordinateMapper):
    """Mapping for a display that draws the image scaled and/or offset."""

    def __init__(self, scale: float = 1.0, offset: Tuple[float, float] = (0.0, 0.0)) -> None:
        if scale <= 0:
            raise ValueError("scale must be positive")
        self.scale = scale
        self.offset = offset

    def to_image(self, x: float, y: float) -> Point:
        dx, dy = self.offset
        return int(floor((x - dx) / self.scale)), int(floor((y - dy) / self.scale))


__all__ = ["CoordinateMapper", "ScaledCoordinateMapper"]
