"""Data models shared across the application."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

Point = Tuple[int, int]
"""An image pixel position defined as ``(x, y)``."""


@dataclass(frozen=True, slots=True)
class Box:
    """The rectangle spanned by the two corners of a session."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def to_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)

    @staticmethod
    def from_corners(first: Point, second: Point) -> "Box":
        """Span a box between two corners given in any order."""

        left, right = sorted((int(first[0]), int(second[0])))
        top, bottom = sorted((int(first[1]), int(second[1])))
        return Box(left, top, right - left, bottom - top)


@dataclass(frozen=True, slots=True)
class ImageInfo:
    """A resolved image together with its probed dimensions."""

    source: Path
    """The file the user asked for."""

    path: Path
    """The PNG/JPEG actually displayed and cropped (may be a converted copy)."""

    width: int
    height: int

    @property
    def url(self) -> str:
        return self.path.resolve().as_uri()


class SessionState(str, enum.Enum):
    AWAITING = "awaiting"
    PROCESSING = "processing"


ActionCallback = Callable[["Session", Box], Any]


@dataclass(slots=True)
class Session:
    """The annotation context bound to a single image."""

    image: ImageInfo
    top_left: Point
    bottom_right: Point
    on_action: Optional[ActionCallback] = None
    state: SessionState = SessionState.AWAITING
    last_document: Optional[str] = field(default=None, repr=False)

    @property
    def image_url(self) -> str:
        return self.image.url

    @property
    def image_width(self) -> int:
        return self.image.width

    @property
    def image_height(self) -> int:
        return self.image.height

    @property
    def box(self) -> Box:
        return Box.from_corners(self.top_left, self.bottom_right)


@dataclass(frozen=True, slots=True)
class CropArtifact:
    """A cropped intermediate file and the parameters that produced it."""

    path: Path
    source: Path
    geometry: str
    options: str


@dataclass(frozen=True, slots=True)
class OCRResult:
    """Recognised text for one crop."""

    text: str
    engine: str
    artifact: CropArtifact


__all__ = [
    "ActionCallback",
    "Box",
    "CropArtifact",
    "ImageInfo",
    "OCRResult",
    "Point",
    "Session",
    "SessionState",
]
