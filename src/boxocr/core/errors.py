"""Exceptions raised by the annotation and recognition pipeline."""

from __future__ import annotations

from typing import Optional, Sequence


class BoxOCRError(RuntimeError):
    """Base class for every error raised by :mod:`boxocr`."""


class MissingCoordinates(BoxOCRError):
    """A pointer event did not carry a position."""


class ImageMetadataUnavailable(BoxOCRError):
    """The image dimensions could not be determined."""


class UnsupportedImageFormat(BoxOCRError):
    """The image could not be resolved into a displayable PNG or JPEG."""


class SessionBusy(BoxOCRError):
    """An action was requested while the session was still processing."""


class InvalidGeometry(BoxOCRError, ValueError):
    """The box cannot be expressed as a crop of the image."""


class ToolError(BoxOCRError):
    """An external program failed.

    ``command`` is the argument list that was executed, ``returncode`` is
    ``None`` when the program could not be started at all.
    """

    def __init__(
        self,
        message: str,
        command: Sequence[str] = (),
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class CropToolFailed(ToolError):
    """The crop command failed or did not produce its output file."""


class OCRToolFailed(ToolError):
    """The OCR engine is missing or exited with an error."""


class OCRResultMissing(BoxOCRError):
    """The OCR engine finished but its output file does not exist."""


__all__ = [
    "BoxOCRError",
    "CropToolFailed",
    "ImageMetadataUnavailable",
    "InvalidGeometry",
    "MissingCoordinates",
    "OCRResultMissing",
    "OCRToolFailed",
    "SessionBusy",
    "ToolError",
    "UnsupportedImageFormat",
]
