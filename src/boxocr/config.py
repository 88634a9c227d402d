"""Application level configuration objects."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .core.crop import DEFAULT_CROP_OPTIONS


@dataclass(slots=True)
class ToolsConfig:
    """Executables used for the external image and OCR operations."""

    convert_cmd: str = "convert"
    """ImageMagick ``convert`` used for format conversion and cropping."""

    identify_cmd: str = "identify"
    """ImageMagick ``identify`` used by the ``identify`` metadata probe."""

    tesseract_cmd: Optional[Path] = None
    """Optional path to the Tesseract executable."""

    gocr_cmd: str = "gocr"
    ocrad_cmd: str = "ocrad"


@dataclass(slots=True)
class CropConfig:
    """Configuration for the crop step that feeds the OCR engines."""

    options: str = DEFAULT_CROP_OPTIONS
    """Options placed before ``-crop`` on the ``convert`` command line."""


@dataclass(slots=True)
class OCRConfig:
    """Configuration of the OCR engines."""

    engine: str = "tesseract"
    """OCR engine identifier (``"tesseract"``, ``"gocr"`` or ``"ocrad"``)."""

    language: str = "eng"
    """Tesseract language pack to use for OCR."""

    psm: int = 6
    """Page segmentation mode for Tesseract."""

    oem: int = 3
    """OCR engine mode for Tesseract."""


@dataclass(slots=True)
class OverlayConfig:
    """Visual configuration for the rendered overlay document."""

    background_color: str = "#808080"
    highlight_color: str = "#ffd700"
    highlight_opacity: float = 0.4
    stroke_color: str = "#ff8c00"
    stroke_width: int = 1


@dataclass(slots=True)
class WorkspaceConfig:
    """Location of the temporary files shared by a pipeline run."""

    directory: Path = field(default_factory=lambda: Path(tempfile.gettempdir()) / "boxocr")
    probe: str = "pillow"
    """Image metadata probe (``"pillow"`` or ``"identify"``)."""

    history_limit: int = 50


@dataclass(slots=True)
class AppConfig:
    """Top level configuration container."""

    tools: ToolsConfig = field(default_factory=ToolsConfig)
    crop: CropConfig = field(default_factory=CropConfig)
    ocr: OCRConfig = field(default_factory=OCRConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)


__all__ = [
    "AppConfig",
    "CropConfig",
    "OCRConfig",
    "OverlayConfig",
    "ToolsConfig",
    "WorkspaceConfig",
]
