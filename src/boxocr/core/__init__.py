"""Core domain services for marking, cropping and recognising image regions."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "Box",
    "CoordinateMapper",
    "CropArtifact",
    "ImageCropper",
    "ImageInfo",
    "OCREngine",
    "OCRResult",
    "Point",
    "ScaledCoordinateMapper",
    "Session",
    "SessionState",
    "SubprocessRunner",
    "TextHistory",
    "build_backend",
    "render_overlay",
]


def __getattr__(name: str) -> Any:  # pragma: no cover - thin lazy import layer
    if name in __all__:
        module_map = {
            "CoordinateMapper": "mapping",
            "ScaledCoordinateMapper": "mapping",
            "ImageCropper": "crop",
            "OCREngine": "ocr",
            "build_backend": "ocr",
            "SubprocessRunner": "tools",
            "TextHistory": "history",
            "render_overlay": "overlay",
            "Box": "models",
            "CropArtifact": "models",
            "ImageInfo": "models",
            "OCRResult": "models",
            "Point": "models",
            "Session": "models",
            "SessionState": "models",
        }
        module_name = module_map[name]
        module = import_module(f"{__name__}.{module_name}")
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:  # pragma: no cover - aids interactive use
    return sorted(__all__ + list(globals().keys()))
