"""High level orchestration of the crop -> OCR pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from ..config import AppConfig
from ..core.crop import ImageCropper
from ..core.imaging import (
    IdentifyImageProbe,
    ImageConverter,
    ImageProbe,
    PillowImageProbe,
)
from ..core.models import Box, OCRResult
from ..core.ocr import BaseOCRBackend, OCREngine, build_backend
from ..core.tools import CommandRunner, SubprocessRunner
from ..utils import format_geometry

log = logging.getLogger(__name__)

CROP_BASENAME = "crop"


@dataclass
class PipelineDependencies:
    """Convenience container for the collaborating services."""

    runner: CommandRunner
    probe: ImageProbe
    converter: ImageConverter
    cropper: ImageCropper
    backends: Dict[OCREngine, BaseOCRBackend] = field(default_factory=dict)


class ProcessingPipeline:
    """Coordinates cropping and recognition for a region of an image."""

    def __init__(self, config: AppConfig, deps: PipelineDependencies | None = None) -> None:
        self.config = config
        self.runner = deps.runner if deps else SubprocessRunner()
        self.probe = deps.probe if deps else self._build_probe(config.workspace.probe)
        self.converter = deps.converter if deps else ImageConverter(
            self.runner, convert_cmd=config.tools.convert_cmd
        )
        self.cropper = deps.cropper if deps else ImageCropper(
            self.runner, convert_cmd=config.tools.convert_cmd
        )
        self._backends: Dict[OCREngine, BaseOCRBackend] = dict(deps.backends) if deps else {}

    @property
    def workspace(self) -> Path:
        return Path(self.config.workspace.directory)

    def _build_probe(self, name: str) -> ImageProbe:
        if name.lower() == "identify":
            return IdentifyImageProbe(self.runner, identify_cmd=self.config.tools.identify_cmd)
        return PillowImageProbe()

    def register_backend(self, backend: BaseOCRBackend) -> None:
        """Use ``backend`` for its engine instead of the default one."""

        self._backends[OCREngine.parse(backend.engine)] = backend

    def backend_for(self, engine: "str | OCREngine") -> BaseOCRBackend:
        engine = OCREngine.parse(engine)
        backend = self._backends.get(engine)
        if backend is None:
            backend = build_backend(
                engine,
                self.workspace,
                self.runner,
                ocr_config=self.config.ocr,
                tools=self.config.tools,
            )
            self._backends[engine] = backend
        return backend

    def run(
        self, image_path: Path, box: Box, engine: "str | OCREngine | None" = None
    ) -> OCRResult:
        """Crop ``box`` out of ``image_path`` and recognise it."""

        backend = self.backend_for(engine or self.config.ocr.engine)
        geometry = format_geometry(box)
        destination = self.workspace / f"{CROP_BASENAME}{backend.input_suffix}"
        log.info("Running %s on %s at %s", backend.engine.value, image_path, geometry)
        artifact = self.cropper.crop(
            image_path, geometry, destination, options=self.config.crop.options
        )
        text = backend.recognize(artifact.path)
        return OCRResult(text=text, engine=backend.engine.value, artifact=artifact)


__all__ = ["CROP_BASENAME", "PipelineDependencies", "ProcessingPipeline"]
