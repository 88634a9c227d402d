"""Crop a region out of an image with ImageMagick ``convert``."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from .errors import CropToolFailed
from .models import CropArtifact
from .tools import CommandRunner, run_checked

log = logging.getLogger(__name__)

DEFAULT_CROP_OPTIONS = "-density 300 -monochrome -compress none"


class ImageCropper:
    """Runs ``convert <options> -crop <geometry> <source> <destination>``."""

    def __init__(self, runner: CommandRunner, convert_cmd: str = "convert") -> None:
        self.runner = runner
        self.convert_cmd = convert_cmd

    def build_command(
        self, source: Path, geometry: str, options: str, destination: Path
    ) -> list[str]:
        return [
            self.convert_cmd,
            *shlex.split(options),
            "-crop",
            geometry,
            str(source),
            str(destination),
        ]

    def crop(
        self,
        source: Path,
        geometry: str,
        destination: Path,
        options: str = DEFAULT_CROP_OPTIONS,
    ) -> CropArtifact:
        """Write the ``geometry`` region of ``source`` to ``destination``.

        The destination is removed first, so its presence afterwards proves
        this run produced it.  The output format follows the destination
        suffix.
        """

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.unlink(missing_ok=True)
        command = self.build_command(Path(source), geometry, options, destination)
        run_checked(self.runner, command, CropToolFailed)
        if not destination.exists():
            raise CropToolFailed(
                f"{self.convert_cmd} did not write {destination}", command=command, returncode=0
            )
        log.debug("Cropped %s at %s into %s", source, geometry, destination)
        return CropArtifact(
            path=destination, source=Path(source), geometry=geometry, options=options
        )


__all__ = ["DEFAULT_CROP_OPTIONS", "ImageCropper"]
