"""OCR engines driven through their command line programs."""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import List, Protocol

import pytesseract

from ..config import OCRConfig, ToolsConfig
from .errors import OCRResultMissing, OCRToolFailed
from .tools import CommandRunner, run_checked

log = logging.getLogger(__name__)


class OCREngine(str, enum.Enum):
    TESSERACT = "tesseract"
    GOCR = "gocr"
    OCRAD = "ocrad"

    @classmethod
    def parse(cls, value: "str | OCREngine") -> "OCREngine":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(engine.value for engine in cls)
            raise ValueError(f"unknown OCR engine {value!r} (expected one of {choices})") from None


class BaseOCRBackend(Protocol):
    """Common interface for OCR engines."""

    engine: OCREngine
    input_suffix: str
    """File suffix of the crop format the engine reads."""

    def recognize(self, image_path: Path) -> str:
        """Recognise the text in ``image_path``."""


class _FileOutputBackend:
    """Shared handling of the output file every engine writes."""

    engine: OCREngine
    input_suffix: str

    def __init__(self, workspace: Path) -> None:
        self.workspace = Path(workspace)

    @property
    def output_path(self) -> Path:
        return self.workspace / f"ocr-{self.engine.value}.txt"

    def recognize(self, image_path: Path) -> str:
        output = self.output_path
        output.parent.mkdir(parents=True, exist_ok=True)
        # A result left over from a previous run must never be mistaken for this one.
        output.unlink(missing_ok=True)
        self._invoke(Path(image_path), output)
        if not output.exists():
            raise OCRResultMissing(f"{self.engine.value} did not write {output}")
        text = output.read_text(encoding="utf-8", errors="replace")
        log.info("%s recognised %d characters", self.engine.value, len(text))
        return text

    def _invoke(self, image_path: Path, output: Path) -> None:
        raise NotImplementedError


class TesseractBackend(_FileOutputBackend):
    """Runs Tesseract through :func:`pytesseract.pytesseract.run_tesseract`."""

    engine = OCREngine.TESSERACT
    input_suffix = ".tif"

    def __init__(
        self,
        workspace: Path,
        language: str = "eng",
        psm: int = 6,
        oem: int = 3,
        tesseract_cmd: str | None = None,
    ) -> None:
        super().__init__(workspace)
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = str(tesseract_cmd)
        self.language = language
        self.psm = psm
        self.oem = oem

    def _build_config(self) -> str:
        return f"--psm {self.psm} --oem {self.oem}"

    def _invoke(self, image_path: Path, output: Path) -> None:
        # Tesseract appends ``.txt`` to the output base itself.
        output_base = str(output.with_suffix(""))
        try:
            pytesseract.pytesseract.run_tesseract(
                str(image_path),
                output_base,
                extension="txt",
                lang=self.language,
                config=self._build_config(),
            )
        except pytesseract.TesseractNotFoundError as exc:
            raise OCRToolFailed(str(exc), command=[pytesseract.pytesseract.tesseract_cmd]) from exc
        except pytesseract.TesseractError as exc:
            raise OCRToolFailed(
                f"tesseract exited with status {exc.status}: {exc.message}",
                command=[pytesseract.pytesseract.tesseract_cmd],
                returncode=exc.status,
                stderr=str(exc.message),
            ) from exc


class GocrBackend(_FileOutputBackend):
    engine = OCREngine.GOCR
    input_suffix = ".pbm"

    def __init__(self, workspace: Path, runner: CommandRunner, gocr_cmd: str = "gocr") -> None:
        super().__init__(workspace)
        self.runner = runner
        self.gocr_cmd = gocr_cmd

    def build_command(self, image_path: Path, output: Path) -> List[str]:
        return [self.gocr_cmd, "-i", str(image_path), "-o", str(output)]

    def _invoke(self, image_path: Path, output: Path) -> None:
        run_checked(self.runner, self.build_command(image_path, output), OCRToolFailed)


class OcradBackend(_FileOutputBackend):
    engine = OCREngine.OCRAD
    input_suffix = ".pbm"

    def __init__(self, workspace: Path, runner: CommandRunner, ocrad_cmd: str = "ocrad") -> None:
        super().__init__(workspace)
        self.runner = runner
        self.ocrad_cmd = ocrad_cmd

    def build_command(self, image_path: Path, output: Path) -> List[str]:
        return [self.ocrad_cmd, str(image_path), "-o", str(output)]

    def _invoke(self, image_path: Path, output: Path) -> None:
        run_checked(self.runner, self.build_command(image_path, output), OCRToolFailed)


def build_backend(
    engine: "str | OCREngine",
    workspace: Path,
    runner: CommandRunner,
    ocr_config: OCRConfig | None = None,
    tools: ToolsConfig | None = None,
) -> BaseOCRBackend:
    """Instantiate the backend registered for ``engine``."""

    engine = OCREngine.parse(engine)
    ocr_config = ocr_config or OCRConfig()
    tools = tools or ToolsConfig()
    if engine is OCREngine.GOCR:
        return GocrBackend(workspace, runner, gocr_cmd=tools.gocr_cmd)
    if engine is OCREngine.OCRAD:
        return OcradBackend(workspace, runner, ocrad_cmd=tools.ocrad_cmd)
    return TesseractBackend(
        workspace,
        language=ocr_config.language,
        psm=ocr_config.psm,
        oem=ocr_config.oem,
        tesseract_cmd=str(tools.tesseract_cmd) if tools.tesseract_cmd else None,
    )


__all__ = [
    "BaseOCRBackend",
    "GocrBackend",
    "OCREngine",
    "OcradBackend",
    "TesseractBackend",
    "build_backend",
]
