"""Command line entry point.

``boxocr IMAGE`` opens the annotation window.  With ``--box X1,Y1,X2,Y2``
the box is marked without a window and the recognised text is printed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .config import AppConfig
from .core.errors import BoxOCRError
from .core.history import TextHistory
from .core.models import Box, Session
from .core.ocr import OCREngine
from .services.controller import AnnotationController
from .services.pipeline import ProcessingPipeline
from .utils import format_geometry

log = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        force=True,
    )
    if not verbose:
        logging.getLogger("PIL").setLevel(logging.WARNING)


def parse_box(value: str) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("expected X1,Y1,X2,Y2")
    try:
        x1, y1, x2, y2 = (int(part) for part in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid box {value!r}: {exc}") from exc
    return (x1, y1), (x2, y2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="boxocr", description=__doc__)
    parser.add_argument("image", type=Path, help="Image to annotate")
    parser.add_argument(
        "--engine",
        choices=[engine.value for engine in OCREngine],
        default="tesseract",
        help="OCR engine used for recognition (default: %(default)s)",
    )
    parser.add_argument("--lang", default="eng", help="Tesseract language (default: %(default)s)")
    parser.add_argument(
        "--box",
        type=parse_box,
        help="Mark X1,Y1,X2,Y2 and print the recognised text instead of opening a window",
    )
    parser.add_argument(
        "--crop-options",
        help=(
            "Options passed to convert before -crop; use the = form since they start "
            "with a dash, e.g. --crop-options='-density 150 -monochrome'"
        ),
    )
    parser.add_argument(
        "--probe",
        choices=["pillow", "identify"],
        default="pillow",
        help="How image dimensions are measured (default: %(default)s)",
    )
    parser.add_argument("--workdir", type=Path, help="Directory for temporary crop and OCR files")
    parser.add_argument("--tesseract-cmd", type=Path, help="Path to the tesseract executable")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> AppConfig:
    config = AppConfig()
    config.ocr.engine = args.engine
    config.ocr.language = args.lang
    config.workspace.probe = args.probe
    if args.crop_options is not None:
        config.crop.options = args.crop_options
    if args.workdir is not None:
        config.workspace.directory = args.workdir
    if args.tesseract_cmd is not None:
        config.tools.tesseract_cmd = args.tesseract_cmd
    return config


def print_action(session: Session, box: Box) -> None:
    print(format_geometry(box), flush=True)


def run_headless(controller: AnnotationController, args: argparse.Namespace) -> int:
    session = controller.start_session(args.image, on_action=print_action)
    top_left, bottom_right = args.box
    controller.set_top_left(session, top_left)
    controller.set_bottom_right(session, bottom_right)
    text = controller.run_ocr(session, args.engine)
    sys.stdout.write(text)
    return 0


def run_gui(controller: AnnotationController, args: argparse.Namespace) -> int:
    from PySide6.QtWidgets import QApplication

    from .ui.viewer import AnnotationView, ClipboardSink

    app = QApplication.instance() or QApplication(sys.argv[:1])
    view = AnnotationView()
    controller.display = view.show_document
    history = TextHistory(controller.pipeline.config.workspace.history_limit)
    controller.sink = ClipboardSink(history)
    session = controller.start_session(args.image, on_action=print_action)
    view.bind(controller, session)
    view.show()
    return app.exec()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point used by both console scripts and ``python -m``."""

    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    config = config_from_args(args)
    controller = AnnotationController(ProcessingPipeline(config))
    try:
        if args.box is not None:
            return run_headless(controller, args)
        return run_gui(controller, args)
    except BoxOCRError as exc:
        log.error("%s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation only
    raise SystemExit(main())
