"""Tests for the annotation state machine."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from boxocr.core.crop import ImageCropper
from boxocr.core.errors import (
    ImageMetadataUnavailable,
    InvalidGeometry,
    MissingCoordinates,
    OCRResultMissing,
    OCRToolFailed,
    SessionBusy,
    UnsupportedImageFormat,
)
from boxocr.core.history import TextHistory
from boxocr.core.imaging import ImageConverter, PillowImageProbe
from boxocr.core.models import Box, SessionState
from boxocr.services.controller import BOTTOM_RIGHT, AnnotationController
from boxocr.services.pipeline import PipelineDependencies, ProcessingPipeline

from conftest import missing_program, write_output_flag


class _RecordingProbe:
    def __init__(self, runner, size=(640, 480)) -> None:
        self.runner = runner
        self.size = size
        self.calls_seen: List[List[str]] = []
        self.paths: List[Path] = []

    def probe(self, path: Path):
        self.calls_seen = [list(call) for call in self.runner.calls]
        self.paths.append(path)
        return self.size


def _controller(config, runner, probe=None, displayed=None, sink=None) -> AnnotationController:
    deps = PipelineDependencies(
        runner=runner,
        probe=probe or PillowImageProbe(),
        converter=ImageConverter(runner),
        cropper=ImageCropper(runner),
    )
    display = displayed.append if displayed is not None else None
    return AnnotationController(ProcessingPipeline(config, deps=deps), display=display, sink=sink)


def test_start_session_selects_whole_image_and_renders(config, runner, png_image: Path) -> None:
    displayed: List[str] = []
    controller = _controller(config, runner, displayed=displayed)

    session = controller.start_session(png_image)

    assert controller.session is session
    assert session.state is SessionState.AWAITING
    assert (session.image_width, session.image_height) == (800, 600)
    assert session.box == Box(0, 0, 800, 600)
    assert session.image_url == png_image.resolve().as_uri()
    assert displayed == [session.last_document]
    assert 'width="800" height="600"' in displayed[0]


def test_conversion_runs_before_probe(config, runner, tmp_path: Path) -> None:
    source = tmp_path / "scan.tiff"
    source.write_bytes(b"II*\x00")
    probe = _RecordingProbe(runner)
    controller = _controller(config, runner, probe=probe)

    session = controller.start_session(source)

    converted = config.workspace.directory / "converted.png"
    assert probe.calls_seen == [["convert", str(source), str(converted)]]
    assert probe.paths == [converted]
    assert session.image.source == source
    assert session.image.path == converted


def test_failed_start_keeps_previous_session(config, runner, png_image: Path, tmp_path: Path) -> None:
    controller = _controller(config, runner)
    first = controller.start_session(png_image)
    broken = tmp_path / "broken.png"
    broken.write_text("garbage")

    with pytest.raises(ImageMetadataUnavailable):
        controller.start_session(broken)
    with pytest.raises(UnsupportedImageFormat):
        controller.start_session(tmp_path / "absent.jpg")
    assert controller.session is first


def test_corner_events_rerender(config, runner, png_image: Path) -> None:
    displayed: List[str] = []
    controller = _controller(config, runner, displayed=displayed)
    session = controller.start_session(png_image)

    controller.set_top_left(session, (10, 20))
    controller.handle_click(session, {"x": 110.4, "y": 220.9}, BOTTOM_RIGHT)

    assert session.top_left == (10, 20)
    assert session.bottom_right == (110, 220)
    assert session.box == Box(10, 20, 100, 200)
    assert len(displayed) == 3
    assert '<rect x="10" y="20" width="100" height="200"' in displayed[-1]


def test_click_without_position_leaves_box(config, runner, png_image: Path) -> None:
    controller = _controller(config, runner)
    session = controller.start_session(png_image)

    with pytest.raises(MissingCoordinates):
        controller.handle_click(session, object())
    assert session.box == Box(0, 0, 800, 600)


def test_act_passes_box_to_callback(config, runner, png_image: Path) -> None:
    seen = []
    controller = _controller(config, runner)
    session = controller.start_session(
        png_image, on_action=lambda s, box: seen.append((s.state, box))
    )
    controller.set_top_left(session, (5, 5))

    box = controller.act(session)

    assert box == Box(5, 5, 795, 595)
    assert seen == [(SessionState.PROCESSING, box)]
    assert session.state is SessionState.AWAITING
    assert runner.calls == []


def test_act_returns_to_awaiting_when_callback_fails(config, runner, png_image: Path) -> None:
    def explode(session, box):
        raise RuntimeError("sink unavailable")

    controller = _controller(config, runner)
    session = controller.start_session(png_image, on_action=explode)

    with pytest.raises(RuntimeError):
        controller.act(session)
    assert session.state is SessionState.AWAITING


def test_busy_session_rejects_new_work(config, runner, png_image: Path) -> None:
    controller = _controller(config, runner)
    session = controller.start_session(png_image)
    session.on_action = lambda s, box: controller.run_ocr(s, "gocr")

    with pytest.raises(SessionBusy):
        controller.act(session)
    assert session.state is SessionState.AWAITING


def test_run_ocr_publishes_text(config, runner, png_image: Path) -> None:
    runner.on("ocrad", write_output_flag("recognised"))
    history = TextHistory()
    controller = _controller(config, runner, sink=history)
    session = controller.start_session(png_image)
    controller.set_top_left(session, (10, 20))
    controller.set_bottom_right(session, (110, 220))

    assert controller.run_ocr(session, "ocrad") == "recognised"
    assert history.latest == "recognised"
    assert "100x200+10+20" in runner.calls[0]


def test_missing_recognizer_leaves_session_untouched(config, runner, png_image: Path) -> None:
    runner.on("gocr", missing_program)
    history = TextHistory()
    controller = _controller(config, runner, sink=history)
    session = controller.start_session(png_image)
    controller.set_top_left(session, (1, 2))
    before = (session.top_left, session.bottom_right, session.image)

    with pytest.raises(OCRToolFailed):
        controller.run_ocr(session, "gocr")

    assert (session.top_left, session.bottom_right, session.image) == before
    assert session.state is SessionState.AWAITING
    assert len(history) == 0


def test_second_run_never_returns_first_text(config, runner, png_image: Path) -> None:
    controller = _controller(config, runner)
    session = controller.start_session(png_image)

    runner.on("gocr", write_output_flag("first"))
    controller.set_bottom_right(session, (50, 50))
    assert controller.run_ocr(session, "gocr") == "first"

    runner.on("gocr", lambda args: 0)
    controller.set_bottom_right(session, (60, 60))
    with pytest.raises(OCRResultMissing):
        controller.run_ocr(session, "gocr")
    assert session.state is SessionState.AWAITING


def test_run_ocr_uses_box_at_call_time(config, runner, png_image: Path) -> None:
    controller = _controller(config, runner)
    session = controller.start_session(png_image)
    controller.set_bottom_right(session, (40, 30))

    def move_corner_then_write(args):
        controller.set_bottom_right(session, (400, 300))
        return write_output_flag("ok")(args)

    runner.on("gocr", move_corner_then_write)
    controller.run_ocr(session, "gocr")
    runner.on("gocr", write_output_flag("ok"))
    controller.run_ocr(session, "gocr")

    crops = [call for call in runner.calls if call[0] == "convert"]
    assert "40x30+0+0" in crops[0]
    assert "400x300+0+0" in crops[1]


@pytest.mark.parametrize(
    "top_left, bottom_right",
    [((-5, 3), (5, 13)), ((5, 5), (5, 40))],
)
def test_unusable_box_is_rejected_before_cropping(
    config, runner, png_image: Path, top_left, bottom_right
) -> None:
    history = TextHistory()
    controller = _controller(config, runner, sink=history)
    session = controller.start_session(png_image)
    controller.set_top_left(session, top_left)
    controller.set_bottom_right(session, bottom_right)
    box = session.box

    with pytest.raises(InvalidGeometry):
        controller.run_ocr(session, "gocr")

    assert session.box == box
    assert (session.top_left, session.bottom_right) == (top_left, bottom_right)
    assert session.state is SessionState.AWAITING
    assert runner.calls == []
    assert len(history) == 0
