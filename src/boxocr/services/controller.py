"""State machine tying pointer events, rendering and recognition together."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from ..core.errors import SessionBusy
from ..core.history import TextHistory, TextSink
from ..core.imaging import resolve_image_source
from ..core.mapping import CoordinateMapper
from ..core.models import ActionCallback, Box, ImageInfo, Point, Session, SessionState
from ..core.ocr import OCREngine
from ..core.overlay import render_overlay
from .pipeline import ProcessingPipeline

log = logging.getLogger(__name__)

Display = Callable[[str], Any]
"""Receives every freshly rendered overlay document."""

TOP_LEFT = "top_left"
BOTTOM_RIGHT = "bottom_right"


class AnnotationController:
    """Drives annotation sessions.

    Every operation takes the :class:`Session` it acts on.  ``session`` holds
    the most recently started one; it is ``None`` while the controller is
    idle.  Operations are synchronous and expected to run on the thread that
    delivers the pointer events.
    """

    def __init__(
        self,
        pipeline: ProcessingPipeline,
        display: Optional[Display] = None,
        sink: Optional[TextSink] = None,
        mapper: Optional[CoordinateMapper] = None,
    ) -> None:
        self.pipeline = pipeline
        self.display = display
        self.sink = sink if sink is not None else TextHistory(
            pipeline.config.workspace.history_limit
        )
        self.mapper = mapper or CoordinateMapper()
        self.session: Optional[Session] = None

    def start_session(
        self, image_file: Path, on_action: Optional[ActionCallback] = None
    ) -> Session:
        """Open ``image_file`` and select the whole image.

        Any failure leaves the previously active session untouched.
        """

        source = Path(image_file)
        path = resolve_image_source(source, self.pipeline.converter, self.pipeline.workspace)
        width, height = self.pipeline.probe.probe(path)
        image = ImageInfo(source=source, path=path, width=width, height=height)
        session = Session(
            image=image,
            top_left=(0, 0),
            bottom_right=(width, height),
            on_action=on_action,
        )
        log.info("Started session on %s (%dx%d)", source, width, height)
        self._render(session)
        self.session = session
        return session

    def set_top_left(self, session: Session, point: Point) -> None:
        session.top_left = (int(point[0]), int(point[1]))
        self._render(session)

    def set_bottom_right(self, session: Session, point: Point) -> None:
        session.bottom_right = (int(point[0]), int(point[1]))
        self._render(session)

    def handle_click(self, session: Session, event: Any, corner: str = TOP_LEFT) -> Point:
        """Map a raw pointer event and move the named corner to it."""

        point = self.mapper.map_event(event)
        if corner == TOP_LEFT:
            self.set_top_left(session, point)
        elif corner == BOTTOM_RIGHT:
            self.set_bottom_right(session, point)
        else:
            raise ValueError(f"unknown corner {corner!r}")
        return point

    def act(self, session: Session) -> Box:
        """Hand the current box to the session's action callback."""

        box = session.box
        with self._processing(session):
            if session.on_action is not None:
                session.on_action(session, box)
        return box

    def run_ocr(self, session: Session, engine: "str | OCREngine | None" = None) -> str:
        """Crop the current box, recognise it and publish the text."""

        # The box is read before anything else so later corner changes cannot leak in.
        box = session.box
        image_path = session.image.path
        with self._processing(session):
            result = self.pipeline.run(image_path, box, engine)
        self.sink.publish(result.text)
        return result.text

    @contextmanager
    def _processing(self, session: Session) -> Iterator[Session]:
        if session.state is SessionState.PROCESSING:
            raise SessionBusy("the session is still processing the previous request")
        session.state = SessionState.PROCESSING
        try:
            yield session
        finally:
            session.state = SessionState.AWAITING

    def _render(self, session: Session) -> str:
        document = render_overlay(
            session.image_url,
            session.image_width,
            session.image_height,
            session.box,
            self.pipeline.config.overlay,
        )
        session.last_document = document
        if self.display is not None:
            self.display(document)
        return document


__all__ = ["AnnotationController", "BOTTOM_RIGHT", "Display", "TOP_LEFT"]
