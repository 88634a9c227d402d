"""Qt window that shows the overlay and forwards clicks to the controller."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QByteArray, Qt, Signal
from PySide6.QtGui import QKeyEvent, QMouseEvent
from PySide6.QtSvgWidgets import QSvgWidget
from PySide6.QtWidgets import QApplication, QMessageBox, QWidget

from ..core.errors import BoxOCRError
from ..core.history import TextHistory
from ..core.models import Session
from ..core.ocr import OCREngine
from ..services.controller import BOTTOM_RIGHT, TOP_LEFT, AnnotationController

log = logging.getLogger(__name__)

_ENGINE_KEYS = {
    int(Qt.Key_T): OCREngine.TESSERACT,
    int(Qt.Key_G): OCREngine.GOCR,
    int(Qt.Key_O): OCREngine.OCRAD,
}


class ClipboardSink:
    """Copies recognised text to the clipboard and keeps a history."""

    def __init__(self, history: Optional[TextHistory] = None) -> None:
        self.history = history or TextHistory()

    def publish(self, text: str) -> None:
        self.history.publish(text)
        QApplication.clipboard().setText(text)


class AnnotationView(QSvgWidget):
    """Displays overlay documents at 1:1 scale.

    Left click sets the top-left corner, right click the bottom-right one,
    Enter runs the session action and ``t``/``g``/``o`` run tesseract, gocr
    or ocrad on the marked box.
    """

    text_recognized = Signal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.controller: Optional[AnnotationController] = None
        self.session: Optional[Session] = None
        self.setFocusPolicy(Qt.StrongFocus)
        self.setCursor(Qt.CrossCursor)

    def bind(self, controller: AnnotationController, session: Session) -> None:
        self.controller = controller
        self.session = session
        self.setFixedSize(session.image_width, session.image_height)
        self.setWindowTitle(f"boxocr - {session.image.source.name}")
        if session.last_document:
            self.show_document(session.last_document)

    def show_document(self, document: str) -> None:
        self.load(QByteArray(document.encode("utf-8")))

    def mousePressEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if self.controller is None or self.session is None:
            return super().mousePressEvent(event)
        if event.button() == Qt.LeftButton:
            self._guarded(self.controller.handle_click, self.session, event, TOP_LEFT)
        elif event.button() == Qt.RightButton:
            self._guarded(self.controller.handle_click, self.session, event, BOTTOM_RIGHT)
        super().mousePressEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:  # type: ignore[override]
        if self.controller is None or self.session is None:
            return super().keyPressEvent(event)
        key = int(event.key())
        if key in (int(Qt.Key_Return), int(Qt.Key_Enter)):
            self._guarded(self.controller.act, self.session)
        elif key in _ENGINE_KEYS:
            text = self._guarded(self.controller.run_ocr, self.session, _ENGINE_KEYS[key])
            if text is not None:
                self.text_recognized.emit(text)
        elif key == int(Qt.Key_Escape):
            self.close()
        else:
            super().keyPressEvent(event)

    def _guarded(self, func, *args):
        try:
            return func(*args)
        except BoxOCRError as exc:
            log.error("%s", exc)
            QMessageBox.warning(self, "boxocr", str(exc))
            return None


__all__ = ["AnnotationView", "ClipboardSink"]
