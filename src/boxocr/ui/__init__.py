"""Qt based user-interface components."""

from .viewer import AnnotationView, ClipboardSink

__all__ = ["AnnotationView", "ClipboardSink"]
