"""Destinations for recognised text."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterator, Optional, Protocol


class TextSink(Protocol):
    def publish(self, text: str) -> None:
        """Receive a freshly recognised text."""


class TextHistory:
    """Keeps the most recent recognised texts, newest last."""

    def __init__(self, limit: int = 50) -> None:
        if limit <= 0:
            raise ValueError("history limit must be positive")
        self._entries: Deque[str] = deque(maxlen=limit)

    def publish(self, text: str) -> None:
        self._entries.append(text)

    @property
    def latest(self) -> Optional[str]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


__all__ = ["TextHistory", "TextSink"]
