from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Sequence

import pytest
from PIL import Image

from boxocr.config import AppConfig


class FakeRunner:
    """Records commands and dispatches them to per-program handlers.

    A handler receives the argument list and returns the exit status or
    raises.  Programs without a handler exit with status 0.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.handlers: Dict[str, Callable[[List[str]], int]] = {}

    def on(self, program: str, handler: Callable[[List[str]], int]) -> None:
        self.handlers[program] = handler

    def programs(self) -> List[str]:
        return [call[0] for call in self.calls]

    def run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        args = list(args)
        self.calls.append(args)
        handler = self.handlers.get(args[0])
        returncode = handler(args) if handler else 0
        return subprocess.CompletedProcess(args, returncode, stdout="", stderr="boom" if returncode else "")


def write_last_argument(content: bytes = b"P1\n1 1\n0\n") -> Callable[[List[str]], int]:
    def handler(args: List[str]) -> int:
        Path(args[-1]).write_bytes(content)
        return 0

    return handler


def write_output_flag(text: str) -> Callable[[List[str]], int]:
    """Handler for gocr/ocrad style ``-o <file>`` invocations."""

    def handler(args: List[str]) -> int:
        Path(args[args.index("-o") + 1]).write_text(text, encoding="utf-8")
        return 0

    return handler


def missing_program(args: List[str]) -> int:
    raise FileNotFoundError(args[0])


@pytest.fixture
def runner() -> FakeRunner:
    fake = FakeRunner()
    fake.on("convert", write_last_argument())
    return fake


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    cfg = AppConfig()
    cfg.workspace.directory = tmp_path / "work"
    return cfg


@pytest.fixture
def png_image(tmp_path: Path) -> Path:
    path = tmp_path / "page.png"
    Image.new("RGB", (800, 600), (255, 255, 255)).save(path)
    return path
