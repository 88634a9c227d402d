"""Blocking invocation of the external image and OCR programs."""

from __future__ import annotations

import logging
import subprocess
from typing import Optional, Protocol, Sequence, Type

from .errors import ToolError

log = logging.getLogger(__name__)


class CommandRunner(Protocol):
    """Capability used for every external program call."""

    def run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        """Run ``args`` to completion and return the finished process."""


class SubprocessRunner:
    """Runs commands synchronously with :func:`subprocess.run`."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        log.debug("Running %s", " ".join(args))
        return subprocess.run(
            list(args),
            check=False,
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )


def run_checked(
    runner: CommandRunner,
    args: Sequence[str],
    error_cls: Type[ToolError],
) -> subprocess.CompletedProcess:
    """Run ``args`` and raise ``error_cls`` if the program fails.

    A missing executable, a timeout and a non-zero exit status all count as
    failures.
    """

    args = [str(arg) for arg in args]
    try:
        proc = runner.run(args)
    except FileNotFoundError as exc:
        raise error_cls(f"{args[0]} is not installed or not on PATH", command=args) from exc
    except subprocess.TimeoutExpired as exc:
        raise error_cls(f"{args[0]} timed out after {exc.timeout}s", command=args) from exc
    except OSError as exc:
        raise error_cls(f"{args[0]} could not be started: {exc}", command=args) from exc

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        log.warning("%s exited with status %s: %s", args[0], proc.returncode, stderr)
        raise error_cls(
            f"{args[0]} exited with status {proc.returncode}",
            command=args,
            returncode=proc.returncode,
            stderr=stderr,
        )
    return proc


__all__ = ["CommandRunner", "SubprocessRunner", "run_checked"]
