"""Blocking subprocess execution with full output capture."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from .errors import SpawnFailure
from .types import ProcessOutput

logger = logging.getLogger(__name__)


def execute_capture_output(executable: str, args: Sequence[str]) -> ProcessOutput:
    """Run *executable* with *args* and wait for it to exit.

    Both pipes are drained concurrently by :func:`subprocess.run`, so large
    outputs cannot deadlock the child.

    Raises
    ------
    SpawnFailure
        If the executable cannot be launched.
    """
    cmd = [executable, *args]
    logger.debug("Executing: %s", cmd)
    try:
        completed = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
    except OSError as exc:
        raise SpawnFailure(executable, str(exc)) from exc

    return ProcessOutput(
        stdout=completed.stdout,
        stderr=completed.stderr,
        returncode=completed.returncode,
    )


def decode_output(data: bytes) -> str:
    """Decode captured output, replacing invalid UTF-8 sequences."""
    return data.decode("utf-8", errors="replace")
