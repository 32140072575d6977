"""Plain result types for the gdb layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProcessOutput:
    """Everything captured from a finished subprocess."""

    stdout: bytes
    stderr: bytes
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class GdbVersion:
    """Version lines reported by the gdb sanity check."""

    version: str
    python_version: str
