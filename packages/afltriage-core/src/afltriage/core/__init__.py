"""afltriage -- turn crashing program invocations into structured gdb crash reports."""

from __future__ import annotations

from afltriage.core.triage import AflTriage
from afltriage.core.types.config import GdbConfig, OutputConfig, TriageConfig, load_config

__all__ = [
    "AflTriage",
    "GdbConfig",
    "OutputConfig",
    "TriageConfig",
    "load_config",
]
