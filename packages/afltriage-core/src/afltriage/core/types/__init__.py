from __future__ import annotations

from afltriage.core.types.config import (
    GdbConfig,
    OutputConfig,
    TriageConfig,
    load_config,
)

__all__ = [
    "GdbConfig",
    "OutputConfig",
    "TriageConfig",
    "load_config",
]
