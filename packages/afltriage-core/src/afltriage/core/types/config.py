from __future__ import annotations

import sys
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]

DEFAULT_CONFIG_NAME = "afltriage.toml"


class GdbConfig(BaseModel):
    """gdb invocation settings."""

    index_cache_dir: str = "gdb_cache"
    # External triage scripts cannot be delivered to gdb yet; setting this
    # makes every triage fail with UnsupportedScriptLocation.
    triage_script: Optional[str] = None


class OutputConfig(BaseModel):
    """Report output settings."""

    format: Literal["text", "json"] = "text"
    show_raw_output: bool = False
    show_child_output: bool = False


class TriageConfig(BaseModel):
    """Top-level afltriage configuration."""

    gdb: GdbConfig = GdbConfig()
    output: OutputConfig = OutputConfig()
    verbose: bool = False


def load_config(path: Optional[str] = None) -> TriageConfig:
    """Build a :class:`TriageConfig` from TOML.

    With no *path*, ``afltriage.toml`` in the working directory is used when
    present and defaults otherwise.  An explicit *path* must exist.

    Raises:
        OSError: the file cannot be read.
        tomllib.TOMLDecodeError: the file is not valid TOML.
        pydantic.ValidationError: a setting has the wrong type or value.
    """
    if path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.is_file():
            return TriageConfig()
    else:
        config_path = Path(path)

    raw = tomllib.loads(config_path.read_text(encoding="utf-8"))
    return TriageConfig.model_validate(raw)
