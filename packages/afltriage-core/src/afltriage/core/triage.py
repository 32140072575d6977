"""AflTriage -- top-level orchestrator."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from afltriage.core.types.config import TriageConfig, load_config
from afltriage.gdb import ExternalScript, GdbTriager, TriageResult

logger = logging.getLogger(__name__)


class AflTriage:
    """Configured front end over :class:`~afltriage.gdb.GdbTriager`.

    Usage:
        with AflTriage() as triage:
            if triage.check():
                result = triage.triage(["./crasher", "crash-input"])
    """

    def __init__(
        self,
        config: Optional[TriageConfig] = None,
        config_path: Optional[str] = None,
    ):
        if config is not None:
            self.config = config
        else:
            self.config = load_config(config_path)

        script = None
        if self.config.gdb.triage_script:
            script = ExternalScript(self.config.gdb.triage_script)

        self.triager = GdbTriager(
            script=script,
            index_cache_dir=self.config.gdb.index_cache_dir,
        )

    def check(self) -> bool:
        """Run the gdb sanity check."""
        return self.triager.has_supported_gdb()

    def triage(self, prog_args: Sequence[str]) -> TriageResult:
        """Triage one program invocation."""
        logger.debug("Triaging: %s", " ".join(prog_args))
        return self.triager.triage_testcase(
            prog_args, show_raw_output=self.config.output.show_raw_output
        )

    def close(self) -> None:
        """Release the triage script."""
        self.triager.close()

    def __enter__(self) -> AflTriage:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
