"""Drive gdb as a subprocess and turn a crashing invocation into a report."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from .errors import PayloadParseError, SpawnFailure, TriageScriptError
from .markers import BACKTRACE, CHILD_OUTPUT, extract_marker
from .process import decode_output, execute_capture_output
from .report import ChildResult, ThreadInfo, TriageResult
from .script import BuiltinScript, TriageScript, script_path
from .types import GdbVersion

logger = logging.getLogger(__name__)

_VERSION_COMMAND = (
    "python import gdb, sys; "
    "print('V:'+gdb.execute('show version', to_string=True).splitlines()[0]); "
    "print('P:'+sys.version.splitlines()[0].strip())"
)


def _print_marker(marker: str) -> str:
    """gdb command writing *marker* on its own line to stdout and stderr."""
    return f"python [x.write('{marker}\\n') for x in [sys.stdout, sys.stderr]]"


def _find_prefixed_line(text: str, prefix: str) -> Optional[str]:
    idx = text.find(prefix)
    if idx < 0:
        return None
    rest = text[idx + len(prefix):].splitlines()
    return rest[0] if rest else ""


class GdbTriager:
    """Runs target programs under gdb and collects structured crash reports.

    Usage::

        with GdbTriager() as triager:
            if triager.has_supported_gdb():
                result = triager.triage_testcase(["./crasher", "input.bin"])
    """

    def __init__(
        self,
        script: Optional[TriageScript] = None,
        index_cache_dir: str = "gdb_cache",
    ) -> None:
        self.triage_script: TriageScript = script if script is not None else BuiltinScript()
        self.index_cache_dir = index_cache_dir
        # TODO: allow the user to select an alternate gdb executable
        self.gdb = "gdb"

    # -- context manager ---------------------------------------------------

    def __enter__(self) -> GdbTriager:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        """Release the built-in triage script, if one is owned."""
        if isinstance(self.triage_script, BuiltinScript):
            self.triage_script.close()

    # -- sanity check ------------------------------------------------------

    def gdb_version(self) -> Optional[GdbVersion]:
        """Ask gdb for its own and its embedded Python's version.

        Returns ``None`` (after logging diagnostics) when gdb cannot be run
        or does not report both versions.
        """
        gdb_args = ["--nx", "--batch", "-iex", _VERSION_COMMAND]

        try:
            output = execute_capture_output(self.gdb, gdb_args)
        except SpawnFailure as exc:
            logger.error("%s", exc)
            return None

        stdout = decode_output(output.stdout)
        stderr = decode_output(output.stderr)

        version = _find_prefixed_line(stdout, "V:")
        python_version = _find_prefixed_line(stdout, "P:")

        if not output.success or version is None or python_version is None:
            logger.error(
                "GDB sanity check failure\nARGS: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(gdb_args), stdout, stderr,
            )
            return None

        return GdbVersion(version=version, python_version=python_version)

    def has_supported_gdb(self) -> bool:
        """Return ``True`` if gdb runs and has Python scripting support."""
        info = self.gdb_version()
        if info is None:
            return False
        logger.info("GDB is working (%s - Python %s)", info.version, info.python_version)
        return True

    # -- triage ------------------------------------------------------------

    def build_triage_args(self, triage_script: Path) -> List[str]:
        """Build gdb's argument vector, up to and including ``--args``.

        The target program's own argv is appended after ``--args``.
        """
        # TODO: timeout and memory limit for the inferior
        return [
            "--batch", "--nx",
            "-iex", "set index-cache on",
            "-iex", f"set index-cache directory {self.index_cache_dir}",
            # stdout and stderr are not interleaved, so mark both
            "-ex", _print_marker(CHILD_OUTPUT.start),
            "-ex", "set logging file /dev/null",
            "-ex", "set logging redirect on",
            "-ex", "set logging on",
            "-ex", "run",
            "-ex", "set logging redirect off",
            "-ex", "set logging off",
            "-ex", _print_marker(CHILD_OUTPUT.end),
            "-ex", _print_marker(BACKTRACE.start),
            "-x", str(triage_script),
            "-ex", _print_marker(BACKTRACE.end),
            "--args",
        ]

    def triage_testcase(
        self, prog_args: Sequence[str], show_raw_output: bool = False
    ) -> TriageResult:
        """Run *prog_args* under gdb and return the parsed crash report.

        Parameters
        ----------
        prog_args:
            The target program path followed by its arguments.
        show_raw_output:
            Echo gdb's decoded stdout/stderr verbatim to stderr for
            diagnostics.

        Raises
        ------
        TriageError
            A subclass naming the step that failed.  No partial result is
            returned.
        """
        gdb_args = self.build_triage_args(script_path(self.triage_script))
        prog_args = list(prog_args)

        output = execute_capture_output(self.gdb, gdb_args + prog_args)

        stdout = decode_output(output.stdout)
        stderr = decode_output(output.stderr)

        if show_raw_output:
            sys.stderr.write(
                "--- RAW GDB OUTPUT ---\n"
                f"GDB ARGS: {' '.join(gdb_args)}\n"
                f"PROGRAM ARGS: {' '.join(prog_args)}\n"
                f"STDOUT:\n{stdout}\n"
                f"STDERR:\n{stderr}\n"
            )
            sys.stderr.flush()

        child_stdout = extract_marker(stdout, CHILD_OUTPUT, channel="child STDOUT")
        child_stderr = extract_marker(stderr, CHILD_OUTPUT, channel="child STDERR")
        backtrace_output = extract_marker(stdout, BACKTRACE, channel="triage JSON")
        backtrace_errors = extract_marker(stderr, BACKTRACE, channel="triage errors")

        if backtrace_errors:
            raise TriageScriptError(backtrace_errors)

        thread_info = self.parse_response(backtrace_output)
        logger.debug(
            "Triaged %s: %d thread(s), gdb exit status %d",
            prog_args[0] if prog_args else "<none>",
            len(thread_info.threads),
            output.returncode,
        )

        return TriageResult(
            thread_info=thread_info,
            child=ChildResult(
                stdout=child_stdout,
                stderr=child_stderr,
                status_code=output.returncode,
            ),
        )

    @staticmethod
    def parse_response(resp: str) -> ThreadInfo:
        """Deserialize the triage script's JSON payload.

        Raises
        ------
        PayloadParseError
            If *resp* is not JSON or does not match the report schema.
        """
        try:
            return ThreadInfo.model_validate_json(resp, strict=True)
        except ValidationError as exc:
            raise PayloadParseError(str(exc), resp) from exc
