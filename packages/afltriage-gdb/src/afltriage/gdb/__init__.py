"""afltriage.gdb -- run crashing programs under gdb and collect crash reports.

gdb is driven as an opaque subprocess.  Its output streams carry the debugger
transcript, the target's own output and a JSON payload from the bundled
triage script; marker lines printed from gdb's Python environment bracket
each region so it can be sliced back out.

Example::

    from afltriage.gdb import GdbTriager

    with GdbTriager() as triager:
        result = triager.triage_testcase(["./crasher", "crash-input"])
        print(result.thread_info.current_thread())
"""

from __future__ import annotations

from .errors import (
    ExtractionError,
    MarkerNotFound,
    MarkersOutOfOrder,
    PayloadParseError,
    ScriptProvisionError,
    SpawnFailure,
    TriageError,
    TriageScriptError,
    UnsupportedScriptLocation,
)
from .markers import BACKTRACE, CHILD_OUTPUT, Marker, build_marker, extract_marker
from .process import decode_output, execute_capture_output
from .report import (
    UNKNOWN_LINE,
    ChildResult,
    Frame,
    Symbol,
    Thread,
    ThreadInfo,
    TriageResult,
    Variable,
)
from .script import (
    BuiltinScript,
    ExternalScript,
    TriageScript,
    load_builtin_script,
    script_path,
)
from .triager import GdbTriager
from .types import GdbVersion, ProcessOutput

__all__ = [
    # Driver
    "GdbTriager",
    # Markers
    "Marker",
    "build_marker",
    "extract_marker",
    "CHILD_OUTPUT",
    "BACKTRACE",
    # Scripts
    "BuiltinScript",
    "ExternalScript",
    "TriageScript",
    "load_builtin_script",
    "script_path",
    # Process
    "execute_capture_output",
    "decode_output",
    "ProcessOutput",
    "GdbVersion",
    # Report model
    "UNKNOWN_LINE",
    "Symbol",
    "Variable",
    "Frame",
    "Thread",
    "ThreadInfo",
    "ChildResult",
    "TriageResult",
    # Errors
    "TriageError",
    "SpawnFailure",
    "ScriptProvisionError",
    "UnsupportedScriptLocation",
    "ExtractionError",
    "MarkerNotFound",
    "MarkersOutOfOrder",
    "TriageScriptError",
    "PayloadParseError",
]
