"""Crash report model populated from the triage script's JSON payload."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, field_validator

# gdb reports no line for stripped or inlined frames.
UNKNOWN_LINE = -1


class Symbol(BaseModel):
    """Where a frame's instruction pointer resolves to in source."""

    function_name: str
    mangled_function_name: str
    function_signature: str
    file: str
    line: int = UNKNOWN_LINE

    @field_validator("line", mode="before")
    @classmethod
    def _missing_line_is_unknown(cls, value):
        return UNKNOWN_LINE if value is None else value

    @property
    def has_line(self) -> bool:
        return self.line != UNKNOWN_LINE


class Variable(BaseModel):
    """A debugger-formatted function argument or local."""

    type: str
    name: str
    value: str


class Frame(BaseModel):
    """One stack level."""

    address: int
    relative_address: int
    module: str
    pretty_address: str
    symbol: Symbol
    args: List[Variable]
    locals: List[Variable]


class Thread(BaseModel):
    """A thread and its backtrace, innermost frame first."""

    tid: int
    backtrace: List[Frame]


class ThreadInfo(BaseModel):
    """All threads at the triage point and the one that had control."""

    current_tid: int
    threads: List[Thread]

    def current_thread(self) -> Optional[Thread]:
        """Return the thread whose ``tid`` matches ``current_tid``."""
        for thread in self.threads:
            if thread.tid == self.current_tid:
                return thread
        return None


class ChildResult(BaseModel):
    """The triaged program's own output, plus gdb's exit status.

    ``status_code`` is the return code of the gdb process.  In ``--batch``
    mode gdb exits with the status of its last command, so this is usually
    0 even when the program crashed.
    """

    stdout: str
    stderr: str
    status_code: int


class TriageResult(BaseModel):
    """The complete output of one triage run."""

    thread_info: ThreadInfo
    child: ChildResult
