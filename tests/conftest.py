"""Root conftest -- shared fixtures for the entire test suite."""

from __future__ import annotations

import json
import logging

import pytest

from afltriage.gdb.markers import BACKTRACE, CHILD_OUTPUT
from afltriage.gdb.types import ProcessOutput


# ---------------------------------------------------------------------------
# Triage payloads
# ---------------------------------------------------------------------------

@pytest.fixture()
def sample_payload():
    """A realistic triage-script payload: two threads, thread 2 faulted."""
    return {
        "current_tid": 2,
        "threads": [
            {
                "tid": 1,
                "backtrace": [
                    {
                        "address": 0x7FFFF7E8A2C0,
                        "relative_address": 0x1142C0,
                        "module": "/usr/lib/x86_64-linux-gnu/libc.so.6",
                        "pretty_address": "0x7ffff7e8a2c0",
                        "symbol": {
                            "function_name": "__futex_abstimed_wait_common",
                            "mangled_function_name": "__futex_abstimed_wait_common",
                            "function_signature": "",
                            "file": "",
                            "line": -1,
                        },
                        "args": [],
                        "locals": [],
                    },
                ],
            },
            {
                "tid": 2,
                "backtrace": [
                    {
                        "address": 0x555555555149,
                        "relative_address": 0x1149,
                        "module": "/tmp/crasher",
                        "pretty_address": "0x555555555149",
                        "symbol": {
                            "function_name": "parse_header",
                            "mangled_function_name": "_Z12parse_headerPKc",
                            "function_signature": "int (const char *)",
                            "file": "crasher.cc",
                            "line": 12,
                        },
                        "args": [{"type": "const char *", "name": "buf", "value": "0x0"}],
                        "locals": [{"type": "int", "name": "len", "value": "32767"}],
                    },
                    {
                        "address": 0x5555555551A0,
                        "relative_address": 0x11A0,
                        "module": "/tmp/crasher",
                        "pretty_address": "0x5555555551a0",
                        "symbol": {
                            "function_name": "main",
                            "mangled_function_name": "main",
                            "function_signature": "int (int, char **)",
                            "file": "crasher.cc",
                            "line": 30,
                        },
                        "args": [
                            {"type": "int", "name": "argc", "value": "2"},
                            {"type": "char **", "name": "argv", "value": "0x7fffffffe3a8"},
                        ],
                        "locals": [],
                    },
                ],
            },
        ],
    }


# ---------------------------------------------------------------------------
# Captured gdb output
# ---------------------------------------------------------------------------

def build_gdb_output(
    child_stdout: str = "",
    child_stderr: str = "",
    payload: str = "",
    script_errors: str = "",
    returncode: int = 0,
) -> ProcessOutput:
    """Assemble what gdb prints for a triage run, transcript noise included."""
    stdout = (
        "Reading symbols from ./crasher...\n"
        + CHILD_OUTPUT.wrap(child_stdout)
        + "\n"
        + BACKTRACE.wrap(payload)
        + "\n"
    )
    stderr = (
        CHILD_OUTPUT.wrap(child_stderr)
        + "\n"
        + BACKTRACE.wrap(script_errors)
        + "\n"
    )
    return ProcessOutput(
        stdout=stdout.encode(),
        stderr=stderr.encode(),
        returncode=returncode,
    )


@pytest.fixture()
def make_gdb_output():
    """Factory for captured gdb output; see :func:`build_gdb_output`."""
    return build_gdb_output


@pytest.fixture()
def gdb_output(sample_payload):
    """A successful triage run of a program that printed a line and crashed."""
    return build_gdb_output(
        child_stdout="starting up\n",
        child_stderr="warning: short read\n",
        payload=json.dumps(sample_payload) + "\n",
        returncode=1,
    )


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_afltriage_logger():
    """Undo CLI logging setup so caplog keeps seeing afltriage records."""
    yield
    logger = logging.getLogger("afltriage")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
