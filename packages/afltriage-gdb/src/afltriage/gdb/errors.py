"""Error types raised by the gdb triage layer.

Every failure of a triage run surfaces as a :class:`TriageError` subclass so
callers can tell "gdb never ran the script" apart from "the script ran but
produced bad output".
"""

from __future__ import annotations

from typing import Optional


class TriageError(Exception):
    """Base class for all triage failures."""


class SpawnFailure(TriageError):
    """The debugger executable could not be launched."""

    def __init__(self, executable: str, reason: str):
        self.executable = executable
        self.reason = reason
        super().__init__(f"Failed to execute '{executable}': {reason}")


class ScriptProvisionError(TriageError):
    """The built-in triage script could not be written to a temporary file."""


class UnsupportedScriptLocation(TriageError):
    """No usable triage script path could be resolved."""

    def __init__(self, message: str = "Unsupported triage script path"):
        super().__init__(message)


class ExtractionError(TriageError):
    """A marker-bracketed region could not be sliced out of a stream."""

    def __init__(self, message: str, marker: str, channel: str = ""):
        self.marker = marker
        self.channel = channel
        if channel:
            message = f"Could not extract {channel}: {message}"
        super().__init__(message)


class MarkerNotFound(ExtractionError):
    """A required sentinel never appeared in the captured stream."""

    def __init__(self, marker: str, channel: str = ""):
        super().__init__(f"Could not find {marker}", marker, channel)


class MarkersOutOfOrder(ExtractionError):
    """The end sentinel appeared before the start sentinel."""

    def __init__(self, marker: str, channel: str = ""):
        super().__init__(
            "Start marker and end marker out-of-order", marker, channel
        )


class TriageScriptError(TriageError):
    """The triage script ran but reported errors on stderr."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Triage script emitted errors: {text}")


class PayloadParseError(TriageError):
    """The bracketed triage payload is not valid JSON for the report schema."""

    def __init__(self, message: str, payload: Optional[str] = None):
        self.message = message
        self.payload = payload
        super().__init__(f"Failed to parse triage JSON from GDB: {message}")
