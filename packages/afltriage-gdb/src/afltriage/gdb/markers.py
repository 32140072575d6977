"""Textual sentinels that bracket regions of gdb's captured output.

gdb's transcript, the triaged program's output and the triage payload all
land on the same two streams.  Each region of interest is bracketed by a
start/end marker pair printed on its own line from inside gdb's Python
environment, then sliced back out with :func:`extract_marker`.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import MarkerNotFound, MarkersOutOfOrder


@dataclass(frozen=True)
class Marker:
    """An immutable ``(start, end)`` sentinel pair."""

    start: str
    end: str

    def wrap(self, payload: str) -> str:
        """Render *payload* the way gdb prints it between the two markers."""
        return f"{self.start}\n{payload}{self.end}"


def build_marker(tag: str) -> Marker:
    """Derive the sentinel pair for *tag*."""
    return Marker(start=f"----{tag}_START----", end=f"----{tag}_END----")


CHILD_OUTPUT = build_marker("AFLTRIAGE_CHILD_OUTPUT")
BACKTRACE = build_marker("AFLTRIAGE_BACKTRACE")


def extract_marker(text: str, marker: Marker, channel: str = "") -> str:
    """Return the exact text between *marker*'s start and end sentinels.

    Parameters
    ----------
    text:
        A decoded stdout or stderr capture.
    marker:
        The sentinel pair bracketing the region.
    channel:
        Label for the region (e.g. ``"child STDOUT"``), carried into the
        raised error.

    Raises
    ------
    MarkerNotFound
        If either sentinel is absent.
    MarkersOutOfOrder
        If the end sentinel precedes the start sentinel's payload.
    """
    start_idx = text.find(marker.start)
    if start_idx < 0:
        raise MarkerNotFound(marker.start, channel)

    end_idx = text.find(marker.end)
    if end_idx < 0:
        raise MarkerNotFound(marker.end, channel)

    # Markers are printed on their own line.
    start_idx += len(marker.start) + 1

    if start_idx > end_idx:
        raise MarkersOutOfOrder(marker.start, channel)

    return text[start_idx:end_idx]
