"""Human-readable crash report rendering.

Renders a :class:`~afltriage.gdb.TriageResult` with Rich, gdb ``bt`` style:
the thread that had control first, one line per frame, locals indented
beneath their frame.
"""

from __future__ import annotations

from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from afltriage.gdb import Frame, Thread, TriageResult


def format_frame(index: int, frame: Frame) -> str:
    """Format one frame as a single backtrace line."""
    sym = frame.symbol
    args = ", ".join(f"{a.name}={a.value}" for a in frame.args)
    parts = [f"#{index:<2} {frame.pretty_address} in {sym.function_name or '??'} ({args})"]

    if sym.file:
        location = f"{sym.file}:{sym.line}" if sym.has_line else sym.file
        parts.append(f"at {location}")
    elif frame.module:
        parts.append(f"from {frame.module}")
    return " ".join(parts)


def _ordered_threads(result: TriageResult) -> List[Thread]:
    current = result.thread_info.current_thread()
    if current is None:
        return list(result.thread_info.threads)
    others = [t for t in result.thread_info.threads if t is not current]
    return [current, *others]


def render_report(
    result: TriageResult,
    console: Console,
    show_child_output: bool = False,
) -> None:
    """Print *result* to *console*."""
    current_tid = result.thread_info.current_tid

    for thread in _ordered_threads(result):
        title = f"Thread {thread.tid}"
        if thread.tid == current_tid:
            title += " (current)"
        console.rule(title, style="bold red" if thread.tid == current_tid else "dim")

        if not thread.backtrace:
            console.print(Text("<no frames>", style="dim"))
            continue

        for index, frame in enumerate(thread.backtrace):
            console.print(Text(format_frame(index, frame)))
            for local in frame.locals:
                console.print(
                    Text(f"      {local.type} {local.name} = {local.value}", style="dim")
                )

    if show_child_output:
        child = result.child
        if child.stdout:
            console.print(Panel(Text(child.stdout), title="Child STDOUT", border_style="cyan"))
        if child.stderr:
            console.print(Panel(Text(child.stderr), title="Child STDERR", border_style="yellow"))
        console.print(f"gdb exit status: {child.status_code}")


def render_json(result: TriageResult) -> str:
    """Serialize *result* back to its JSON wire shape."""
    return result.model_dump_json(indent=2)
