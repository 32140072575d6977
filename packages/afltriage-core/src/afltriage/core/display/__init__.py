from __future__ import annotations

from afltriage.core.display.report import format_frame, render_json, render_report

__all__ = ["format_frame", "render_json", "render_report"]
