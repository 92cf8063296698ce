# File: speed_scout/report/__init__.py
"""speed_scout.report: Вывод итогов в консоль и в текстовый лог, используемые CLI и тестами."""

from speed_scout.report.log_report import append_log, render_log_block
from speed_scout.report.text_report import (
    PLACEHOLDER,
    format_outcome,
    format_summary,
    render_console,
)

__all__ = [
    "PLACEHOLDER",
    "append_log",
    "format_outcome",
    "format_summary",
    "render_console",
    "render_log_block",
]
