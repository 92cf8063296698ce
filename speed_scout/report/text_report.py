# File: speed_scout/report/text_report.py
"""speed_scout.report.text_report: Текстовое представление итогов измерений."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

import click

from speed_scout.aggregator import Grade, Summary, UrlSummary, grade, to_display
from speed_scout.engine import RunReport, UrlOutcome
from speed_scout.sampler.models import ACCESSIBILITY, BEST_PRACTICES, CATEGORIES, PERFORMANCE, PWA, SEO
from speed_scout.utils import format_time

PLACEHOLDER = "--"
LABEL_WIDTH = 16

LABELS: Dict[str, str] = {
    PERFORMANCE: "Performance:",
    ACCESSIBILITY: "Accessibility:",
    BEST_PRACTICES: "Best Practices:",
    PWA: "PWA:",
    SEO: "SEO:",
}

_GRADE_COLORS: Dict[Grade, str] = {
    Grade.GOOD: "green",
    Grade.MEDIUM: "yellow",
    Grade.POOR: "red",
}


def _score(value: Optional[int], width: int, colored: bool) -> str:
    text = (PLACEHOLDER if value is None else str(value)).rjust(width)
    if colored and value is not None:
        return click.style(text, fg=_GRADE_COLORS[grade(value)])
    return text


def _label(category: str, colored: bool) -> str:
    text = LABELS[category]
    padding = " " * (LABEL_WIDTH - len(text))
    return (click.style(text, fg="blue") if colored else text) + padding


def _values(summary: Optional[Summary], category: str) -> List[Optional[int]]:
    if summary is None:
        return [None, None, None] if category == PERFORMANCE else [None]
    low, mean, high = summary.display
    if category == PERFORMANCE:
        return [low, mean, high]
    return [mean]


def _debug_lines(result: UrlSummary, colored: bool) -> List[str]:
    header = click.style("    DEBUG:", fg="green") if colored else "    DEBUG:"
    lines = [header]
    for category in CATEGORIES:
        scores = [
            str(to_display(s.score)) if s.available else PLACEHOLDER
            for s in result.series.get(category, [])
        ]
        lines.append(f"{_label(category, colored)}{', '.join(scores) or PLACEHOLDER}")
    rule = "-" * 100
    lines.append((click.style(rule, fg="green") if colored else rule) + "\n")
    return lines


def format_summary(result: UrlSummary, *, colored: bool = False, debug: bool = False) -> str:
    """
    Форматирует сводку одного URL.

    Performance выводится как ``min mean max``, остальные категории - одним
    значением. Недоступные значения выводятся как ``--``, а не ``0``.
    """
    lines: List[str] = _debug_lines(result, colored) if debug else []
    for category in CATEGORIES:
        values = _values(result.get(category), category)
        # first column unpadded, the others right-aligned to 3
        cells = [_score(values[0], 0, colored)] + [_score(v, 3, colored) for v in values[1:]]
        lines.append(f"{_label(category, colored)}{' '.join(cells)}")
    return "\n".join(lines) + "\n"


def format_outcome(outcome: UrlOutcome, *, colored: bool = False, debug: bool = False) -> str:
    """Блок одного URL для консоли и лога: заголовок и сводка либо причина сбоя."""
    style: Callable[[str], str] = (lambda s: click.style(s, fg="blue")) if colored else (lambda s: s)
    head = f"URL: {style(outcome.url)}\n"
    if outcome.summary is None:
        failure = f"Collection failed: {outcome.error or 'unknown error'}"
        return head + (click.style(failure, fg="red") if colored else failure) + "\n"
    return head + format_summary(outcome.summary, colored=colored, debug=debug)


def render_console(report: RunReport, *, colored: bool = True, debug: bool = False) -> str:
    """Полный отчёт для интерактивного режима."""
    parts = [""]
    for outcome in report.outcomes.values():
        parts.append(format_outcome(outcome, colored=colored, debug=debug))
    if report.interrupted:
        parts.append("Run interrupted: remaining URLs were not measured")
    parts.append(f"Total duration: {format_time(report.stats.total_seconds)}\n")
    return "\n".join(parts)
