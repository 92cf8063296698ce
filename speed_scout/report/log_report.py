# File: speed_scout/report/log_report.py
"""speed_scout.report.log_report: Дописывание итогов запуска в текстовый лог с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from jinja2 import Environment, PackageLoader, select_autoescape

from speed_scout.engine import RunReport
from speed_scout.logger import logger
from speed_scout.report.text_report import format_outcome
from speed_scout.utils import format_time

TEMPLATE_NAME = "run_log.txt.j2"

_env = Environment(
    loader=PackageLoader("speed_scout", "templates"),
    autoescape=select_autoescape(["html", "xml"]),
    keep_trailing_newline=True,
)


def render_log_block(report: RunReport) -> str:
    """Рендерит блок одного запуска: хеш коммита, сводки по URL и общая длительность.

    Сырые измерения (``--debug``) в лог не попадают, только в консоль.
    """
    template = _env.get_template(TEMPLATE_NAME)
    return template.render(
        run_id=report.run_id,
        blocks=[format_outcome(o, colored=False) for o in report.outcomes.values()],
        interrupted=report.interrupted,
        total_duration=format_time(report.stats.total_seconds),
    )


def append_log(report: RunReport, path: Union[str, Path]) -> Path:
    """Дописывает блок запуска в конец файла. Существующее содержимое не перезаписывается.

    Args:
        report: итоги запуска.
        path: путь к логу (например ``psi.txt``).

    Returns:
        Path до файла лога.
    """
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)

    separator = ""
    if output.is_file():
        existing = output.read_text(encoding="utf-8")
        if existing:
            separator = "\n" if existing.endswith("\n") else "\n\n"

    with output.open("a", encoding="utf-8") as f:
        f.write(separator + render_log_block(report))

    logger.info("Appended %d result(s) to %s", len(report.outcomes), output)
    return output
