# === FILE: speed_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа SpeedScout через командную строку.

Использование:
  speed-scout <urls> [-c COUNT] [-d DEVICE]     Измерить каждый URL COUNT раз
  speed-scout index <seed>                      Найти живые внутренние ссылки сайта

Опции:
  -c, --count INT       Число измерений на URL (default: 5)
  -d, --device DEVICE   mobile или desktop (default: mobile)
  --hash TEXT           Идентификатор запуска (хеш коммита) для лога
  --ci / --no-ci        Дописать итоги в лог вместо вывода в консоль
                        (по умолчанию: включено, если задана переменная CI)
  --output PATH         Файл лога (default: psi.txt)
  --debug               Печатать все измерения (переменная DEBUG=1)
  --api-key TEXT        Ключ PageSpeed Insights API (переменная PSI_API_KEY)
  --config PATH         YAML/JSON конфиг
  --run-timeout SEC     Таймаут всего запуска
  --log-level LEVEL     Уровень логирования
  --log-file PATH       Файл для логов (stderr, если не указан)
  --version, -v         Показать версию SpeedScout

Примеры:
  speed-scout https://example.com/ https://example.org/ -c 10 -d desktop
  speed-scout index https://example.com/
"""
import asyncio
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from speed_scout import __version__
from speed_scout.config import ScoutConfig, load_config
from speed_scout.engine import Progress
from speed_scout.logger import init_logging
from speed_scout.report import append_log, render_console
from speed_scout.scanner import start_discovery, start_run
from speed_scout.utils import format_time, normalize_url, remove_duplicates

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
DISCOVERY_COMMAND = "index"


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def detect_ci() -> bool:
    """True, если процесс запущен в CI (переменная окружения CI)."""
    return os.environ.get("CI", "").strip().lower() not in ("", "0", "false", "no")


class ProgressPrinter:
    """Однострочный индикатор прогресса в stderr для интерактивного режима."""

    def __init__(self) -> None:
        self._current: Optional[str] = None

    def __call__(self, state: Progress) -> None:
        if state.url != self._current:
            if self._current is not None:
                click.echo(err=True)
            self._current = state.url
            click.echo(state.url, err=True)
        duration = click.style(format_time(state.seconds), fg="blue")
        click.echo(f"\r[{state.iteration + 1}/{state.count}] Test duration: {duration}", nl=False, err=True)

    def finish(self) -> None:
        if self._current is not None:
            click.echo(err=True)


def _load(config_path: Optional[Path], overrides: Dict[str, Any]) -> ScoutConfig:
    try:
        cfg = load_config(config_path)
        update = {k: v for k, v in overrides.items() if v is not None}
        # re-validate the overridden values
        return ScoutConfig(**{**cfg.model_dump(), **update}) if update else cfg
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SpeedScout, version %(version)s')
@click.argument('urls', nargs=-1)
@click.option('--count', '-c', 'count', type=int, default=None, help='Число измерений на URL [5]')
@click.option(
    '--device', '-d', 'device',
    type=click.Choice(['mobile', 'desktop'], case_sensitive=False),
    default=None,
    help='Тип устройства [mobile]'
)
@click.option('--hash', 'run_id', default=None, help='Идентификатор запуска (хеш коммита)')
@click.option('--ci/--no-ci', 'ci', default=None, help='Дописать итоги в лог вместо консоли')
@click.option(
    '--output', '-o', 'output',
    default='psi.txt', show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Файл лога для режима CI'
)
@click.option('--debug', is_flag=True, envvar='DEBUG', help='Печатать все измерения')
@click.option('--api-key', 'api_key', envvar='PSI_API_KEY', default=None, help='Ключ PageSpeed Insights API')
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option('--run-timeout', 'run_timeout', type=float, default=None, help='Таймаут всего запуска (секунд)')
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.pass_context
def cli(
    ctx,
    urls: Tuple[str, ...],
    count,
    device,
    run_id,
    ci,
    output,
    debug,
    api_key,
    config_path,
    run_timeout,
    log_level,
    log_file,
):
    """Многократно измеряет PageSpeed-оценки URL и сводит их в min / mean / max."""
    if not urls:
        click.echo(ctx.get_help())
        ctx.exit(0)

    init_logging(level=log_level, log_file=str(log_file) if log_file else None)
    cfg = _load(
        config_path,
        {
            "count": count,
            "strategy": device.lower() if device else None,
            "api_key": api_key,
            "run_timeout": run_timeout,
        },
    )

    if urls[0] == DISCOVERY_COMMAND:
        if len(urls) != 2:
            print_error(f'Использование: speed-scout {DISCOVERY_COMMAND} <seed-url>')
        try:
            discovered = asyncio.run(start_discovery(cfg, urls[1]))
        except Exception as e:
            print_error(f'Ошибка при обходе: {e}')
        for url in sorted(discovered):
            click.echo(url)
        ctx.exit(0)

    targets = remove_duplicates([normalize_url(u) for u in urls])
    is_ci = detect_ci() if ci is None else ci
    progress = None if is_ci else ProgressPrinter()

    try:
        report = asyncio.run(start_run(cfg, targets, run_id=run_id, on_progress=progress))
    except Exception as e:
        print_error(f'Ошибка при измерении: {e}')
    finally:
        if progress is not None:
            progress.finish()

    if is_ci:
        try:
            saved = append_log(report, output)
        except OSError as e:
            print_error(f'Ошибка при сохранении лога: {e}')
        click.echo(f'Results appended to: {saved}')
    else:
        click.echo(render_console(report, colored=True, debug=debug))

    failed = [o.url for o in report.outcomes.values() if not o.ok]
    ctx.exit(1 if failed or report.interrupted else 0)


if __name__ == "__main__":
    cli()
