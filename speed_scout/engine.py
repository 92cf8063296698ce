# File: speed_scout/engine.py
"""speed_scout.engine: Orchestration layer для последовательного измерения списка URL."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional

from speed_scout.aggregator import UrlSummary, summarize_url
from speed_scout.errors import CollectionFailure
from speed_scout.logger import logger
from speed_scout.sampler.collector import SampleCollector

__all__ = ["Engine", "ProgressTimer", "RunStats", "UrlOutcome", "RunReport", "Progress"]


@dataclass(slots=True)
class Progress:
    """Снимок состояния для индикатора прогресса."""

    url: str
    iteration: int
    count: int
    seconds: int


ProgressCallback = Callable[[Progress], None]


class ProgressTimer:
    """Счётчик секунд, пока идёт сбор измерений. Тикает раз в секунду.

    Используется как ``async with``; ``on_tick`` вызывается на каждом тике и
    служит только для отображения.
    """

    def __init__(self, on_tick: Optional[Callable[[int], None]] = None, interval: float = 1.0) -> None:
        self.seconds = 0
        self._on_tick = on_tick
        self._interval = interval
        self._task: Optional[asyncio.Task[None]] = None

    async def __aenter__(self) -> ProgressTimer:
        self._task = asyncio.create_task(self._tick())
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.seconds += 1
            if self._on_tick is not None:
                self._on_tick(self.seconds)


@dataclass(slots=True)
class RunStats:
    """Накопитель общей длительности измерений по всем URL."""

    total_seconds: int = 0

    def add(self, seconds: int) -> None:
        self.total_seconds += seconds


@dataclass(slots=True)
class UrlOutcome:
    """Результат обработки одного URL: сводка или причина сбоя."""

    url: str
    seconds: int = 0
    summary: Optional[UrlSummary] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.summary is not None


@dataclass(slots=True)
class RunReport:
    """Итоги запуска: по одному UrlOutcome на URL плюс общая статистика."""

    run_id: Optional[str] = None
    outcomes: Dict[str, UrlOutcome] = field(default_factory=dict)
    stats: RunStats = field(default_factory=RunStats)
    interrupted: bool = False

    def merge(self, outcome: UrlOutcome) -> None:
        self.outcomes[outcome.url] = outcome
        self.stats.add(outcome.seconds)


class Engine:
    """Фасад для CLI и тестов: прогоняет SampleCollector и Aggregator по каждому URL."""

    def __init__(
        self,
        collector: SampleCollector,
        count: int,
        *,
        run_timeout: Optional[float] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        """Инициализирует Engine с коллектором, числом итераций и таймаутом запуска."""
        self.collector = collector
        self.count = count
        self.run_timeout = run_timeout
        self.on_progress = on_progress

    async def process_url(self, url: str) -> UrlOutcome:
        """Собирает и сводит измерения одного URL. Сбой сбора не пробрасывается."""
        logger.info("Measuring %s (%d run(s))", url, self.count)
        state = Progress(url=url, iteration=0, count=self.count, seconds=0)

        def _on_iteration(iteration: int, count: int) -> None:
            state.iteration = iteration
            self._report(state)

        def _on_tick(seconds: int) -> None:
            state.seconds = seconds
            self._report(state)

        outcome = UrlOutcome(url=url)
        timer = ProgressTimer(on_tick=_on_tick)
        try:
            async with timer:
                series = await self.collector.collect_all(url, self.count, on_iteration=_on_iteration)
        except CollectionFailure as exc:
            logger.error("Collection failed for %s: %s", url, exc)
            outcome.error = str(exc)
        else:
            outcome.summary = summarize_url(url, series)
            logger.info("Test finished for %s in %d s", url, timer.seconds)
        finally:
            outcome.seconds = timer.seconds
        return outcome

    async def run(self, urls: Iterable[str], run_id: Optional[str] = None) -> RunReport:
        """Обрабатывает URL строго по очереди и возвращает отчёт, даже частичный."""
        report = RunReport(run_id=run_id)
        deadline = None if self.run_timeout is None else time.monotonic() + self.run_timeout

        for url in urls:
            if deadline is None:
                report.merge(await self.process_url(url))
                continue

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                report.interrupted = True
                logger.error("Run timeout reached before %s", url)
                break
            started = time.monotonic()
            try:
                outcome = await asyncio.wait_for(self.process_url(url), timeout=remaining)
            except asyncio.TimeoutError:
                logger.error("Run timeout of %s s reached while measuring %s", self.run_timeout, url)
                report.merge(
                    UrlOutcome(
                        url=url,
                        seconds=int(time.monotonic() - started),
                        error=f"run timeout of {self.run_timeout:g} s reached",
                    )
                )
                report.interrupted = True
                break
            report.merge(outcome)

        return report

    def _report(self, state: Progress) -> None:
        if self.on_progress is not None:
            self.on_progress(state)
