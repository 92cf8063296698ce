# === FILE: speed_scout/scanner.py ===
"""
Модуль-обёртка: собирает клиентов и запускает обнаружение или измерения.
"""
from typing import Iterable, Optional, Set

from aiohttp import ClientSession

from speed_scout.config import ScoutConfig
from speed_scout.crawler.crawler import AsyncCrawler
from speed_scout.engine import Engine, ProgressCallback, RunReport
from speed_scout.sampler.client import PageSpeedClient
from speed_scout.sampler.collector import SampleCollector


async def start_discovery(cfg: ScoutConfig, seed: str) -> Set[str]:
    """
    Запускает краулер от seed и возвращает множество живых внутренних URL.

    Parameters
    ----------
    cfg : ScoutConfig
        Конфигурация; используется секция ``crawl``.
    seed : str
        Стартовый URL.
    """
    async with AsyncCrawler(cfg.crawl) as crawler:
        return await crawler.discover(seed)


async def start_run(
    cfg: ScoutConfig,
    urls: Iterable[str],
    run_id: Optional[str] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> RunReport:
    """Измеряет каждый URL ``cfg.count`` раз и возвращает RunReport (возможно частичный)."""
    async with ClientSession() as session:
        client = PageSpeedClient(
            session,
            api_key=cfg.api_key,
            api_url=cfg.api_url,
            timeout=cfg.request_timeout,
        )
        collector = SampleCollector(client, cfg.retry, cfg.strategy)
        engine = Engine(collector, cfg.count, run_timeout=cfg.run_timeout, on_progress=on_progress)
        return await engine.run(urls, run_id=run_id)


__all__ = ["start_discovery", "start_run"]
