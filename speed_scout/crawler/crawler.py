# === FILE: speed_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Deque, Dict, Iterable, Optional, Set, Tuple

from aiohttp import ClientSession, ClientTimeout

from speed_scout.config import CrawlConfig
from speed_scout.crawler.fetcher import Fetcher
from speed_scout.crawler.link_extractor import extract_links
from speed_scout.errors import FetchError
from speed_scout.logger import LOGGER_NAME
from speed_scout.utils import normalize_url

__all__ = ("AsyncCrawler",)


class AsyncCrawler:
    """Breadth-first link discovery followed by a bounded-concurrency liveness sweep."""

    def __init__(self, config: CrawlConfig, fetcher: Optional[Fetcher] = None) -> None:
        self.config = config
        self.fetcher = fetcher
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger(LOGGER_NAME)

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def discover(self, seed: str) -> Set[str]:
        """Return every reachable internal URL found from *seed*, dead ones pruned."""
        start = time.monotonic()
        visited = await self.walk(seed)
        liveness = await self.check_liveness(visited)
        dead = {url for url, alive in liveness.items() if not alive}
        discovered = visited - dead
        self.logger.info(
            "Discovery finished: %d URL(s), %d pruned, %.2f s",
            len(discovered), len(dead), time.monotonic() - start,
        )
        return discovered

    async def walk(self, seed: str) -> Set[str]:
        """Run the BFS over the frontier and return the visited set (seed included)."""
        fetcher = self._require_fetcher()
        root = normalize_url(seed)
        frontier: Deque[Tuple[str, int]] = deque([(root, 0)])
        visited: Set[str] = {root}
        expanded: Set[str] = set()

        self.logger.info("Старт обхода: %s", root)
        while frontier:
            url, depth = frontier.popleft()
            if url in expanded:
                continue
            if len(expanded) >= self.config.max_pages:
                self.logger.info("Page limit %d reached, %d URL(s) left unexpanded", self.config.max_pages, len(frontier) + 1)
                break
            expanded.add(url)

            try:
                page = await fetcher.get(url)
            except FetchError as exc:
                self.logger.warning("Skipping links of %s: %s", url, exc.reason)
                continue

            if page.ok:
                for link in extract_links(page.body, url, root):
                    if link in visited:
                        continue
                    visited.add(link)
                    if depth + 1 <= self.config.max_depth:
                        frontier.append((link, depth + 1))
            else:
                self.logger.debug("No links followed from %s (HTTP %d)", url, page.status)

            if self.config.single_page:
                break

        self.logger.info("Visited %d URL(s), expanded %d", len(visited), len(expanded))
        return visited

    async def check_liveness(self, urls: Iterable[str]) -> Dict[str, bool]:
        """HEAD every URL with at most ``config.concurrency`` checks in flight."""
        queue: asyncio.Queue[str] = asyncio.Queue()
        for url in urls:
            queue.put_nowait(url)
        results: Dict[str, bool] = {}
        workers = [
            asyncio.create_task(self._liveness_worker(queue, results))
            for _ in range(min(self.config.concurrency, max(queue.qsize(), 1)))
        ]
        try:
            await queue.join()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
        return results

    async def _liveness_worker(self, queue: asyncio.Queue[str], results: Dict[str, bool]) -> None:
        fetcher = self._require_fetcher()
        while True:
            url = await queue.get()
            try:
                status = await fetcher.head(url)
                results[url] = 200 <= status < 400
                if not results[url]:
                    self.logger.info("Pruned %s (HTTP %d)", url, status)
            except FetchError as exc:
                results[url] = False
                self.logger.info("Pruned %s (%s)", url, exc.reason)
            finally:
                queue.task_done()

    def _require_fetcher(self) -> Fetcher:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        return self.fetcher
