# speed_scout/crawler/fetcher.py
"""
Fetcher module: page downloads and existence checks with retry/backoff and timeout.
"""
from __future__ import annotations

import asyncio
from typing import Sequence

from aiohttp import ClientError, ClientSession

from speed_scout.config import CrawlConfig
from speed_scout.crawler.models import FetchResult
from speed_scout.errors import FetchError
from speed_scout.logger import logger

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)
# Servers that refuse HEAD get a second chance with GET
HEAD_UNSUPPORTED: Sequence[int] = (405, 501)


class Fetcher:
    """HTML fetch collaborator of the crawler."""

    def __init__(
        self,
        session: ClientSession,
        config: CrawlConfig,
        retry_status: Sequence[int] = RETRY_STATUS,
    ) -> None:
        self.session = session
        self.config = config
        self._retry_status = retry_status

    async def get(self, url: str) -> FetchResult:
        """
        Download *url* and return its status and text body.

        Retryable statuses are retried with exponential backoff; anything
        else (including 4xx) is returned as-is. Raises FetchError when the
        request cannot be completed.
        """
        attempts = 0
        while True:
            try:
                async with self.session.get(url, raise_for_status=False) as resp:
                    if resp.status in self._retry_status:
                        raise ClientError(f"Retryable status {resp.status}")
                    body = await resp.text(errors="replace")
                    return FetchResult(url, resp.status, body)
            except asyncio.TimeoutError as exc:
                # no retry on timeout
                raise FetchError(url, "timed out") from exc
            except ClientError as exc:
                attempts += 1
                if attempts > self.config.retry_times:
                    raise FetchError(url, str(exc) or type(exc).__name__) from exc
                backoff = min(2**attempts, 60)
                logger.debug("Retry %d/%d for %s after %d s", attempts, self.config.retry_times, url, backoff)
                await asyncio.sleep(backoff)

    async def head(self, url: str) -> int:
        """Return the status of *url* without transferring its body."""
        try:
            async with self.session.head(url, allow_redirects=True, raise_for_status=False) as resp:
                status = resp.status
            if status in HEAD_UNSUPPORTED:
                async with self.session.get(url, raise_for_status=False) as resp:
                    status = resp.status
            return status
        except asyncio.TimeoutError as exc:
            raise FetchError(url, "timed out") from exc
        except ClientError as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
