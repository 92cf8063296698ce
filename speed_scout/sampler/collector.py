# speed_scout/sampler/collector.py
"""
Repeated measurement of one URL against the scoring service.

Each iteration is retried until the service returns a response that took at
least ``RetryPolicy.min_duration`` seconds: faster answers are usually cached
or incomplete runs and are discarded. Requests that fail outright are retried
the same way. Both kinds of retry wait ``RetryPolicy.backoff`` seconds and
count against ``RetryPolicy.max_attempts``.
"""
from __future__ import annotations

import asyncio
import itertools
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Sequence

from speed_scout.config import RetryPolicy
from speed_scout.errors import CollectionFailure, RetriesExhausted, ScoringServiceError
from speed_scout.logger import logger
from speed_scout.sampler.client import category_score
from speed_scout.sampler.models import (
    CATEGORIES,
    MetricSample,
    SeriesByCategory,
    category_set_for,
)


class ScoringClient(Protocol):
    async def run(self, url: str, strategy: str, categories: Sequence[str]) -> Dict[str, Any]: ...


IterationCallback = Callable[[int, int], None]


class SampleCollector:
    """Collects validated samples for one URL at a time; keeps no per-URL state."""

    def __init__(
        self,
        client: ScoringClient,
        policy: RetryPolicy,
        strategy: str = "mobile",
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.policy = policy
        self.strategy = strategy
        self._clock = clock
        self._sleep = sleep

    async def collect(
        self, url: str, iteration: int, categories: Optional[Sequence[str]] = None
    ) -> List[MetricSample]:
        """Run one iteration and return one sample per requested category.

        Raises RetriesExhausted when the policy runs out of attempts and
        CollectionFailure when the service answers with a malformed payload.
        """
        requested = tuple(categories) if categories is not None else category_set_for(iteration).categories
        attempts = itertools.count(1) if self.policy.max_attempts is None else range(1, self.policy.max_attempts + 1)

        attempt = 0
        last_error = "no attempt made"
        for attempt in attempts:
            started = self._clock()
            try:
                payload = await self.client.run(url, self.strategy, requested)
            except ScoringServiceError as exc:
                last_error = str(exc)
                logger.warning("Attempt %d for %s [%d] failed: %s", attempt, url, iteration, exc)
            else:
                elapsed = self._clock() - started
                if elapsed >= self.policy.min_duration:
                    if not isinstance(payload, dict) or not isinstance(payload.get("lighthouseResult"), dict):
                        raise CollectionFailure(
                            url, f"{url}: iteration {iteration} returned a malformed response (no lighthouseResult)"
                        )
                    if attempt > 1:
                        logger.info("%s [%d] validated on attempt %d", url, iteration, attempt)
                    return [
                        MetricSample(url, name, iteration, category_score(payload, name))
                        for name in requested
                    ]
                last_error = f"response in {elapsed:.2f} s, below {self.policy.min_duration:.2f} s"
                logger.info("Discarding suspect result for %s [%d]: %s", url, iteration, last_error)

            if self.policy.max_attempts is None or attempt < self.policy.max_attempts:
                await self._sleep(self.policy.backoff)

        raise RetriesExhausted(url, iteration, attempt, last_error)

    async def collect_all(
        self, url: str, count: int, on_iteration: Optional[IterationCallback] = None
    ) -> SeriesByCategory:
        """Run iterations ``0..count-1`` one after another and group samples by category."""
        series: SeriesByCategory = {name: [] for name in CATEGORIES}
        for iteration in range(count):
            if on_iteration is not None:
                on_iteration(iteration, count)
            for sample in await self.collect(url, iteration):
                series.setdefault(sample.category, []).append(sample)
        return series
