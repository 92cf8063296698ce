# File: tests/conftest.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

import pytest

from speed_scout.config import CrawlConfig, RetryPolicy
from speed_scout.errors import ScoringServiceError


def psi_payload(**scores: Optional[float]) -> Dict[str, Any]:
    """
    Build a minimal runPagespeed response.
    Keyword names use underscores: best_practices -> "best-practices".
    """
    categories = {
        name.replace("_", "-"): {"score": score} for name, score in scores.items()
    }
    return {"lighthouseResult": {"categories": categories}}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


# A scripted step is (duration_seconds, payload_or_exception)
Step = tuple[float, Union[Dict[str, Any], Exception]]


class FakeScoringClient:
    """
    Scoring client replaying scripted responses.
    Each call advances the fake clock by the step's duration.
    """

    def __init__(self, clock: FakeClock, steps: Sequence[Step]) -> None:
        self.clock = clock
        self.steps: List[Step] = list(steps)
        self.calls: List[tuple[str, str, tuple[str, ...]]] = []

    async def run(self, url: str, strategy: str, categories: Sequence[str]) -> Dict[str, Any]:
        self.calls.append((url, strategy, tuple(categories)))
        duration, result = self.steps.pop(0)
        self.clock.now += duration
        if isinstance(result, Exception):
            raise result
        return result


class RecordingSleep:
    """Replacement for asyncio.sleep that only records requested delays."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def policy() -> RetryPolicy:
    """Return a bounded retry policy with the default thresholds."""
    return RetryPolicy(max_attempts=3, backoff=10.0, min_duration=5.0)


@pytest.fixture()
def crawl_config() -> CrawlConfig:
    """
    Return a basic valid CrawlConfig for crawler tests.
    """
    return CrawlConfig(
        max_pages=50,
        max_depth=3,
        concurrency=10,
        timeout=2.0,
        user_agent="TestAgent/1.0",
        retry_times=0,
    )


@pytest.fixture()
def service_error() -> ScoringServiceError:
    return ScoringServiceError("HTTP 500 for test", status=500)
