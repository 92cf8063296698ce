# File: speed_scout/errors.py
"""speed_scout.errors: exception hierarchy shared by the crawler and the sampler."""

from __future__ import annotations

from typing import Optional


class ScoutError(Exception):
    """Base class for every error raised by SpeedScout."""


class ScoringServiceError(ScoutError):
    """A scoring request failed (network error, non-200 answer, bad payload).

    Transient: the sample collector retries it according to its retry policy.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message)


class CollectionFailure(ScoutError):
    """Samples for one URL could not be collected. The run moves on."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


class RetriesExhausted(CollectionFailure):
    """Raised when every attempt allowed by the retry policy was rejected.

    Attributes:
        url: The measured URL.
        iteration: Iteration index that could not be completed.
        attempts: Number of attempts made.
        last_error: Reason the final attempt was rejected.
    """

    def __init__(self, url: str, iteration: int, attempts: int, last_error: str) -> None:
        self.iteration = iteration
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            url,
            f"{url}: iteration {iteration} failed after {attempts} attempt(s). "
            f"Last error: {last_error}",
        )


class FetchError(ScoutError):
    """A crawler page fetch or existence check failed."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{url}: {reason}")


class DataUnavailable(ScoutError, ValueError):
    """No usable score exists for a category (empty series or only nulls)."""


__all__ = [
    "ScoutError",
    "ScoringServiceError",
    "CollectionFailure",
    "RetriesExhausted",
    "FetchError",
    "DataUnavailable",
]
