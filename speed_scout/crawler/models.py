# speed_scout/crawler/models.py
"""
Data models for the SpeedScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class FetchResult:
    """Status and decoded body of a fetched page."""

    url: str
    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 400
