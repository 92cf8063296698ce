# speed_scout/sampler/models.py
"""
Scored categories and the sample record produced by the collector.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

PERFORMANCE = "performance"
ACCESSIBILITY = "accessibility"
BEST_PRACTICES = "best-practices"
PWA = "pwa"
SEO = "seo"

# Rendering order
CATEGORIES: Tuple[str, ...] = (PERFORMANCE, ACCESSIBILITY, BEST_PRACTICES, PWA, SEO)


class CategorySet(Enum):
    """Categories requested on one iteration."""

    FULL = (ACCESSIBILITY, BEST_PRACTICES, PERFORMANCE, PWA, SEO)
    PERFORMANCE_ONLY = (PERFORMANCE,)

    @property
    def categories(self) -> Tuple[str, ...]:
        return self.value


def category_set_for(iteration: int) -> CategorySet:
    """Stable categories are sampled once, performance on every iteration."""
    return CategorySet.FULL if iteration == 0 else CategorySet.PERFORMANCE_ONLY


@dataclass(frozen=True, slots=True)
class MetricSample:
    """One score in [0, 1]; ``score=None`` means the service did not report it."""

    url: str
    category: str
    iteration: int
    score: Optional[float]

    @property
    def available(self) -> bool:
        return self.score is not None


MetricSeries = List[MetricSample]
SeriesByCategory = Dict[str, MetricSeries]

__all__ = [
    "PERFORMANCE",
    "ACCESSIBILITY",
    "BEST_PRACTICES",
    "PWA",
    "SEO",
    "CATEGORIES",
    "CategorySet",
    "category_set_for",
    "MetricSample",
    "MetricSeries",
    "SeriesByCategory",
]
