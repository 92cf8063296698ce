# File: speed_scout/aggregator.py
"""speed_scout.aggregator: Сведение повторных измерений в статистику min / mean / max."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from speed_scout.errors import DataUnavailable
from speed_scout.sampler.models import CATEGORIES, MetricSample, SeriesByCategory

GOOD_THRESHOLD = 90
MEDIUM_THRESHOLD = 60


class Grade(str, Enum):
    """Трёхуровневая оценка для интерактивного вывода."""

    GOOD = "good"
    MEDIUM = "medium"
    POOR = "poor"


def grade(score: int) -> Grade:
    """Классифицирует отображаемую оценку (0-100)."""
    if score >= GOOD_THRESHOLD:
        return Grade.GOOD
    if score >= MEDIUM_THRESHOLD:
        return Grade.MEDIUM
    return Grade.POOR


def to_display(value: float) -> int:
    """Переводит долю 0..1 в целые проценты с округлением половины вверх."""
    return int(Decimal(repr(value * 100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True, slots=True)
class Summary:
    """Статистика одной категории одного URL. Не содержит ничего о представлении."""

    category: str
    samples: int
    minimum: float
    mean: float
    maximum: float

    @property
    def display(self) -> Tuple[int, int, int]:
        return to_display(self.minimum), to_display(self.mean), to_display(self.maximum)


@dataclass(slots=True)
class UrlSummary:
    """Итог по URL: Summary на категорию, ``None`` - значение недоступно."""

    url: str
    summaries: Dict[str, Optional[Summary]] = field(default_factory=dict)
    series: SeriesByCategory = field(default_factory=dict)

    def get(self, category: str) -> Optional[Summary]:
        return self.summaries.get(category)


def summarize(series: Iterable[MetricSample]) -> Summary:
    """Сводит серию одной категории в Summary.

    Пропуски (``score is None``) не участвуют в расчёте. Если значений нет,
    бросает DataUnavailable.
    """
    samples = list(series)
    values = [s.score for s in samples if s.available]
    if not values:
        category = samples[0].category if samples else "unknown"
        raise DataUnavailable(f"No data for category {category!r}")

    low, high = min(values), max(values)
    mean = sum(values) / len(values)
    if not low <= mean <= high:
        # n equal values: the rounded sum divided by n can land one ulp outside
        mean = min(max(mean, low), high)
    return Summary(samples[0].category, len(values), low, mean, high)


def summarize_url(url: str, series_by_category: SeriesByCategory) -> UrlSummary:
    """Собирает Summary по всем категориям URL."""
    result = UrlSummary(url=url, series=series_by_category)
    for name in CATEGORIES:
        try:
            result.summaries[name] = summarize(series_by_category.get(name, []))
        except DataUnavailable:
            result.summaries[name] = None
    return result


__all__ = [
    "Grade",
    "grade",
    "to_display",
    "Summary",
    "UrlSummary",
    "summarize",
    "summarize_url",
]
