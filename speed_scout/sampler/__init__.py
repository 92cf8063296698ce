"""speed_scout.sampler: repeated scoring requests for a single URL."""

from speed_scout.sampler.client import PageSpeedClient
from speed_scout.sampler.collector import SampleCollector
from speed_scout.sampler.models import CATEGORIES, CategorySet, MetricSample, category_set_for

__all__ = [
    "PageSpeedClient",
    "SampleCollector",
    "CATEGORIES",
    "CategorySet",
    "MetricSample",
    "category_set_for",
]
