"""speed_scout.crawler: link discovery and liveness checks."""

from speed_scout.crawler.crawler import AsyncCrawler
from speed_scout.crawler.link_extractor import extract_links

__all__ = ["AsyncCrawler", "extract_links"]
