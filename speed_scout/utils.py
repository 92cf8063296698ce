# File: speed_scout/utils.py
"""speed_scout.utils: Утилитарные функции для обработки URL и форматирования времени."""

from __future__ import annotations

from typing import Collection, List, Sequence
from urllib.parse import urlparse, urlunparse

from speed_scout.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "origin_of",
    "same_origin",
    "format_time",
    "remove_duplicates",
)

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """Нормализует URL: регистр схемы и хоста, без фрагмента и порта по умолчанию.

    Завершающий слеш убирается у всех путей, кроме корневого ``/``.
    """
    parsed = urlparse(url.strip())
    scheme = parsed.scheme.lower()
    host = (parsed.hostname or "").lower()
    port = parsed.port
    netloc = host if port is None or _DEFAULT_PORTS.get(scheme) == port else f"{host}:{port}"

    path = parsed.path.rstrip("/") or "/"
    normalized = urlunparse((scheme, netloc, path, parsed.params, parsed.query, ""))
    logger.debug("Normalized URL: %s -> %s", url, normalized)
    return normalized


def origin_of(url: str) -> str:
    """Возвращает ``scheme://host[:port]`` нормализованного URL."""
    parsed = urlparse(normalize_url(url))
    return f"{parsed.scheme}://{parsed.netloc}"


def same_origin(url: str, other: str) -> bool:
    """Проверяет совпадение схемы, хоста и порта двух URL."""
    return origin_of(url) == origin_of(other)


def format_time(seconds: float) -> str:
    """Форматирует длительность как ``HH:MM:SS``."""
    total = int(seconds)
    return f"{total // 3600:02d}:{total // 60 % 60:02d}:{total % 60:02d}"


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
