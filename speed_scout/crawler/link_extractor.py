# speed_scout/crawler/link_extractor.py
"""
Anchor-tag link extraction for the discovery crawler.
"""
from __future__ import annotations

import re
from typing import Iterator
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from speed_scout.logger import logger
from speed_scout.utils import normalize_url, origin_of, same_origin

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_WORD_RE = re.compile(r"^\w")


def _resolve(href: str, page_url: str, seed_url: str) -> str | None:
    if not href or href.startswith("#") or href == "/":
        return None
    if _SCHEME_RE.match(href) or href.startswith("//"):
        return None
    if href.startswith("/"):
        return origin_of(seed_url) + href
    if _WORD_RE.match(href):
        return page_url.rstrip("/") + "/" + href

    # "./x", "../x", "?q=1" and the like
    candidate = urljoin(page_url, href)
    if not same_origin(candidate, seed_url):
        logger.debug("Dropping off-origin link %r on %s", href, page_url)
        return None
    logger.debug("Resolved irregular link %r on %s -> %s", href, page_url, candidate)
    return candidate


def extract_links(html: str, page_url: str, seed_url: str) -> Iterator[str]:
    """
    Yield normalized internal links found in ``<a href>`` tags of *html*.

    Only relative links are followed: hrefs carrying a scheme (``http:``,
    ``mailto:`` ...), fragment-only hrefs and the bare root path are skipped.
    Results are not deduplicated.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        resolved = _resolve(href_val.strip(), page_url, seed_url)
        if resolved is None:
            continue
        link = normalize_url(resolved)
        if link.rstrip("/") == origin_of(seed_url):
            continue
        yield link
