# speed_scout/sampler/client.py
"""
Thin async client for the PageSpeed Insights v5 ``runPagespeed`` endpoint.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Sequence, Tuple

from aiohttp import ClientError, ClientSession, ClientTimeout, ContentTypeError

from speed_scout.config import PAGESPEED_API_URL
from speed_scout.errors import ScoringServiceError
from speed_scout.logger import logger


def api_category(name: str) -> str:
    """``best-practices`` -> ``BEST_PRACTICES`` (API enum spelling)."""
    return name.upper().replace("-", "_")


def category_score(payload: Any, category: str) -> Optional[float]:
    """Read ``lighthouseResult.categories.<category>.score``.

    Returns None when any level is missing or has an unexpected type.
    """
    node = payload
    for key in ("lighthouseResult", "categories", category):
        node = node.get(key) if isinstance(node, dict) else None
    score = node.get("score") if isinstance(node, dict) else None
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return None
    return float(score)


class PageSpeedClient:
    """Scoring service collaborator. One call = one Lighthouse run."""

    def __init__(
        self,
        session: ClientSession,
        api_key: Optional[str] = None,
        api_url: str = PAGESPEED_API_URL,
        timeout: float = 120.0,
    ) -> None:
        self.session = session
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = ClientTimeout(total=timeout)

    async def run(self, url: str, strategy: str, categories: Sequence[str]) -> Dict[str, Any]:
        """Run one measurement. Raises ScoringServiceError on any failure."""
        # repeated "category" params need a list of pairs
        params: List[Tuple[str, str]] = [("url", url), ("strategy", strategy.upper())]
        params.extend(("category", api_category(c)) for c in categories)
        if self.api_key:
            params.append(("key", self.api_key))

        logger.debug("runPagespeed %s (%s) %s", url, strategy, ",".join(categories))
        try:
            async with self.session.get(self.api_url, params=params, timeout=self.timeout) as resp:
                if resp.status != 200:
                    detail = (await resp.text(errors="replace"))[:200]
                    raise ScoringServiceError(
                        f"HTTP {resp.status} for {url} ({strategy}): {detail}", status=resp.status
                    )
                payload = await resp.json()
        except asyncio.TimeoutError as exc:
            raise ScoringServiceError(f"Timed out measuring {url} ({strategy})") from exc
        except (ContentTypeError, ValueError) as exc:
            raise ScoringServiceError(f"Undecodable response for {url}: {exc}") from exc
        except ClientError as exc:
            raise ScoringServiceError(f"Request failed for {url}: {exc}") from exc

        if not isinstance(payload, dict):
            raise ScoringServiceError(f"Unexpected payload for {url}: {type(payload).__name__}")
        return payload
