import threading
import time
from dataclasses import dataclass
from typing import Callable, Sequence

import structlog

from wishrift.core.config import AffiliateSettings
from wishrift.marketplaces.base import MarketplaceAdapter, ScrapedProduct
from wishrift.marketplaces.demo import DemoMarketplace, normalize_query

logger = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 3600


@dataclass
class _CacheEntry:
    results: list[ScrapedProduct]
    stored_at: float


class ProductSearchService:
    """
    Price-comparison search across the configured marketplaces.

    Results are cached per normalized query for `ttl_seconds`. A hit returns
    the earlier result as is, stale prices included. Expired entries are only
    replaced when the same query is searched again.
    """

    def __init__(
        self,
        affiliate: AffiliateSettings,
        sources: Sequence[MarketplaceAdapter] | None = None,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.affiliate = affiliate
        self.sources = list(sources) if sources is not None else [
            DemoMarketplace(affiliate_tag=affiliate.affiliate_tag)
        ]
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._cache: dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()

    def search(self, query: str) -> list[ScrapedProduct]:
        key = normalize_query(query or "")
        if not key:
            return []

        now = self.clock()
        with self._lock:
            entry = self._cache.get(key)
        if entry and now - entry.stored_at < self.ttl_seconds:
            logger.debug("search.cache_hit", query=key)
            return list(entry.results)

        logger.info("search.started", query=key, sources=len(self.sources))
        try:
            results = self._search_sources(query)
        except Exception as e:
            # search is best effort; a failing source never breaks the page
            logger.warning("search.failed", query=key, error=str(e))
            return []

        with self._lock:
            self._cache[key] = _CacheEntry(results=results, stored_at=now)
        return list(results)

    def _search_sources(self, query: str) -> list[ScrapedProduct]:
        results: list[ScrapedProduct] = []
        for source in self.sources:
            results.extend(source.search(query))
        results.sort(key=lambda r: r.price)
        return results

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
