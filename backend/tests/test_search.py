import random

import pytest

from wishrift.core.config import AffiliateSettings
from wishrift.marketplaces.base import MarketplaceAdapter
from wishrift.marketplaces.demo import (
    GENERIC_PRICE_MAX,
    GENERIC_PRICE_MIN,
    STORE_NAMES,
    DemoMarketplace,
    match_product,
)
from wishrift.services.search import ProductSearchService


class FakeTime:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class CountingSource(MarketplaceAdapter):
    def __init__(self, inner):
        self.inner = inner
        self.calls = 0

    def search(self, query):
        self.calls += 1
        return self.inner.search(query)


class BrokenSource(MarketplaceAdapter):
    def search(self, query):
        raise ConnectionError("affiliate network unreachable")


def _service(source, clock=None, ttl=3600):
    kwargs = {"clock": clock} if clock else {}
    return ProductSearchService(
        AffiliateSettings(), sources=[source], ttl_seconds=ttl, **kwargs
    )


class TestDemoMarketplace:
    @pytest.mark.parametrize("seed", range(5))
    def test_sorted_by_price_and_from_roster(self, seed):
        results = DemoMarketplace(random.Random(seed)).search("gaming chair")

        prices = [r.price for r in results]
        assert prices == sorted(prices)
        assert sorted(r.store for r in results) == sorted(STORE_NAMES)
        assert all(isinstance(p, int) and p >= 1 for p in prices)

    def test_playstation_uses_ps5_template(self):
        results = DemoMarketplace(random.Random(1)).search("PlayStation 5")

        assert {r.name for r in results} == {"PlayStation 5 Console"}
        assert all(44999 <= r.price <= 54999 for r in results)
        assert [r.price for r in results] == sorted(r.price for r in results)

    def test_generic_query_price_band(self):
        results = DemoMarketplace(random.Random(3)).search("Desk Lamp")

        assert {r.name for r in results} == {"Desk Lamp"}
        low = int(GENERIC_PRICE_MIN * 0.9)
        high = int(GENERIC_PRICE_MAX * 1.1) + 1
        assert all(low <= r.price <= high for r in results)

    def test_seeded_rng_is_reproducible(self):
        first = DemoMarketplace(random.Random(42)).search("xbox")
        second = DemoMarketplace(random.Random(42)).search("xbox")

        assert first == second

    def test_affiliate_tag_in_urls(self):
        results = DemoMarketplace(random.Random(0), affiliate_tag="test-21").search("ipad")

        assert all(r.product_url.endswith("?tag=test-21") for r in results)

    def test_keyword_table(self):
        assert match_product("  PS5 digital ").title == "PlayStation 5 Console"
        assert match_product("wireless earbuds").title == "Apple AirPods"
        assert match_product("gaming laptop").category == "Laptops"
        assert match_product("garden hose") is None

    def test_blank_query(self):
        assert DemoMarketplace(random.Random(0)).search("   ") == []


class TestProductSearchService:
    def test_cache_hit_returns_previous_result(self):
        source = CountingSource(DemoMarketplace(random.Random(5)))
        service = _service(source)

        first = service.search("PlayStation 5")
        second = service.search("  playstation 5 ")

        assert first == second
        assert source.calls == 1

    def test_expired_entry_is_recomputed(self):
        clock = FakeTime()
        source = CountingSource(DemoMarketplace(random.Random(5)))
        service = _service(source, clock=clock, ttl=60)

        service.search("airpods")
        clock.now += 59
        service.search("airpods")
        assert source.calls == 1

        clock.now += 2
        service.search("airpods")
        assert source.calls == 2

    def test_clear_cache(self):
        source = CountingSource(DemoMarketplace(random.Random(5)))
        service = _service(source)

        service.search("switch")
        service.clear_cache()
        service.search("switch")

        assert source.calls == 2

    def test_failures_degrade_to_empty(self):
        service = _service(BrokenSource())

        assert service.search("ps5") == []

    def test_empty_query(self):
        source = CountingSource(DemoMarketplace(random.Random(5)))

        assert _service(source).search("") == []
        assert source.calls == 0

    def test_results_merge_sources_in_price_order(self):
        service = ProductSearchService(
            AffiliateSettings(),
            sources=[DemoMarketplace(random.Random(1)), DemoMarketplace(random.Random(2))],
        )

        results = service.search("macbook")

        assert len(results) == 2 * len(STORE_NAMES)
        assert [r.price for r in results] == sorted(r.price for r in results)

    def test_default_source_uses_affiliate_tag(self):
        service = ProductSearchService(AffiliateSettings(affiliate_tag="wr-7"))

        results = service.search("xbox")

        assert results and all("tag=wr-7" in r.product_url for r in results)
