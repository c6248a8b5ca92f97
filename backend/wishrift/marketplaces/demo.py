import random
import re
from dataclasses import dataclass
from urllib.parse import quote

from wishrift.marketplaces.base import MarketplaceAdapter, ScrapedProduct

GENERIC_IMAGE = (
    "https://images.unsplash.com/photo-1550009158-9ebf69173e03"
    "?w=800&auto=format&fit=crop&q=60"
)

# probability that a store reports the product as out of stock
UNAVAILABLE_RATE = 0.2
# stores price around the base within +/- this fraction
PRICE_SPREAD = 0.10
# cents, used when the query matches no known product
GENERIC_PRICE_MIN = 5000
GENERIC_PRICE_MAX = 24999


@dataclass(frozen=True)
class Store:
    name: str
    domain: str


@dataclass(frozen=True)
class KnownProduct:
    keywords: tuple[str, ...]
    title: str
    category: str
    base_price: int
    image_url: str


STORES = (
    Store("Amazon", "amazon.com"),
    Store("Best Buy", "bestbuy.com"),
    Store("Walmart", "walmart.com"),
    Store("Target", "target.com"),
    Store("GameStop", "gamestop.com"),
    Store("Newegg", "newegg.com"),
    Store("B&H Photo", "bhphotovideo.com"),
    Store("Apple Store", "apple.com"),
    Store("Microsoft Store", "microsoft.com"),
    Store("eBay", "ebay.com"),
)

STORE_NAMES = tuple(store.name for store in STORES)

# first match wins
KNOWN_PRODUCTS = (
    KnownProduct(
        ("playstation", "ps5"),
        "PlayStation 5 Console",
        "Gaming Consoles",
        49999,
        "https://images.unsplash.com/photo-1607853202273-797f1c22a38e?w=800&auto=format&fit=crop&q=60",
    ),
    KnownProduct(
        ("xbox",),
        "Xbox Series X Console",
        "Gaming Consoles",
        49999,
        "https://images.unsplash.com/photo-1621259182288-4443f2367f00?w=800&auto=format&fit=crop&q=60",
    ),
    KnownProduct(
        ("switch",),
        "Nintendo Switch",
        "Gaming Consoles",
        29999,
        "https://images.unsplash.com/photo-1578303512597-81e6cc155b3e?w=800&auto=format&fit=crop&q=60",
    ),
    KnownProduct(
        ("ipad", "tablet"),
        "Apple iPad",
        "Tablets",
        32999,
        "https://images.unsplash.com/photo-1544244015-0df4b3ffc6b0?w=800&auto=format&fit=crop&q=60",
    ),
    KnownProduct(
        ("macbook", "laptop"),
        "Apple MacBook Air",
        "Laptops",
        99999,
        "https://images.unsplash.com/photo-1517336714731-489689fd1ca8?w=800&auto=format&fit=crop&q=60",
    ),
    KnownProduct(
        ("airpods", "earbuds"),
        "Apple AirPods",
        "Headphones",
        12999,
        "https://images.unsplash.com/photo-1606741965574-a493eb7a7831?w=800&auto=format&fit=crop&q=60",
    ),
)


def normalize_query(query: str) -> str:
    return query.strip().lower()


def match_product(query: str) -> KnownProduct | None:
    normalized = normalize_query(query)
    for product in KNOWN_PRODUCTS:
        if any(keyword in normalized for keyword in product.keywords):
            return product
    return None


class DemoMarketplace(MarketplaceAdapter):
    """
    Simulated multi-retailer search.

    Every call re-rolls the per-store price and stock using the injected
    random source, so tests can pin the output with a seeded Random.
    """

    name = "demo"

    def __init__(self, rng: random.Random | None = None, affiliate_tag: str = "wishrift-20"):
        self.rng = rng or random.Random()
        self.affiliate_tag = affiliate_tag

    def search(self, query: str) -> list[ScrapedProduct]:
        normalized = normalize_query(query)
        if not normalized:
            return []

        known = match_product(normalized)
        if known:
            title, base_price = known.title, known.base_price
            image_url, category = known.image_url, known.category
        else:
            title = query.strip()
            base_price = self.rng.randint(GENERIC_PRICE_MIN, GENERIC_PRICE_MAX)
            image_url = GENERIC_IMAGE
            category = "Electronics"

        slug = quote(re.sub(r"\s+", "-", normalized), safe="-")
        results = []
        for store in STORES:
            variation = self.rng.uniform(-PRICE_SPREAD, PRICE_SPREAD)
            price = max(1, round(base_price * (1 + variation)))
            is_available = self.rng.random() > UNAVAILABLE_RATE
            product_id = f"{slug}-{self.rng.randrange(1000)}"

            results.append(
                ScrapedProduct(
                    name=title,
                    price=price,
                    product_url=f"https://www.{store.domain}/dp/{product_id}?tag={self.affiliate_tag}",
                    store=store.name,
                    image_url=image_url,
                    is_available=is_available,
                    category=category,
                )
            )

        results.sort(key=lambda r: r.price)
        return results
