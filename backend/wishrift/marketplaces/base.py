from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ScrapedProduct:
    """A store offer found by a search. Prices are in cents."""

    name: str
    price: int
    product_url: str
    store: str
    image_url: str | None = None
    is_available: bool = True
    category: str | None = None


class MarketplaceAdapter(ABC):
    name: str = "marketplace"

    @abstractmethod
    def search(self, query: str) -> list[ScrapedProduct]: ...
