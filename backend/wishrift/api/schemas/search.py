from typing import Optional

from wishrift.api.schemas.alerts import AlertOut
from wishrift.api.schemas.base import CamelModel
from wishrift.api.schemas.items import ItemOut, ProductListingOut


class SearchRequest(CamelModel):
    query: str


class ScrapedProductOut(CamelModel):
    name: str
    price: int
    image_url: Optional[str] = None
    product_url: str
    store: str
    is_available: bool
    category: Optional[str] = None


class ScrapeOut(CamelModel):
    item: ItemOut
    listings: list[ProductListingOut]
    applied: Optional[ScrapedProductOut] = None
    triggered_alerts: list[AlertOut]
