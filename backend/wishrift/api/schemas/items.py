from datetime import datetime
from typing import Optional

from pydantic import Field

from wishrift.api.schemas.base import CamelModel


class ItemCreate(CamelModel):
    name: str
    description: Optional[str] = None
    current_price: int = Field(ge=0)
    original_price: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    product_url: str
    store: str
    category: str
    is_favorite: bool = False


class ItemUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    current_price: Optional[int] = Field(default=None, ge=0)
    original_price: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    product_url: Optional[str] = None
    store: Optional[str] = None
    category: Optional[str] = None
    is_favorite: Optional[bool] = None


class ItemOut(CamelModel):
    id: int
    wishlist_id: int
    name: str
    description: Optional[str] = None
    current_price: int
    original_price: Optional[int] = None
    image_url: Optional[str] = None
    product_url: str
    store: str
    category: str
    is_favorite: bool
    created_at: datetime
    updated_at: datetime


class PricePointIn(CamelModel):
    price: int = Field(ge=0)
    date: Optional[datetime] = None


class PriceHistoryOut(CamelModel):
    id: int
    item_id: int
    price: int
    date: datetime


class ProductListingOut(CamelModel):
    id: int
    item_id: int
    name: str
    price: int
    image_url: Optional[str] = None
    product_url: str
    store: str
    is_available: bool
    scraped_at: datetime
