from datetime import datetime
from typing import Optional

from wishrift.api.schemas.base import CamelModel
from wishrift.api.schemas.items import ItemOut


class WishListCreate(CamelModel):
    title: str
    description: Optional[str] = None


class WishListUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None


class WishListOut(CamelModel):
    id: int
    user_id: str
    title: str
    description: Optional[str] = None
    share_id: str
    created_at: datetime
    updated_at: datetime


class SharedListOut(CamelModel):
    wishlist: WishListOut
    items: list[ItemOut]


class ShareRequest(CamelModel):
    username: str


class SharedAccessOut(CamelModel):
    id: int
    wishlist_id: int
    user_id: str
    created_at: datetime
