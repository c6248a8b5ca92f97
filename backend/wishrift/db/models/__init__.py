from wishrift.db.base import Base, engine, SessionLocal
from wishrift.db.models.user import User
from wishrift.db.models.wishlist import WishList
from wishrift.db.models.wishlist_item import WishListItem
from wishrift.db.models.price_history import PriceHistory
from wishrift.db.models.price_alert import PriceAlert
from wishrift.db.models.product_listing import ProductListing
from wishrift.db.models.shared_access import SharedAccess

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "User",
    "WishList",
    "WishListItem",
    "PriceHistory",
    "PriceAlert",
    "ProductListing",
    "SharedAccess",
]
