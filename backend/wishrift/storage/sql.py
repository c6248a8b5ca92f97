from __future__ import annotations

from contextlib import contextmanager

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wishrift.core.errors import PersistenceError
from wishrift.db.models import (
    PriceAlert,
    PriceHistory,
    ProductListing,
    SharedAccess,
    User,
    WishList,
    WishListItem,
)
from wishrift.storage.base import Storage

logger = structlog.get_logger(__name__)


class SqlStorage(Storage):
    """Storage backed by a request-scoped SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def _add(self, obj):
        self.db.add(obj)
        self.db.flush()
        return obj

    # -------------------------
    # Users
    # -------------------------

    def get_user(self, user_id: str) -> User | None:
        return self.db.get(User, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return self.db.execute(
            select(User).where(User.username == username)
        ).scalar_one_or_none()

    def add_user(self, user: User) -> User:
        return self._add(user)

    # -------------------------
    # Wishlists
    # -------------------------

    def list_wishlists(self, user_id: str) -> list[WishList]:
        q = select(WishList).where(WishList.user_id == user_id).order_by(WishList.id)
        return list(self.db.execute(q).scalars().all())

    def get_wishlist(self, wishlist_id: int) -> WishList | None:
        return self.db.get(WishList, wishlist_id)

    def get_wishlist_by_share_id(self, share_id: str) -> WishList | None:
        return self.db.execute(
            select(WishList).where(WishList.share_id == share_id)
        ).scalar_one_or_none()

    def add_wishlist(self, wishlist: WishList) -> WishList:
        return self._add(wishlist)

    def delete_wishlist(self, wishlist: WishList) -> None:
        self.db.delete(wishlist)
        self.db.flush()

    # -------------------------
    # Items
    # -------------------------

    def list_items(self, wishlist_id: int) -> list[WishListItem]:
        q = (
            select(WishListItem)
            .where(WishListItem.wishlist_id == wishlist_id)
            .order_by(WishListItem.id)
        )
        return list(self.db.execute(q).scalars().all())

    def get_item(self, item_id: int) -> WishListItem | None:
        return self.db.get(WishListItem, item_id)

    def add_item(self, item: WishListItem) -> WishListItem:
        return self._add(item)

    def delete_item(self, item: WishListItem) -> None:
        self.db.delete(item)
        self.db.flush()

    # -------------------------
    # Price history
    # -------------------------

    def list_price_history(self, item_id: int) -> list[PriceHistory]:
        q = (
            select(PriceHistory)
            .where(PriceHistory.item_id == item_id)
            .order_by(PriceHistory.date.asc(), PriceHistory.id.asc())
        )
        return list(self.db.execute(q).scalars().all())

    def add_price_history(self, entry: PriceHistory) -> PriceHistory:
        return self._add(entry)

    # -------------------------
    # Alerts
    # -------------------------

    def list_alerts(self, item_id: int) -> list[PriceAlert]:
        q = select(PriceAlert).where(PriceAlert.item_id == item_id).order_by(PriceAlert.id)
        return list(self.db.execute(q).scalars().all())

    def list_alerts_for_user(self, user_id: str) -> list[PriceAlert]:
        q = (
            select(PriceAlert)
            .join(WishListItem, WishListItem.id == PriceAlert.item_id)
            .join(WishList, WishList.id == WishListItem.wishlist_id)
            .where(WishList.user_id == user_id)
            .order_by(PriceAlert.id)
        )
        return list(self.db.execute(q).scalars().all())

    def get_alert(self, alert_id: int) -> PriceAlert | None:
        return self.db.get(PriceAlert, alert_id)

    def add_alert(self, alert: PriceAlert) -> PriceAlert:
        return self._add(alert)

    def delete_alert(self, alert: PriceAlert) -> None:
        self.db.delete(alert)
        self.db.flush()

    # -------------------------
    # Listings
    # -------------------------

    def list_listings(self, item_id: int) -> list[ProductListing]:
        q = (
            select(ProductListing)
            .where(ProductListing.item_id == item_id)
            .order_by(ProductListing.scraped_at.desc(), ProductListing.price.asc())
        )
        return list(self.db.execute(q).scalars().all())

    def add_listing(self, listing: ProductListing) -> ProductListing:
        return self._add(listing)

    # -------------------------
    # Shared access
    # -------------------------

    def get_shared_access(self, wishlist_id: int, user_id: str) -> SharedAccess | None:
        return self.db.execute(
            select(SharedAccess).where(
                SharedAccess.wishlist_id == wishlist_id,
                SharedAccess.user_id == user_id,
            )
        ).scalar_one_or_none()

    def add_shared_access(self, access: SharedAccess) -> SharedAccess:
        return self._add(access)

    def delete_shared_access(self, access: SharedAccess) -> None:
        self.db.delete(access)
        self.db.flush()

    def list_shared_with(self, user_id: str) -> list[WishList]:
        q = (
            select(WishList)
            .join(SharedAccess, SharedAccess.wishlist_id == WishList.id)
            .where(SharedAccess.user_id == user_id)
            .order_by(SharedAccess.id)
        )
        return list(self.db.execute(q).scalars().all())

    # -------------------------
    # Unit of work
    # -------------------------

    def save(self, obj) -> None:
        self.db.add(obj)
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    @contextmanager
    def unit_of_work(self):
        try:
            yield self
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("storage.transaction_failed", error=str(e))
            raise PersistenceError("Storage operation failed") from e
        except Exception:
            self.db.rollback()
            raise
