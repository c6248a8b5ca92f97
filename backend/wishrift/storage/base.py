from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager

from wishrift.db.models import (
    PriceAlert,
    PriceHistory,
    ProductListing,
    SharedAccess,
    User,
    WishList,
    WishListItem,
)


class Storage(ABC):
    """
    Persistence capabilities used by the domain services.

    Writes are staged until commit(). Services group the writes of one
    operation inside unit_of_work() so that a failure rolls all of them back.
    """

    # -------------------------
    # Users
    # -------------------------

    @abstractmethod
    def get_user(self, user_id: str) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def add_user(self, user: User) -> User: ...

    # -------------------------
    # Wishlists
    # -------------------------

    @abstractmethod
    def list_wishlists(self, user_id: str) -> list[WishList]: ...

    @abstractmethod
    def get_wishlist(self, wishlist_id: int) -> WishList | None: ...

    @abstractmethod
    def get_wishlist_by_share_id(self, share_id: str) -> WishList | None: ...

    @abstractmethod
    def add_wishlist(self, wishlist: WishList) -> WishList: ...

    @abstractmethod
    def delete_wishlist(self, wishlist: WishList) -> None:
        """Removes the list together with its items and share grants."""

    # -------------------------
    # Items
    # -------------------------

    @abstractmethod
    def list_items(self, wishlist_id: int) -> list[WishListItem]: ...

    @abstractmethod
    def get_item(self, item_id: int) -> WishListItem | None: ...

    @abstractmethod
    def add_item(self, item: WishListItem) -> WishListItem: ...

    @abstractmethod
    def delete_item(self, item: WishListItem) -> None:
        """Removes the item together with its history, alerts and listings."""

    # -------------------------
    # Price history
    # -------------------------

    @abstractmethod
    def list_price_history(self, item_id: int) -> list[PriceHistory]:
        """Oldest first."""

    @abstractmethod
    def add_price_history(self, entry: PriceHistory) -> PriceHistory: ...

    # -------------------------
    # Alerts
    # -------------------------

    @abstractmethod
    def list_alerts(self, item_id: int) -> list[PriceAlert]: ...

    @abstractmethod
    def list_alerts_for_user(self, user_id: str) -> list[PriceAlert]: ...

    @abstractmethod
    def get_alert(self, alert_id: int) -> PriceAlert | None: ...

    @abstractmethod
    def add_alert(self, alert: PriceAlert) -> PriceAlert: ...

    @abstractmethod
    def delete_alert(self, alert: PriceAlert) -> None: ...

    # -------------------------
    # Listings
    # -------------------------

    @abstractmethod
    def list_listings(self, item_id: int) -> list[ProductListing]: ...

    @abstractmethod
    def add_listing(self, listing: ProductListing) -> ProductListing: ...

    # -------------------------
    # Shared access
    # -------------------------

    @abstractmethod
    def get_shared_access(self, wishlist_id: int, user_id: str) -> SharedAccess | None: ...

    @abstractmethod
    def add_shared_access(self, access: SharedAccess) -> SharedAccess: ...

    @abstractmethod
    def delete_shared_access(self, access: SharedAccess) -> None: ...

    @abstractmethod
    def list_shared_with(self, user_id: str) -> list[WishList]: ...

    # -------------------------
    # Unit of work
    # -------------------------

    @abstractmethod
    def save(self, obj) -> None:
        """Stages changes made to an already stored object."""

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...

    @contextmanager
    def unit_of_work(self):
        try:
            yield self
            self.commit()
        except Exception:
            self.rollback()
            raise
