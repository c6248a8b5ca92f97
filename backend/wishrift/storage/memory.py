from __future__ import annotations

import threading
from itertools import count

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


class MemoryStorage(Storage):
    """
    Dict-backed storage for tests and local demos.

    Rows are detached model instances keyed by id. rollback() undoes the
    inserts and deletes made since the last commit; attribute changes made
    through save() are kept.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self.users: dict[str, User] = {}
        self.wishlists: dict[int, WishList] = {}
        self.items: dict[int, WishListItem] = {}
        self.history: dict[int, PriceHistory] = {}
        self.alerts: dict[int, PriceAlert] = {}
        self.listings: dict[int, ProductListing] = {}
        self.shared: dict[int, SharedAccess] = {}

        self._ids = {
            "wishlists": count(1),
            "items": count(1),
            "history": count(1),
            "alerts": count(1),
            "listings": count(1),
            "shared": count(1),
        }
        self._undo: list = []

    def _insert(self, table: str, obj, key=None):
        with self._lock:
            rows = getattr(self, table)
            if key is None:
                obj.id = next(self._ids[table])
                key = obj.id
            rows[key] = obj
            self._undo.append(lambda: rows.pop(key, None))
        return obj

    def _remove(self, table: str, key) -> None:
        with self._lock:
            rows = getattr(self, table)
            obj = rows.pop(key, None)
            if obj is not None:
                self._undo.append(lambda: rows.__setitem__(key, obj))

    # -------------------------
    # Users
    # -------------------------

    def get_user(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self.users.values() if u.username == username), None)

    def _check_username(self, user: User) -> None:
        if any(
            other is not user and other.username == user.username
            for other in self.users.values()
        ):
            raise PersistenceError(f"username {user.username!r} is taken")

    def add_user(self, user: User) -> User:
        with self._lock:
            self._check_username(user)
            return self._insert("users", user, key=user.id)

    # -------------------------
    # Wishlists
    # -------------------------

    def list_wishlists(self, user_id: str) -> list[WishList]:
        return [w for w in self.wishlists.values() if w.user_id == user_id]

    def get_wishlist(self, wishlist_id: int) -> WishList | None:
        return self.wishlists.get(wishlist_id)

    def get_wishlist_by_share_id(self, share_id: str) -> WishList | None:
        return next(
            (w for w in self.wishlists.values() if w.share_id == share_id), None
        )

    def add_wishlist(self, wishlist: WishList) -> WishList:
        return self._insert("wishlists", wishlist)

    def delete_wishlist(self, wishlist: WishList) -> None:
        with self._lock:
            for item in self.list_items(wishlist.id):
                self.delete_item(item)
            for key, access in list(self.shared.items()):
                if access.wishlist_id == wishlist.id:
                    self._remove("shared", key)
            self._remove("wishlists", wishlist.id)

    # -------------------------
    # Items
    # -------------------------

    def list_items(self, wishlist_id: int) -> list[WishListItem]:
        return [i for i in self.items.values() if i.wishlist_id == wishlist_id]

    def get_item(self, item_id: int) -> WishListItem | None:
        return self.items.get(item_id)

    def add_item(self, item: WishListItem) -> WishListItem:
        return self._insert("items", item)

    def delete_item(self, item: WishListItem) -> None:
        with self._lock:
            for table in ("history", "alerts", "listings"):
                rows = getattr(self, table)
                for key, row in list(rows.items()):
                    if row.item_id == item.id:
                        self._remove(table, key)
            self._remove("items", item.id)

    # -------------------------
    # Price history
    # -------------------------

    def list_price_history(self, item_id: int) -> list[PriceHistory]:
        rows = [h for h in self.history.values() if h.item_id == item_id]
        return sorted(rows, key=lambda h: (h.date, h.id))

    def add_price_history(self, entry: PriceHistory) -> PriceHistory:
        return self._insert("history", entry)

    # -------------------------
    # Alerts
    # -------------------------

    def list_alerts(self, item_id: int) -> list[PriceAlert]:
        return [a for a in self.alerts.values() if a.item_id == item_id]

    def list_alerts_for_user(self, user_id: str) -> list[PriceAlert]:
        lists = {w.id for w in self.list_wishlists(user_id)}
        owned = {i.id for i in self.items.values() if i.wishlist_id in lists}
        return [a for a in self.alerts.values() if a.item_id in owned]

    def get_alert(self, alert_id: int) -> PriceAlert | None:
        return self.alerts.get(alert_id)

    def add_alert(self, alert: PriceAlert) -> PriceAlert:
        return self._insert("alerts", alert)

    def delete_alert(self, alert: PriceAlert) -> None:
        self._remove("alerts", alert.id)

    # -------------------------
    # Listings
    # -------------------------

    def list_listings(self, item_id: int) -> list[ProductListing]:
        rows = [x for x in self.listings.values() if x.item_id == item_id]
        return sorted(rows, key=lambda x: (-x.scraped_at.timestamp(), x.price))

    def add_listing(self, listing: ProductListing) -> ProductListing:
        return self._insert("listings", listing)

    # -------------------------
    # Shared access
    # -------------------------

    def get_shared_access(self, wishlist_id: int, user_id: str) -> SharedAccess | None:
        return next(
            (
                s
                for s in self.shared.values()
                if s.wishlist_id == wishlist_id and s.user_id == user_id
            ),
            None,
        )

    def add_shared_access(self, access: SharedAccess) -> SharedAccess:
        return self._insert("shared", access)

    def delete_shared_access(self, access: SharedAccess) -> None:
        self._remove("shared", access.id)

    def list_shared_with(self, user_id: str) -> list[WishList]:
        ids = [s.wishlist_id for s in self.shared.values() if s.user_id == user_id]
        return [self.wishlists[i] for i in ids if i in self.wishlists]

    # -------------------------
    # Unit of work
    # -------------------------

    def save(self, obj) -> None:
        # usernames are unique, like the users table
        if isinstance(obj, User):
            with self._lock:
                self._check_username(obj)

    def commit(self) -> None:
        with self._lock:
            self._undo.clear()

    def rollback(self) -> None:
        with self._lock:
            while self._undo:
                self._undo.pop()()
