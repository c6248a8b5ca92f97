from datetime import datetime
from typing import Iterable

import structlog

from wishrift.core.errors import NotFoundError, ValidationError
from wishrift.core.pricing import validate_cents
from wishrift.db.models import PriceHistory, ProductListing, WishListItem
from wishrift.services.alerts import triggered_alerts
from wishrift.services.base import BaseService, require_text

logger = structlog.get_logger(__name__)

REQUIRED_TEXT = ("name", "product_url", "store", "category")
OPTIONAL_TEXT = ("description", "image_url")
EDITABLE = REQUIRED_TEXT + OPTIONAL_TEXT + (
    "current_price",
    "original_price",
    "is_favorite",
)


def _clean(fields: dict, *, partial: bool) -> dict:
    unknown = set(fields) - set(EDITABLE)
    if unknown:
        name = sorted(unknown)[0]
        raise ValidationError(f"{name} cannot be set on an item", name)

    clean = {}
    for name in REQUIRED_TEXT:
        if name in fields or not partial:
            clean[name] = require_text(fields.get(name), name)
    for name in OPTIONAL_TEXT:
        if name in fields:
            clean[name] = fields[name]

    if "current_price" in fields or not partial:
        clean["current_price"] = validate_cents(
            fields.get("current_price"), "currentPrice"
        )
    if fields.get("original_price") is not None:
        clean["original_price"] = validate_cents(
            fields["original_price"], "originalPrice"
        )
    elif "original_price" in fields:
        clean["original_price"] = None

    if fields.get("is_favorite") is not None:
        clean["is_favorite"] = bool(fields["is_favorite"])
    return clean


def lowest_available(listings: Iterable) -> object | None:
    available = [listing for listing in listings if listing.is_available]
    if not available:
        return None
    return min(available, key=lambda listing: listing.price)


class ItemService(BaseService):
    def get_item(self, item_id: int) -> WishListItem:
        item = self.storage.get_item(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        return item

    def list_items(self, wishlist_id: int) -> list[WishListItem]:
        return self.storage.list_items(wishlist_id)

    def price_history(self, item_id: int) -> list[PriceHistory]:
        return self.storage.list_price_history(item_id)

    def list_listings(self, item_id: int) -> list[ProductListing]:
        return self.storage.list_listings(item_id)

    def _append_history(self, item_id: int, price: int, date: datetime) -> PriceHistory:
        return self.storage.add_price_history(
            PriceHistory(item_id=item_id, price=price, date=date)
        )

    def create_item(self, wishlist_id: int, fields: dict) -> WishListItem:
        """
        Adds an item to a wishlist and opens its price history.

        The item and its first history row are written in the same unit of
        work, so neither exists without the other.
        """
        if self.storage.get_wishlist(wishlist_id) is None:
            raise NotFoundError("Wishlist", wishlist_id)
        data = _clean(fields, partial=False)
        data.setdefault("is_favorite", False)
        now = self.clock()

        with self.storage.unit_of_work():
            item = self.storage.add_item(
                WishListItem(
                    wishlist_id=wishlist_id, created_at=now, updated_at=now, **data
                )
            )
            self._append_history(item.id, item.current_price, now)

        logger.info(
            "item.created",
            item_id=item.id,
            wishlist_id=wishlist_id,
            price=data["current_price"],
        )
        return item

    def update_item(self, item_id: int, fields: dict) -> WishListItem:
        """
        Applies a partial update.

        A history row is appended after the item row only when
        `current_price` is given and differs from the stored price.
        """
        item = self.get_item(item_id)
        data = _clean(fields, partial=True)
        old_price = item.current_price
        new_price = data.get("current_price", old_price)
        now = self.clock()

        with self.storage.unit_of_work():
            for name, value in data.items():
                setattr(item, name, value)
            item.updated_at = now
            self.storage.save(item)

            if new_price != old_price:
                self._append_history(item.id, new_price, now)

        if new_price != old_price:
            logger.info(
                "item.price_changed", item_id=item_id, old=old_price, new=new_price
            )
            self._report_triggered(item_id, new_price)
        return item

    def _report_triggered(self, item_id: int, price: int) -> None:
        for alert in triggered_alerts(self.storage.list_alerts(item_id), price):
            logger.info(
                "alert.triggered",
                alert_id=alert.id,
                item_id=item_id,
                price=price,
                target=alert.target_price,
            )

    def delete_item(self, item_id: int) -> bool:
        item = self.storage.get_item(item_id)
        if item is None:
            return False

        with self.storage.unit_of_work():
            self.storage.delete_item(item)

        logger.info("item.deleted", item_id=item_id)
        return True

    def record_price(
        self, item_id: int, price: int, date: datetime | None = None
    ) -> PriceHistory:
        """Appends a price point without changing the item."""
        self.get_item(item_id)
        price = validate_cents(price, "price")

        with self.storage.unit_of_work():
            entry = self._append_history(item_id, price, date or self.clock())
        return entry

    def record_listings(self, item_id: int, listings: Iterable) -> list[ProductListing]:
        """Stores every discovered listing, in stock or not, for audit."""
        self.get_item(item_id)
        now = self.clock()

        with self.storage.unit_of_work():
            saved = [
                self.storage.add_listing(
                    ProductListing(
                        item_id=item_id,
                        name=listing.name,
                        price=validate_cents(listing.price, "price"),
                        image_url=listing.image_url,
                        product_url=listing.product_url,
                        store=listing.store,
                        is_available=bool(listing.is_available),
                        scraped_at=now,
                    )
                )
                for listing in listings
            ]

        logger.info("listings.recorded", item_id=item_id, count=len(saved))
        return saved

    def apply_discovered_listing(
        self, item_id: int, listing, batch: Iterable | None = None
    ) -> WishListItem:
        """
        Moves the item to `listing` if it is the cheapest in-stock offer of
        `batch` (just the listing itself when no batch is given).

        Out-of-stock listings never change the item.
        """
        item = self.get_item(item_id)
        if not listing.is_available:
            logger.debug("listing.skipped", item_id=item_id, store=listing.store)
            return item

        best = lowest_available(batch if batch is not None else [listing])
        if best is None or not (
            best is listing
            or (best.price == listing.price and best.store == listing.store)
        ):
            return item

        changes = {
            "current_price": listing.price,
            "store": listing.store,
            "product_url": listing.product_url,
        }
        if listing.image_url:
            changes["image_url"] = listing.image_url
        return self.update_item(item_id, changes)

    def apply_lowest_listing(self, item_id: int, listings: Iterable):
        """Returns the item and the listing applied to it, if any."""
        listings = list(listings)
        best = lowest_available(listings)
        if best is None:
            return self.get_item(item_id), None
        return self.apply_discovered_listing(item_id, best, listings), best
