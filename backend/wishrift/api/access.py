"""
Ownership checks shared by the routers.

A resource the caller may not see is reported exactly like a missing one.
"""

from wishrift.core.errors import NotFoundError
from wishrift.db.models import PriceAlert, WishList, WishListItem
from wishrift.services.sharing import SharingService
from wishrift.storage.base import Storage


def owned_wishlist(storage: Storage, wishlist_id: int, user_id: str) -> WishList:
    wishlist = storage.get_wishlist(wishlist_id)
    if wishlist is None or wishlist.user_id != user_id:
        raise NotFoundError("Wishlist", wishlist_id)
    return wishlist


def readable_wishlist(storage: Storage, wishlist_id: int, user_id: str) -> WishList:
    wishlist = storage.get_wishlist(wishlist_id)
    if wishlist is None or not SharingService(storage).can_read(wishlist, user_id):
        raise NotFoundError("Wishlist", wishlist_id)
    return wishlist


def owned_item(storage: Storage, item_id: int, user_id: str) -> WishListItem:
    item = storage.get_item(item_id)
    wishlist = storage.get_wishlist(item.wishlist_id) if item else None
    if wishlist is None or wishlist.user_id != user_id:
        raise NotFoundError("Item", item_id)
    return item


def readable_item(storage: Storage, item_id: int, user_id: str) -> WishListItem:
    item = storage.get_item(item_id)
    wishlist = storage.get_wishlist(item.wishlist_id) if item else None
    if wishlist is None or not SharingService(storage).can_read(wishlist, user_id):
        raise NotFoundError("Item", item_id)
    return item


def owned_alert(storage: Storage, alert_id: int, user_id: str) -> PriceAlert:
    alert = storage.get_alert(alert_id)
    if alert is None:
        raise NotFoundError("Alert", alert_id)
    try:
        owned_item(storage, alert.item_id, user_id)
    except NotFoundError:
        raise NotFoundError("Alert", alert_id)
    return alert
