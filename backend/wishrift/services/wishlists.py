import secrets
from typing import Callable

import structlog

from wishrift.core.errors import NotFoundError
from wishrift.db.models import WishList
from wishrift.services.base import BaseService, require_text

logger = structlog.get_logger(__name__)


def new_share_id() -> str:
    # 12 random bytes -> 16 url-safe characters, 96 bits of entropy
    return secrets.token_urlsafe(12)


class WishlistService(BaseService):
    def __init__(self, storage, clock=None, share_id_factory: Callable[[], str] | None = None):
        super().__init__(storage, clock)
        self.share_id_factory = share_id_factory or new_share_id

    def list_wishlists(self, owner_id: str) -> list[WishList]:
        return self.storage.list_wishlists(owner_id)

    def get_wishlist(self, wishlist_id: int) -> WishList:
        wishlist = self.storage.get_wishlist(wishlist_id)
        if wishlist is None:
            raise NotFoundError("Wishlist", wishlist_id)
        return wishlist

    def get_by_share_id(self, share_id: str) -> WishList:
        wishlist = self.storage.get_wishlist_by_share_id(share_id) if share_id else None
        if wishlist is None:
            raise NotFoundError("Shared list", share_id)
        return wishlist

    def create_wishlist(
        self, owner_id: str, title: str, description: str | None = None
    ) -> WishList:
        title = require_text(title, "title")
        now = self.clock()

        with self.storage.unit_of_work():
            wishlist = self.storage.add_wishlist(
                WishList(
                    user_id=owner_id,
                    title=title,
                    description=description,
                    share_id=self.share_id_factory(),
                    created_at=now,
                    updated_at=now,
                )
            )

        logger.info("wishlist.created", wishlist_id=wishlist.id, owner_id=owner_id)
        return wishlist

    def update_wishlist(self, wishlist_id: int, **changes) -> WishList:
        """Only title and description are editable; the share token is fixed."""
        wishlist = self.get_wishlist(wishlist_id)

        with self.storage.unit_of_work():
            if "title" in changes:
                wishlist.title = require_text(changes["title"], "title")
            if "description" in changes:
                wishlist.description = changes["description"]
            wishlist.updated_at = self.clock()
            self.storage.save(wishlist)

        return wishlist

    def delete_wishlist(self, wishlist_id: int) -> bool:
        wishlist = self.storage.get_wishlist(wishlist_id)
        if wishlist is None:
            return False

        with self.storage.unit_of_work():
            self.storage.delete_wishlist(wishlist)

        logger.info("wishlist.deleted", wishlist_id=wishlist_id)
        return True
