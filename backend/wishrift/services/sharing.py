import structlog

from wishrift.core.errors import NotFoundError, ValidationError
from wishrift.db.models import SharedAccess, WishList
from wishrift.services.base import BaseService

logger = structlog.get_logger(__name__)


class SharingService(BaseService):
    def can_read(self, wishlist: WishList, user_id: str | None) -> bool:
        if user_id is None:
            return False
        if wishlist.user_id == user_id:
            return True
        return self.storage.get_shared_access(wishlist.id, user_id) is not None

    def shared_with_me(self, user_id: str) -> list[WishList]:
        return self.storage.list_shared_with(user_id)

    def share_wishlist(self, wishlist_id: int, user_id: str) -> SharedAccess:
        """Grants `user_id` read access. Granting twice returns the first grant."""
        wishlist = self.storage.get_wishlist(wishlist_id)
        if wishlist is None:
            raise NotFoundError("Wishlist", wishlist_id)
        if self.storage.get_user(user_id) is None:
            raise NotFoundError("User", user_id)
        if wishlist.user_id == user_id:
            raise ValidationError("A list cannot be shared with its owner", "userId")

        existing = self.storage.get_shared_access(wishlist_id, user_id)
        if existing is not None:
            return existing

        with self.storage.unit_of_work():
            access = self.storage.add_shared_access(
                SharedAccess(
                    wishlist_id=wishlist_id, user_id=user_id, created_at=self.clock()
                )
            )

        logger.info("wishlist.shared", wishlist_id=wishlist_id, user_id=user_id)
        return access

    def remove_shared_access(self, wishlist_id: int, user_id: str) -> bool:
        access = self.storage.get_shared_access(wishlist_id, user_id)
        if access is None:
            return False

        with self.storage.unit_of_work():
            self.storage.delete_shared_access(access)

        logger.info("wishlist.unshared", wishlist_id=wishlist_id, user_id=user_id)
        return True
