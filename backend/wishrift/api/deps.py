from fastapi import Depends, Request
from sqlalchemy.orm import Session

from wishrift.core.auth import Identity, verify_token
from wishrift.db.models import User
from wishrift.db.session import get_db
from wishrift.services.alerts import AlertService
from wishrift.services.items import ItemService
from wishrift.services.search import ProductSearchService
from wishrift.services.sharing import SharingService
from wishrift.services.users import UserService
from wishrift.services.wishlists import WishlistService
from wishrift.storage import SqlStorage, Storage


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return SqlStorage(db)


def get_search_service(request: Request) -> ProductSearchService:
    return request.app.state.search


def get_current_user(
    identity: Identity = Depends(verify_token),
    storage: Storage = Depends(get_storage),
) -> User:
    """Resolves the token to a stored user, creating it on first login."""
    return UserService(storage).upsert_user(
        identity.user_id,
        identity.username,
        email=identity.email,
        first_name=identity.first_name,
        last_name=identity.last_name,
        profile_image_url=identity.profile_image_url,
    )


def wishlist_service(storage: Storage = Depends(get_storage)) -> WishlistService:
    return WishlistService(storage)


def item_service(storage: Storage = Depends(get_storage)) -> ItemService:
    return ItemService(storage)


def alert_service(storage: Storage = Depends(get_storage)) -> AlertService:
    return AlertService(storage)


def sharing_service(storage: Storage = Depends(get_storage)) -> SharingService:
    return SharingService(storage)


def user_service(storage: Storage = Depends(get_storage)) -> UserService:
    return UserService(storage)
