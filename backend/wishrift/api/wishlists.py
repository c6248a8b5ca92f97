from fastapi import APIRouter, Depends, Response

from wishrift.api.access import owned_wishlist, readable_wishlist
from wishrift.api.deps import (
    get_current_user,
    get_storage,
    item_service,
    sharing_service,
    user_service,
    wishlist_service,
)
from wishrift.api.schemas.items import ItemCreate, ItemOut
from wishrift.api.schemas.wishlists import (
    SharedAccessOut,
    ShareRequest,
    WishListCreate,
    WishListOut,
    WishListUpdate,
)
from wishrift.core.errors import NotFoundError
from wishrift.db.models import User
from wishrift.services.items import ItemService
from wishrift.services.sharing import SharingService
from wishrift.services.users import UserService
from wishrift.services.wishlists import WishlistService
from wishrift.storage import Storage

router = APIRouter(prefix="/wishlists", tags=["wishlists"])


@router.get("", response_model=list[WishListOut])
def list_wishlists(
    user: User = Depends(get_current_user),
    service: WishlistService = Depends(wishlist_service),
):
    return service.list_wishlists(user.id)


@router.post("", response_model=WishListOut, status_code=201)
def create_wishlist(
    payload: WishListCreate,
    user: User = Depends(get_current_user),
    service: WishlistService = Depends(wishlist_service),
):
    # owner always comes from the session, never from the body
    return service.create_wishlist(user.id, payload.title, payload.description)


@router.get("/{wishlist_id}", response_model=WishListOut)
def get_wishlist(
    wishlist_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return readable_wishlist(storage, wishlist_id, user.id)


@router.put("/{wishlist_id}", response_model=WishListOut)
def update_wishlist(
    wishlist_id: int,
    payload: WishListUpdate,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: WishlistService = Depends(wishlist_service),
):
    owned_wishlist(storage, wishlist_id, user.id)
    return service.update_wishlist(wishlist_id, **payload.model_dump(exclude_unset=True))


@router.delete("/{wishlist_id}", status_code=204)
def delete_wishlist(
    wishlist_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: WishlistService = Depends(wishlist_service),
):
    owned_wishlist(storage, wishlist_id, user.id)
    service.delete_wishlist(wishlist_id)
    return Response(status_code=204)


@router.get("/{wishlist_id}/items", response_model=list[ItemOut])
def list_items(
    wishlist_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ItemService = Depends(item_service),
):
    readable_wishlist(storage, wishlist_id, user.id)
    return service.list_items(wishlist_id)


@router.post("/{wishlist_id}/items", response_model=ItemOut, status_code=201)
def create_item(
    wishlist_id: int,
    payload: ItemCreate,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ItemService = Depends(item_service),
):
    owned_wishlist(storage, wishlist_id, user.id)
    return service.create_item(wishlist_id, payload.model_dump())


@router.post("/{wishlist_id}/share", response_model=SharedAccessOut, status_code=201)
def share_wishlist(
    wishlist_id: int,
    payload: ShareRequest,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    users: UserService = Depends(user_service),
    sharing: SharingService = Depends(sharing_service),
):
    owned_wishlist(storage, wishlist_id, user.id)
    grantee = users.get_user_by_username(payload.username)
    if grantee is None:
        raise NotFoundError("User", payload.username)
    return sharing.share_wishlist(wishlist_id, grantee.id)


@router.delete("/{wishlist_id}/share/{user_id}", status_code=204)
def remove_shared_access(
    wishlist_id: int,
    user_id: str,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    sharing: SharingService = Depends(sharing_service),
):
    owned_wishlist(storage, wishlist_id, user.id)
    if not sharing.remove_shared_access(wishlist_id, user_id):
        raise NotFoundError("Shared access", user_id)
    return Response(status_code=204)
