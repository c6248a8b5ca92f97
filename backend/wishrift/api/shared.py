from fastapi import APIRouter, Depends

from wishrift.api.deps import (
    get_current_user,
    item_service,
    sharing_service,
    wishlist_service,
)
from wishrift.api.schemas.users import UserOut
from wishrift.api.schemas.wishlists import SharedListOut, WishListOut
from wishrift.db.models import User
from wishrift.services.items import ItemService
from wishrift.services.sharing import SharingService
from wishrift.services.wishlists import WishlistService

router = APIRouter(tags=["shared"])


@router.get("/shared/{share_id}", response_model=SharedListOut)
def view_shared_list(
    share_id: str,
    wishlists: WishlistService = Depends(wishlist_service),
    items: ItemService = Depends(item_service),
):
    # public: resolved by share token only, never by numeric id
    wishlist = wishlists.get_by_share_id(share_id)
    return {"wishlist": wishlist, "items": items.list_items(wishlist.id)}


@router.get("/shared-with-me", response_model=list[WishListOut])
def shared_with_me(
    user: User = Depends(get_current_user),
    sharing: SharingService = Depends(sharing_service),
):
    return sharing.shared_with_me(user.id)


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user
