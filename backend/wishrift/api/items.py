from fastapi import APIRouter, Depends, Response

from wishrift.api.access import owned_item, readable_item
from wishrift.api.deps import (
    alert_service,
    get_current_user,
    get_search_service,
    get_storage,
    item_service,
)
from wishrift.api.schemas.alerts import AlertCreate, AlertOut, EvaluateRequest
from wishrift.api.schemas.items import (
    ItemOut,
    ItemUpdate,
    PriceHistoryOut,
    PricePointIn,
    ProductListingOut,
)
from wishrift.api.schemas.search import ScrapedProductOut, ScrapeOut, SearchRequest
from wishrift.db.models import User
from wishrift.services.alerts import AlertService, triggered_alerts
from wishrift.services.items import ItemService
from wishrift.services.search import ProductSearchService
from wishrift.storage import Storage

router = APIRouter(prefix="/items", tags=["items"])


@router.post("/search", response_model=list[ScrapedProductOut])
def search_products(
    payload: SearchRequest,
    search: ProductSearchService = Depends(get_search_service),
):
    return search.search(payload.query)


@router.get("/{item_id}", response_model=ItemOut)
def get_item(
    item_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return readable_item(storage, item_id, user.id)


@router.put("/{item_id}", response_model=ItemOut)
def update_item(
    item_id: int,
    payload: ItemUpdate,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ItemService = Depends(item_service),
):
    owned_item(storage, item_id, user.id)
    return service.update_item(item_id, payload.model_dump(exclude_unset=True))


@router.delete("/{item_id}", status_code=204)
def delete_item(
    item_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ItemService = Depends(item_service),
):
    owned_item(storage, item_id, user.id)
    service.delete_item(item_id)
    return Response(status_code=204)


@router.get("/{item_id}/history", response_model=list[PriceHistoryOut])
def get_price_history(
    item_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ItemService = Depends(item_service),
):
    readable_item(storage, item_id, user.id)
    return service.price_history(item_id)


@router.post("/{item_id}/history", response_model=PriceHistoryOut, status_code=201)
def add_price_point(
    item_id: int,
    payload: PricePointIn,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ItemService = Depends(item_service),
):
    owned_item(storage, item_id, user.id)
    return service.record_price(item_id, payload.price, payload.date)


@router.get("/{item_id}/alerts", response_model=list[AlertOut])
def list_alerts(
    item_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    alerts: AlertService = Depends(alert_service),
):
    owned_item(storage, item_id, user.id)
    return alerts.list_alerts(item_id)


@router.post("/{item_id}/alerts", response_model=AlertOut, status_code=201)
def create_alert(
    item_id: int,
    payload: AlertCreate,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    alerts: AlertService = Depends(alert_service),
):
    owned_item(storage, item_id, user.id)
    return alerts.set_price_alert(item_id, payload.target_price, payload.is_active)


@router.post("/{item_id}/evaluate-alerts", response_model=list[AlertOut])
def evaluate_alerts(
    item_id: int,
    payload: EvaluateRequest,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    alerts: AlertService = Depends(alert_service),
):
    owned_item(storage, item_id, user.id)
    return alerts.evaluate_alerts(item_id, payload.price)


@router.get("/{item_id}/listings", response_model=list[ProductListingOut])
def list_listings(
    item_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ItemService = Depends(item_service),
):
    readable_item(storage, item_id, user.id)
    return service.list_listings(item_id)


@router.post("/{item_id}/scrape", response_model=ScrapeOut)
def scrape_item(
    item_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    service: ItemService = Depends(item_service),
    search: ProductSearchService = Depends(get_search_service),
):
    item = owned_item(storage, item_id, user.id)

    results = search.search(item.name)
    listings = service.record_listings(item_id, results)
    item, applied = service.apply_lowest_listing(item_id, results)

    return {
        "item": item,
        "listings": listings,
        "applied": applied,
        "triggered_alerts": triggered_alerts(
            storage.list_alerts(item_id), item.current_price
        ),
    }
