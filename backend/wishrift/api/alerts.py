from fastapi import APIRouter, Depends, Response

from wishrift.api.access import owned_alert
from wishrift.api.deps import alert_service, get_current_user, get_storage
from wishrift.api.schemas.alerts import AlertOut, AlertUpdate
from wishrift.db.models import User
from wishrift.services.alerts import AlertService
from wishrift.storage import Storage

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("", response_model=list[AlertOut])
def list_my_alerts(
    user: User = Depends(get_current_user),
    alerts: AlertService = Depends(alert_service),
):
    return alerts.list_alerts_for_user(user.id)


@router.put("/{alert_id}", response_model=AlertOut)
def update_alert(
    alert_id: int,
    payload: AlertUpdate,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    alerts: AlertService = Depends(alert_service),
):
    owned_alert(storage, alert_id, user.id)
    return alerts.update_alert(alert_id, **payload.model_dump(exclude_unset=True))


@router.delete("/{alert_id}", status_code=204)
def delete_alert(
    alert_id: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    alerts: AlertService = Depends(alert_service),
):
    owned_alert(storage, alert_id, user.id)
    alerts.delete_alert(alert_id)
    return Response(status_code=204)
