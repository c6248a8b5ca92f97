from datetime import datetime
from typing import Optional

from wishrift.api.schemas.base import CamelModel


class AlertCreate(CamelModel):
    target_price: int
    is_active: bool = True


class AlertUpdate(CamelModel):
    target_price: Optional[int] = None
    is_active: Optional[bool] = None


class AlertOut(CamelModel):
    id: int
    item_id: int
    target_price: int
    is_active: bool
    created_at: datetime


class EvaluateRequest(CamelModel):
    price: int
