from typing import Iterable

import structlog

from wishrift.core.errors import NotFoundError
from wishrift.core.pricing import validate_cents
from wishrift.db.models import PriceAlert
from wishrift.services.base import BaseService

logger = structlog.get_logger(__name__)


def triggered_alerts(alerts: Iterable[PriceAlert], price: int) -> list[PriceAlert]:
    """Alerts that fire for `price`: active ones whose target is at or above it."""
    return [alert for alert in alerts if alert.is_triggered_by(price)]


def _target(value) -> int:
    return validate_cents(value, "targetPrice", allow_zero=False)


class AlertService(BaseService):
    def _item(self, item_id: int):
        item = self.storage.get_item(item_id)
        if item is None:
            raise NotFoundError("Item", item_id)
        return item

    def get_alert(self, alert_id: int) -> PriceAlert:
        alert = self.storage.get_alert(alert_id)
        if alert is None:
            raise NotFoundError("Alert", alert_id)
        return alert

    def list_alerts(self, item_id: int) -> list[PriceAlert]:
        return self.storage.list_alerts(item_id)

    def list_alerts_for_user(self, user_id: str) -> list[PriceAlert]:
        return self.storage.list_alerts_for_user(user_id)

    def set_price_alert(
        self, item_id: int, target_price: int, is_active: bool = True
    ) -> PriceAlert:
        self._item(item_id)
        target_price = _target(target_price)

        with self.storage.unit_of_work():
            alert = self.storage.add_alert(
                PriceAlert(
                    item_id=item_id,
                    target_price=target_price,
                    is_active=bool(is_active),
                    created_at=self.clock(),
                )
            )

        logger.info(
            "alert.created", alert_id=alert.id, item_id=item_id, target=target_price
        )
        return alert

    def update_alert(self, alert_id: int, **changes) -> PriceAlert:
        alert = self.get_alert(alert_id)

        with self.storage.unit_of_work():
            if changes.get("target_price") is not None:
                alert.target_price = _target(changes["target_price"])
            if changes.get("is_active") is not None:
                alert.is_active = bool(changes["is_active"])
            self.storage.save(alert)

        return alert

    def delete_alert(self, alert_id: int) -> bool:
        alert = self.storage.get_alert(alert_id)
        if alert is None:
            return False

        with self.storage.unit_of_work():
            self.storage.delete_alert(alert)
        return True

    def evaluate_alerts(self, item_id: int, new_price: int) -> list[PriceAlert]:
        """
        Alerts of the item that a price of `new_price` would trigger.

        Reads only; acting on the result (notifying, deactivating) is left to
        the caller. An item without alerts yields an empty list.
        """
        self._item(item_id)
        new_price = validate_cents(new_price, "price")
        return triggered_alerts(self.storage.list_alerts(item_id), new_price)
