import pytest

from conftest import item_fields
from wishrift.core.errors import NotFoundError, ValidationError
from wishrift.services.alerts import triggered_alerts


@pytest.fixture
def item(items, wishlist):
    return items.create_item(wishlist.id, item_fields(current_price=49999))


def test_price_drop_scenario(items, alerts, item):
    """Price drops from 499.99 to 449.99 with an alert at 450.00."""
    assert [h.price for h in items.price_history(item.id)] == [49999]

    items.update_item(item.id, {"current_price": 44999})
    assert [h.price for h in items.price_history(item.id)] == [49999, 44999]

    alert = alerts.set_price_alert(item.id, 45000, True)

    assert [a.id for a in alerts.evaluate_alerts(item.id, 44999)] == [alert.id]
    assert alerts.evaluate_alerts(item.id, 45500) == []


def test_target_price_is_inclusive(alerts, item):
    alert = alerts.set_price_alert(item.id, 45000)

    assert alerts.evaluate_alerts(item.id, 45000) == [alert]
    assert alerts.evaluate_alerts(item.id, 45001) == []


def test_inactive_alerts_never_fire(alerts, item):
    alerts.set_price_alert(item.id, 45000, is_active=False)

    assert alerts.evaluate_alerts(item.id, 1) == []


def test_no_alerts_is_not_an_error(alerts, item):
    assert alerts.evaluate_alerts(item.id, 100) == []


def test_several_alerts_per_item(alerts, item):
    low = alerts.set_price_alert(item.id, 40000)
    high = alerts.set_price_alert(item.id, 48000)
    alerts.set_price_alert(item.id, 49000, is_active=False)

    assert alerts.evaluate_alerts(item.id, 47000) == [high]
    assert set(a.id for a in alerts.evaluate_alerts(item.id, 39000)) == {low.id, high.id}


@pytest.mark.parametrize("target", [0, -100])
def test_target_must_be_positive(alerts, item, target):
    with pytest.raises(ValidationError):
        alerts.set_price_alert(item.id, target)


def test_alert_needs_item(alerts):
    with pytest.raises(NotFoundError):
        alerts.set_price_alert(12345, 1000)
    with pytest.raises(NotFoundError):
        alerts.evaluate_alerts(12345, 1000)


def test_update_and_delete(alerts, item):
    alert = alerts.set_price_alert(item.id, 45000)

    alerts.update_alert(alert.id, is_active=False)
    assert alerts.evaluate_alerts(item.id, 100) == []

    alerts.update_alert(alert.id, target_price=30000, is_active=True)
    assert alerts.get_alert(alert.id).target_price == 30000

    with pytest.raises(ValidationError):
        alerts.update_alert(alert.id, target_price=0)

    assert alerts.delete_alert(alert.id) is True
    assert alerts.delete_alert(alert.id) is False
    assert alerts.list_alerts(item.id) == []


def test_alerts_for_user_spans_lists(wishlists, items, alerts, owner):
    first = wishlists.create_wishlist(owner.id, "One")
    second = wishlists.create_wishlist(owner.id, "Two")
    a = items.create_item(first.id, item_fields())
    b = items.create_item(second.id, item_fields(name="Xbox Series X"))
    alerts.set_price_alert(a.id, 100)
    alerts.set_price_alert(b.id, 200)

    assert sorted(x.target_price for x in alerts.list_alerts_for_user(owner.id)) == [100, 200]
    assert alerts.list_alerts_for_user("someone-else") == []


def test_triggered_alerts_is_pure(alerts, item):
    alert = alerts.set_price_alert(item.id, 45000)

    assert triggered_alerts([alert], 44000) == [alert]
    assert alert.is_active is True
