"""
Same domain rules, run against SQLAlchemy on in-memory SQLite.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from conftest import FakeClock, item_fields
from wishrift.core.errors import PersistenceError
from wishrift.db.models import PriceHistory, SharedAccess, WishListItem
from wishrift.services.alerts import AlertService
from wishrift.services.items import ItemService
from wishrift.services.sharing import SharingService
from wishrift.services.users import UserService
from wishrift.services.wishlists import WishlistService


@pytest.fixture
def sql_clock():
    return FakeClock()


@pytest.fixture
def alice(sql_storage, sql_clock):
    return UserService(sql_storage, sql_clock).upsert_user("user-1", "alice")


@pytest.fixture
def sql_wishlist(sql_storage, sql_clock, alice):
    return WishlistService(sql_storage, sql_clock).create_wishlist(alice.id, "Gaming")


def test_history_and_alert_scenario(sql_storage, sql_clock, sql_wishlist):
    items = ItemService(sql_storage, sql_clock)
    alerts = AlertService(sql_storage, sql_clock)

    item = items.create_item(sql_wishlist.id, item_fields(current_price=49999))
    items.update_item(item.id, {"current_price": 44999})
    items.update_item(item.id, {"current_price": 44999})
    alert = alerts.set_price_alert(item.id, 45000, True)

    assert [h.price for h in items.price_history(item.id)] == [49999, 44999]
    assert [a.id for a in alerts.evaluate_alerts(item.id, 44999)] == [alert.id]
    assert alerts.evaluate_alerts(item.id, 45500) == []


def test_share_id_lookup(sql_storage, sql_clock, alice):
    wishlists = WishlistService(sql_storage, sql_clock)
    created = wishlists.create_wishlist(alice.id, "Books", "Sci-fi")

    found = wishlists.get_by_share_id(created.share_id)

    assert (found.id, found.title, found.description) == (created.id, "Books", "Sci-fi")


def test_history_failure_rolls_back_item(sql_storage, sql_session, sql_clock, sql_wishlist, monkeypatch):
    def fail(entry):
        raise OperationalError("INSERT INTO price_history", {}, Exception("disk I/O error"))

    monkeypatch.setattr(sql_storage, "add_price_history", fail)

    with pytest.raises(PersistenceError):
        ItemService(sql_storage, sql_clock).create_item(sql_wishlist.id, item_fields())

    assert sql_session.scalar(select(func.count()).select_from(WishListItem)) == 0


def test_delete_wishlist_cascades(sql_storage, sql_session, sql_clock, sql_wishlist):
    bob = UserService(sql_storage, sql_clock).upsert_user("user-2", "bob")
    items = ItemService(sql_storage, sql_clock)
    item = items.create_item(sql_wishlist.id, item_fields())
    AlertService(sql_storage, sql_clock).set_price_alert(item.id, 100)
    SharingService(sql_storage, sql_clock).share_wishlist(sql_wishlist.id, bob.id)

    WishlistService(sql_storage, sql_clock).delete_wishlist(sql_wishlist.id)

    for model in (WishListItem, PriceHistory, SharedAccess):
        assert sql_session.scalar(select(func.count()).select_from(model)) == 0


def test_shared_with_and_alerts_for_user(sql_storage, sql_clock, sql_wishlist, alice):
    bob = UserService(sql_storage, sql_clock).upsert_user("user-2", "bob")
    sharing = SharingService(sql_storage, sql_clock)
    item = ItemService(sql_storage, sql_clock).create_item(sql_wishlist.id, item_fields())
    alerts = AlertService(sql_storage, sql_clock)
    alerts.set_price_alert(item.id, 40000)

    sharing.share_wishlist(sql_wishlist.id, bob.id)

    assert [w.id for w in sharing.shared_with_me(bob.id)] == [sql_wishlist.id]
    assert [a.target_price for a in alerts.list_alerts_for_user(alice.id)] == [40000]
    assert alerts.list_alerts_for_user(bob.id) == []


def test_upsert_updates_existing_row(sql_storage, sql_clock):
    users = UserService(sql_storage, sql_clock)
    users.upsert_user("sub-9", "dana")
    users.upsert_user("sub-9", "dana", email="dana@example.com")

    assert sql_storage.get_user("sub-9").email == "dana@example.com"
    assert sql_storage.get_user_by_username("dana").id == "sub-9"


def test_second_identity_with_taken_username(sql_storage, sql_clock):
    users = UserService(sql_storage, sql_clock)
    first = users.upsert_user("sub-a", "alice", email="a@example.com")

    second = users.upsert_user("sub-b", "alice", email="a@example.com")
    again = users.upsert_user("sub-b", "alice")

    assert first.username == "alice"
    assert second.username == again.username == "alice-2"
    assert sql_storage.get_user_by_username("alice").id == "sub-a"
    assert sql_storage.get_user_by_username("alice-2").id == "sub-b"


def test_missing_claims_keep_stored_profile(sql_storage, sql_clock):
    users = UserService(sql_storage, sql_clock)
    users.upsert_user("sub-d", "dee", email="d@example.com", first_name="Dee")

    users.upsert_user("sub-d", "dee", email=None, first_name=None)

    user = sql_storage.get_user("sub-d")
    assert user.email == "d@example.com"
    assert user.first_name == "Dee"
