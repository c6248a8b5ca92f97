import pytest

from conftest import item_fields
from wishrift.core.errors import NotFoundError, PersistenceError, ValidationError
from wishrift.db.models import User
from wishrift.services.users import UserService


class TestWishlists:
    def test_create_and_fetch_by_share_id(self, wishlists, owner):
        created = wishlists.create_wishlist(owner.id, "Birthday", "Things for May")

        found = wishlists.get_by_share_id(created.share_id)

        assert found.id == created.id
        assert (found.title, found.description) == ("Birthday", "Things for May")

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_title_required(self, wishlists, owner, title):
        with pytest.raises(ValidationError) as exc:
            wishlists.create_wishlist(owner.id, title)
        assert exc.value.field == "title"

    def test_share_ids_are_unique_and_url_safe(self, wishlists, owner):
        share_ids = {
            wishlists.create_wishlist(owner.id, f"List {n}").share_id for n in range(300)
        }

        assert len(share_ids) == 300
        for share_id in share_ids:
            assert len(share_id) >= 16
            assert all(c.isalnum() or c in "-_" for c in share_id)

    def test_update_keeps_share_id(self, wishlists, wishlist):
        share_id = wishlist.share_id

        updated = wishlists.update_wishlist(wishlist.id, title="Retro", description=None)

        assert updated.title == "Retro"
        assert updated.description is None
        assert updated.share_id == share_id

    def test_update_rejects_blank_title(self, wishlists, wishlist):
        with pytest.raises(ValidationError):
            wishlists.update_wishlist(wishlist.id, title=" ")

    def test_unknown_share_id(self, wishlists):
        with pytest.raises(NotFoundError):
            wishlists.get_by_share_id("does-not-exist")
        with pytest.raises(NotFoundError):
            wishlists.get_by_share_id("")

    def test_delete_cascades_to_items(self, wishlists, items, storage, wishlist):
        item = items.create_item(wishlist.id, item_fields())

        assert wishlists.delete_wishlist(wishlist.id) is True

        assert storage.get_item(item.id) is None
        assert storage.list_price_history(item.id) == []
        assert wishlists.delete_wishlist(wishlist.id) is False

    def test_lists_are_per_owner(self, wishlists, storage, clock, owner):
        other = UserService(storage, clock).upsert_user("user-2", "bob")
        wishlists.create_wishlist(owner.id, "Mine")
        wishlists.create_wishlist(other.id, "Bob's")

        assert [w.title for w in wishlists.list_wishlists(owner.id)] == ["Mine"]


class TestSharing:
    @pytest.fixture
    def bob(self, storage, clock):
        return UserService(storage, clock).upsert_user("user-2", "bob")

    def test_grant_and_revoke(self, sharing, wishlist, bob):
        assert not sharing.can_read(wishlist, bob.id)

        sharing.share_wishlist(wishlist.id, bob.id)

        assert sharing.can_read(wishlist, bob.id)
        assert [w.id for w in sharing.shared_with_me(bob.id)] == [wishlist.id]

        assert sharing.remove_shared_access(wishlist.id, bob.id) is True
        assert sharing.remove_shared_access(wishlist.id, bob.id) is False
        assert sharing.shared_with_me(bob.id) == []

    def test_grant_is_idempotent(self, sharing, wishlist, bob):
        first = sharing.share_wishlist(wishlist.id, bob.id)
        second = sharing.share_wishlist(wishlist.id, bob.id)

        assert first.id == second.id
        assert len(sharing.shared_with_me(bob.id)) == 1

    def test_owner_can_always_read(self, sharing, wishlist, owner):
        assert sharing.can_read(wishlist, owner.id)
        assert not sharing.can_read(wishlist, None)

    def test_cannot_share_with_owner(self, sharing, wishlist, owner):
        with pytest.raises(ValidationError):
            sharing.share_wishlist(wishlist.id, owner.id)

    def test_unknown_user_or_list(self, sharing, wishlist, bob):
        with pytest.raises(NotFoundError):
            sharing.share_wishlist(wishlist.id, "nobody")
        with pytest.raises(NotFoundError):
            sharing.share_wishlist(999, bob.id)

    def test_deleting_list_removes_grants(self, sharing, wishlists, wishlist, bob):
        sharing.share_wishlist(wishlist.id, bob.id)

        wishlists.delete_wishlist(wishlist.id)

        assert sharing.shared_with_me(bob.id) == []


class TestUsers:
    def test_upsert_inserts_then_updates_in_place(self, storage, clock):
        users = UserService(storage, clock)

        created = users.upsert_user("sub-1", "carol", email="c@example.com")
        updated = users.upsert_user("sub-1", "carol2", bio="hi")

        assert created is updated
        assert updated.username == "carol2"
        assert updated.email == "c@example.com"
        assert updated.bio == "hi"
        assert users.get_user_by_username("carol2").id == "sub-1"
        assert len(storage.users) == 1

    def test_taken_username_gets_a_suffix(self, storage, clock):
        users = UserService(storage, clock)
        users.upsert_user("sub-1", "carol")
        users.upsert_user("sub-2", "carol")
        users.upsert_user("sub-3", "carol")

        assert [u.username for u in storage.users.values()] == ["carol", "carol-2", "carol-3"]

    def test_storage_rejects_duplicate_username(self, storage):
        storage.add_user(User(id="sub-1", username="carol"))

        with pytest.raises(PersistenceError):
            storage.add_user(User(id="sub-2", username="carol"))

    def test_username_required(self, storage):
        with pytest.raises(ValidationError):
            UserService(storage).upsert_user("sub-1", "")
