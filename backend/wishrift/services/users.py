import structlog

from wishrift.db.models import User
from wishrift.services.base import BaseService, require_text

logger = structlog.get_logger(__name__)

PROFILE_FIELDS = ("email", "first_name", "last_name", "bio", "profile_image_url")


class UserService(BaseService):
    def get_user(self, user_id: str) -> User | None:
        return self.storage.get_user(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return self.storage.get_user_by_username(username)

    def _free_username(self, username: str, user_id: str) -> str:
        """
        `username`, or the first `username-N` not held by another user.

        Usernames come from token claims and are not guaranteed unique across
        identities; the stored one must be.
        """
        candidate, n = username, 2
        while True:
            holder = self.storage.get_user_by_username(candidate)
            if holder is None or holder.id == user_id:
                return candidate
            candidate = f"{username}-{n}"
            n += 1

    def upsert_user(self, user_id: str, username: str, **profile) -> User:
        """
        Insert the user, or update the stored profile in place.

        Profile values of None are ignored on update, so a token that omits a
        claim keeps what is stored.
        """
        user_id = require_text(user_id, "id")
        username = require_text(username, "username")
        now = self.clock()

        with self.storage.unit_of_work():
            username = self._free_username(username, user_id)
            user = self.storage.get_user(user_id)
            if user is None:
                user = User(id=user_id, username=username, created_at=now, updated_at=now)
                for name in PROFILE_FIELDS:
                    setattr(user, name, profile.get(name))
                self.storage.add_user(user)
                logger.info("user.created", user_id=user_id, username=username)
                return user

            changed = user.username != username
            user.username = username
            for name in PROFILE_FIELDS:
                value = profile.get(name)
                if value is not None and getattr(user, name) != value:
                    setattr(user, name, value)
                    changed = True
            if changed:
                user.updated_at = now
                self.storage.save(user)
            return user
