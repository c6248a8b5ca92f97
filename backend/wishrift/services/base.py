from datetime import datetime, timezone
from typing import Callable

from wishrift.core.errors import ValidationError
from wishrift.storage.base import Storage


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def require_text(value, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} must not be empty", field)
    return str(value).strip()


class BaseService:
    def __init__(self, storage: Storage, clock: Callable[[], datetime] | None = None):
        self.storage = storage
        self.clock = clock or utcnow
