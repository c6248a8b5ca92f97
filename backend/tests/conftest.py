import random
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wishrift.api.deps import get_search_service, get_storage
from wishrift.core.config import AffiliateSettings, settings
from wishrift.db.models import Base
from wishrift.main import app
from wishrift.marketplaces.demo import DemoMarketplace
from wishrift.services.alerts import AlertService
from wishrift.services.items import ItemService
from wishrift.services.search import ProductSearchService
from wishrift.services.sharing import SharingService
from wishrift.services.users import UserService
from wishrift.services.wishlists import WishlistService
from wishrift.storage import MemoryStorage, SqlStorage


class FakeClock:
    """Returns a strictly increasing UTC time, one second per call."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def sql_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def sql_storage(sql_session):
    return SqlStorage(sql_session)


@pytest.fixture
def owner(storage, clock):
    return UserService(storage, clock).upsert_user("user-1", "alice")


@pytest.fixture
def wishlists(storage, clock):
    return WishlistService(storage, clock)


@pytest.fixture
def items(storage, clock):
    return ItemService(storage, clock)


@pytest.fixture
def alerts(storage, clock):
    return AlertService(storage, clock)


@pytest.fixture
def sharing(storage, clock):
    return SharingService(storage, clock)


@pytest.fixture
def wishlist(wishlists, owner):
    return wishlists.create_wishlist(owner.id, "Gaming", "Consoles to buy")


def item_fields(**overrides):
    fields = {
        "name": "Sony PlayStation 5",
        "description": "Next-gen gaming console",
        "current_price": 49999,
        "original_price": 49999,
        "product_url": "https://www.bestbuy.com/site/ps5/6426149.p",
        "store": "Best Buy",
        "category": "Electronics",
        "image_url": None,
        "is_favorite": True,
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def search_service():
    return ProductSearchService(
        AffiliateSettings(),
        sources=[DemoMarketplace(rng=random.Random(7))],
    )


def token_for(user_id: str, username: str, **claims) -> str:
    payload = {"sub": user_id, "preferred_username": username, **claims}
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def auth(user_id: str = "user-1", username: str = "alice") -> dict:
    return {"Authorization": f"Bearer {token_for(user_id, username)}"}


@pytest.fixture
def client(storage, search_service):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_search_service] = lambda: search_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
