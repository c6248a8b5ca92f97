import os
from dataclasses import dataclass, field


def _csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class AffiliateSettings:
    """
    Credentials for affiliate networks and retailer APIs.

    Built once at startup and handed to the search service; nothing reads
    these keys from the environment after that.
    """

    affiliate_tag: str = "wishrift-20"
    keys: dict[str, str] = field(default_factory=dict)

    KEY_NAMES = (
        "RAKUTEN_API_KEY",
        "SKIMLINKS_API_KEY",
        "CJ_AFFILIATE_API_KEY",
        "AMAZON_API_KEY",
        "WALMART_API_KEY",
    )

    @classmethod
    def from_env(cls) -> "AffiliateSettings":
        keys = {name: os.environ[name] for name in cls.KEY_NAMES if os.getenv(name)}
        return cls(
            affiliate_tag=os.getenv("AFFILIATE_TAG", "wishrift-20"),
            keys=keys,
        )

    def get_key(self, name: str) -> str | None:
        return self.keys.get(name)

    def has_any_keys(self) -> bool:
        return bool(self.keys)


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./wishrift.db")
    # production schemas are managed by alembic
    DB_CREATE_ALL = os.getenv(
        "DB_CREATE_ALL", str(DATABASE_URL.startswith("sqlite"))
    ).lower() == "true"

    AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET", "change-me-wishrift-development-secret")
    AUTH_JWT_ALGORITHM = os.getenv("AUTH_JWT_ALGORITHM", "HS256")
    AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE") or None

    CORS_ORIGINS = _csv(
        os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )

    SEARCH_CACHE_TTL_SECONDS = int(os.getenv("SEARCH_CACHE_TTL_SECONDS", "3600"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_JSON = os.getenv("LOG_JSON", "false").lower() == "true"

    def __init__(self):
        self.affiliate = AffiliateSettings.from_env()


settings = Settings()
