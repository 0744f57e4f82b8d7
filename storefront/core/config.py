# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Everything has a development default so the API boots without a .env.
    In production override at least:
      - DATABASE_URL
      - SESSION_SECRET (signs the admin session cookie)
      - ADMIN_PASSWORD
    """

    PROJECT_NAME: str = "Storefront API"
    API_PREFIX: str = "/api"

    # "production" turns on secure cookies and hides reset tokens
    ENVIRONMENT: str = "development"

    # Record store (products, coupons, orders, sales, users, ...)
    DATABASE_URL: str = "sqlite:///./.storefront/shop.db"

    # Directory for flat JSON stores (cart sessions, preview drafts)
    STORE_DIR: str = ".storefront"

    # Cookie sessions
    SESSION_SECRET: str = "change-me-in-production"
    SESSION_ALG: str = "HS256"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 8
    CART_COOKIE_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 30

    # Built-in back office account
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin12345"
    ADMIN_ROLE: str = "Super Admin"

    PREVIEW_DRAFT_TTL_MINUTES: int = 20
    PASSWORD_RESET_TTL_MINUTES: int = 30
    PASSWORD_MIN_LENGTH: int = 6

    NOTIFY_ADMIN_PAID_ORDER: bool = True

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # SMTP (password reset e-mails)
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM_EMAIL: str | None = None
    SMTP_FROM_NAME: str = "Storefront"
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
