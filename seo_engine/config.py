"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SEOEngine"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # API
    api_v1_prefix: str = "/api/v1"

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/seo.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_echo: bool = False

    # Google Search Console (OAuth refresh-token flow)
    gsc_client_id: str | None = None
    gsc_client_secret: str | None = None
    gsc_refresh_token: str | None = None
    gsc_site_url: str | None = None
    gsc_row_limit: int = 5000

    # Shopify Admin API
    shopify_store: str | None = None
    shopify_admin_api_token: str | None = None
    shopify_api_version: str = "2024-01"
    shopify_page_size: int = 50

    http_timeout_seconds: float = 60.0

    # Opportunity analysis defaults (passed explicitly into each run)
    analysis_window_days: int = 30
    default_country: str = "NL"
    default_min_impressions: int = 100
    default_max_position: float = 20.0

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    @field_validator("database_url", mode="before")
    @classmethod
    def _normalize_database_url(cls, value: object) -> object:
        """Normalize sync database URLs to their async drivers."""
        if not isinstance(value, str):
            return value

        raw = value.strip()
        if raw.startswith("postgresql+asyncpg://") or raw.startswith("sqlite+aiosqlite://"):
            return raw
        if raw.startswith("postgresql+psycopg2://"):
            return raw.replace("postgresql+psycopg2://", "postgresql+asyncpg://", 1)
        if raw.startswith("postgresql+psycopg://"):
            return raw.replace("postgresql+psycopg://", "postgresql+asyncpg://", 1)
        if raw.startswith("postgresql://"):
            return raw.replace("postgresql://", "postgresql+asyncpg://", 1)
        if raw.startswith("postgres://"):
            return raw.replace("postgres://", "postgresql+asyncpg://", 1)
        if raw.startswith("sqlite://"):
            return raw.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return raw

    @field_validator("default_country", mode="before")
    @classmethod
    def _normalize_country(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or "NL"
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()

    return settings


settings = get_settings()
