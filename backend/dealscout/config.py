"""Application configuration via Pydantic Settings."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        frozen=True,
    )

    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Persistence
    DATABASE_URL: str = "sqlite+aiosqlite:///./deals.db"
    DEALS_TABLE_NAME: str = "deals"
    DEAL_TTL_HOURS: int = 48
    BATCH_WRITE_SIZE: int = Field(default=25, ge=1, le=25)

    # Deal computation
    DEFAULT_MIN_DISCOUNT_PCT: float = 30.0

    # Fetching
    FETCH_TIMEOUT_SECONDS: float = 15.0
    FETCH_MAX_REDIRECTS: int = 5
    FETCH_USER_AGENT: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    TEXT_FALLBACK_MAX_CHARS: int = 20_000

    @model_validator(mode="before")
    @classmethod
    def fix_database_url(cls, data):
        """Hosted Postgres hands out postgres:// but asyncpg needs postgresql+asyncpg://"""
        if isinstance(data, dict):
            url = data.get("DATABASE_URL")
            if isinstance(url, str):
                if url.startswith("postgresql://"):
                    data["DATABASE_URL"] = url.replace("postgresql://", "postgresql+asyncpg://", 1)
                elif url.startswith("postgres://"):
                    data["DATABASE_URL"] = url.replace("postgres://", "postgresql+asyncpg://", 1)
        return data

    def fetch_headers(self) -> dict[str, str]:
        """Browser-like request headers used by the page fetcher."""
        return {
            "User-Agent": self.FETCH_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
        }


settings = Settings()
