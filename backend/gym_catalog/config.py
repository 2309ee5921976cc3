"""
Application configuration settings.
Reads from environment variables and .env file.
"""
import os
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors_origins() -> list[str]:
    """
    Parse CORS_ORIGINS from environment variable.

    Comma-separated, e.g. "https://admin.mygym.fr,https://mygym.fr".
    Falls back to the local back-office origins.
    """
    cors_env = os.environ.get("CORS_ORIGINS", "")
    if cors_env:
        return [origin.strip() for origin in cors_env.split(",") if origin.strip()]
    return [
        "http://localhost:3000",
        "http://localhost:8080",
    ]


class Settings(BaseSettings):
    """Application settings."""

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/gym_catalog"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_ECHO: bool = False

    # Redis: one URL for everything unless split per concern
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_REDIS_URL: str | None = None
    CELERY_BROKER_URL: str | None = None
    CELERY_RESULT_BACKEND: str | None = None

    # API
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Gym Route Catalog"
    CORS_ORIGINS: list[str] = parse_cors_origins()

    # Runtime
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Route summaries, cached per (route id, updated_at)
    ROUTE_SUMMARY_TTL: int = 28 * 24 * 60 * 60

    # Mount/dismount batches
    BATCH_MAX_SIZE: int = 500
    BATCH_MAX_CONCURRENCY: int = 8

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    @property
    def cache_redis_url(self) -> str:
        """Redis URL of the route summary cache."""
        return self.CACHE_REDIS_URL or self.REDIS_URL

    @property
    def celery_broker_url(self) -> str:
        return self.CELERY_BROKER_URL or self.REDIS_URL

    @property
    def celery_result_backend(self) -> str:
        return self.CELERY_RESULT_BACKEND or self.REDIS_URL


settings = Settings()
