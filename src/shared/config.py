"""Application settings, read from the environment (and an optional .env file)."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "AllInTown API"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str | None = None
    LOG_DIR: str | None = None

    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "allintown"
    MONGO_TIMEOUT_MS: int = 5000

    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    # Attempts at a conditional cart write before giving up with a conflict
    CART_UPDATE_RETRIES: int = 5
    ORDER_CODE_PREFIX: str = "ORD"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
