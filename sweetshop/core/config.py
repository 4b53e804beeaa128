# sweetshop/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - JWT_SECRET (signing secret for access tokens)

    Optional:
      - DATABASE_URL (defaults to a local SQLite file)
      - ACCESS_TOKEN_EXPIRE_MINUTES
      - ENFORCE_ADMIN_ROLE (set to false to let any authenticated
        user run admin inventory operations)
    """

    PROJECT_NAME: str = "Sweet Shop API"
    API_PREFIX: str = "/api"

    # DB config
    DATABASE_URL: str = "sqlite:///./sweetshop.db"

    # JWT signing / verification
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Role policy for create / update / delete / restock
    ENFORCE_ADMIN_ROLE: bool = True

    CORS_ORIGINS: list[str] = [
        "http://localhost:8080",
        "http://127.0.0.1:8080",
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
