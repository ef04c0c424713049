from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    RECIPEKEEPER_MONGODB_CONSTR: str = Field(..., min_length=1)
    RECIPEKEEPER_DATABASE_NAME: str = "recipe-keeper"
    RECIPEKEEPER_RECIPES_COLLECTION: str = "recipes"
    RECIPEKEEPER_SOURCES_COLLECTION: str = "sources"

    REQUEST_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)
    CONNECT_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)

    APP_ENV: str = "local"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
