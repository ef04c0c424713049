# src/app/deps.py (keeps the Mongo client singleton, exposed as dependencies)

from __future__ import annotations

import threading
import time
from dataclasses import dataclass

from fastapi import Depends
from pymongo import MongoClient

from src.app.config import Settings, get_settings
from src.app.domain.errors import StoreTimeoutError
from src.app.infra.db.base import RecipeRepository, SourceRepository
from src.app.infra.db.mongo_repo import (
    MongoRecipeRepository,
    MongoSourceRepository,
    create_mongo_client,
)

_client: MongoClient | None = None
_client_lock = threading.Lock()


def get_mongo_client(settings: Settings = Depends(get_settings)) -> MongoClient:
    global _client
    with _client_lock:
        if _client is None:
            _client = create_mongo_client(settings)
        return _client


def close_mongo_client() -> None:
    global _client
    with _client_lock:
        if _client is None:
            return None
        _client.close()
        _client = None


def get_recipe_repository(
    client: MongoClient = Depends(get_mongo_client),
    settings: Settings = Depends(get_settings),
) -> RecipeRepository:
    database = client[settings.RECIPEKEEPER_DATABASE_NAME]
    return MongoRecipeRepository(database[settings.RECIPEKEEPER_RECIPES_COLLECTION])


def get_source_repository(
    client: MongoClient = Depends(get_mongo_client),
    settings: Settings = Depends(get_settings),
) -> SourceRepository:
    database = client[settings.RECIPEKEEPER_DATABASE_NAME]
    return MongoSourceRepository(database[settings.RECIPEKEEPER_SOURCES_COLLECTION])


@dataclass(frozen=True)
class RequestDeadline:
    """
    One deadline shared by every store call a request makes.

    Each call gets only the time left; once it is used up the next call
    fails with StoreTimeoutError without touching the store.
    """
    timeout_seconds: float
    expires_at: float

    @classmethod
    def start(cls, timeout_seconds: float) -> RequestDeadline:
        return cls(timeout_seconds=timeout_seconds, expires_at=time.monotonic() + timeout_seconds)

    def remaining(self, operation: str) -> float:
        left = self.expires_at - time.monotonic()
        if left <= 0:
            raise StoreTimeoutError(operation, self.timeout_seconds)
        return left


def get_request_deadline(settings: Settings = Depends(get_settings)) -> RequestDeadline:
    return RequestDeadline.start(settings.REQUEST_TIMEOUT_SECONDS)
