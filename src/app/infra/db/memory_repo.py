# src/app/infra/db/memory_repo.py
"""
In-memory repositories with the same semantics as the Mongo ones.
Used by the test suite and for running the API without a database.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from typing import Optional

from bson import ObjectId

from src.app.domain.errors import (
    EntityNotFoundError,
    IdentifierNotValidError,
    SourceTypeNotValidError,
    StoreTimeoutError,
)
from src.app.domain.models import Recipe, Source, SourceType, parse_object_id
from src.app.infra.db.base import RecipeRepository, SourceRepository

logger = logging.getLogger(__name__)


class _InMemoryStore:
    """
    Insertion-ordered dict of records guarded by a lock.

    `latency_seconds` simulates a slow store: a call whose latency exceeds
    its timeout waits out the timeout and raises StoreTimeoutError.
    """

    def __init__(self, entity: str, latency_seconds: float = 0.0):
        self.entity = entity
        self.latency_seconds = latency_seconds
        self._records: dict[ObjectId, object] = {}
        self._lock = threading.Lock()

    def wait(self, operation: str, timeout: float) -> None:
        if self.latency_seconds <= 0:
            return
        if self.latency_seconds > timeout:
            time.sleep(timeout)
            logger.error("Store timeout during %s after %ss", operation, timeout)
            raise StoreTimeoutError(operation, timeout)
        time.sleep(self.latency_seconds)

    def parse_id(self, entity_id: str) -> ObjectId:
        try:
            return parse_object_id(entity_id)
        except ValueError:
            raise IdentifierNotValidError(self.entity, entity_id)

    def values(self) -> list:
        with self._lock:
            return list(self._records.values())

    def get(self, object_id: ObjectId) -> Optional[object]:
        with self._lock:
            return self._records.get(object_id)

    def insert(self, object_id: ObjectId, record: object) -> None:
        with self._lock:
            self._records[object_id] = record

    def replace(self, object_id: ObjectId, record: object) -> bool:
        with self._lock:
            if object_id not in self._records:
                return False
            self._records[object_id] = record
            return True

    def remove(self, object_id: ObjectId) -> None:
        with self._lock:
            self._records.pop(object_id, None)


def _copy_recipe(recipe: Recipe) -> Recipe:
    return replace(recipe, allergens=list(recipe.allergens))


class InMemoryRecipeRepository(RecipeRepository):
    def __init__(self, latency_seconds: float = 0.0):
        self._store = _InMemoryStore("recipe", latency_seconds)

    def list_all(self, *, timeout: float) -> list[Recipe]:
        self._store.wait("list recipes", timeout)
        return [_copy_recipe(recipe) for recipe in self._store.values()]

    def get_by_id(self, recipe_id: str, *, timeout: float) -> Recipe:
        object_id = self._store.parse_id(recipe_id)
        self._store.wait("get recipe", timeout)
        recipe = self._store.get(object_id)
        if recipe is None:
            raise EntityNotFoundError("recipe", recipe_id)
        return _copy_recipe(recipe)

    def add(self, recipe: Recipe, *, timeout: float) -> Recipe:
        self._store.wait("insert recipe", timeout)
        recipe.id = ObjectId()
        self._store.insert(recipe.id, _copy_recipe(recipe))
        return recipe

    def update(self, recipe: Recipe, *, timeout: float) -> None:
        self._store.wait("replace recipe", timeout)
        if not self._store.replace(recipe.id, _copy_recipe(recipe)):
            logger.warning("Replace matched no recipe: id=%s", recipe.id)

    def delete(self, recipe: Recipe, *, timeout: float) -> None:
        self._store.wait("delete recipe", timeout)
        self._store.remove(recipe.id)


class InMemorySourceRepository(SourceRepository):
    def __init__(self, latency_seconds: float = 0.0):
        self._store = _InMemoryStore("source", latency_seconds)

    def list_all(self, *, timeout: float) -> list[Source]:
        self._store.wait("list sources", timeout)
        return [replace(source) for source in self._store.values()]

    def get_by_id(self, source_id: str, *, timeout: float) -> Source:
        object_id = self._store.parse_id(source_id)
        self._store.wait("get source", timeout)
        source = self._store.get(object_id)
        if source is None:
            raise EntityNotFoundError("source", source_id)
        return replace(source)

    def add(self, source: Source, *, timeout: float) -> Source:
        if not SourceType.is_valid(source.type):
            raise SourceTypeNotValidError(source.type)
        self._store.wait("insert source", timeout)
        source.id = ObjectId()
        self._store.insert(source.id, replace(source))
        return source

    def update(self, source: Source, *, timeout: float) -> None:
        self._store.wait("replace source", timeout)
        if not self._store.replace(source.id, replace(source)):
            logger.warning("Replace matched no source: id=%s", source.id)

    def delete(self, source: Source, *, timeout: float) -> None:
        self._store.wait("delete source", timeout)
        self._store.remove(source.id)
