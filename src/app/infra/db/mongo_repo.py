from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import pymongo
from bson import ObjectId
from pymongo import MongoClient, ReadPreference
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from src.app.config import Settings
from src.app.domain.errors import (
    EntityNotFoundError,
    IdentifierNotValidError,
    SourceTypeNotValidError,
    StoreError,
    StoreTimeoutError,
)
from src.app.domain.models import Recipe, Source, SourceType, parse_object_id
from src.app.infra.db.base import RecipeRepository, SourceRepository

logger = logging.getLogger(__name__)

APP_NAME = "recipe-keeper-api"


def create_mongo_client(settings: Settings) -> MongoClient:
    return MongoClient(
        settings.RECIPEKEEPER_MONGODB_CONSTR,
        appname=APP_NAME,
        serverSelectionTimeoutMS=int(settings.CONNECT_TIMEOUT_SECONDS * 1000),
    )


def ping(client: MongoClient, timeout: float) -> None:
    with _store_call("ping", timeout):
        client.admin.command("ping", read_preference=ReadPreference.PRIMARY)


@contextmanager
def _store_call(operation: str, timeout: float) -> Iterator[None]:
    try:
        with pymongo.timeout(timeout):
            yield
    except PyMongoError as error:
        if error.timeout:
            logger.error("Store timeout during %s after %ss: %s", operation, timeout, error)
            raise StoreTimeoutError(operation, timeout) from error
        logger.error("Store error during %s: %s", operation, error)
        raise StoreError(operation, str(error)) from error


def _compact(document: dict[str, Any]) -> dict[str, Any]:
    # empty values are left out of stored documents
    return {key: value for key, value in document.items() if value not in (None, "", [])}


def _recipe_to_document(recipe: Recipe) -> dict[str, Any]:
    return _compact({
        "_id": recipe.id,
        "title": recipe.title,
        "source": recipe.source_id,
        "sourceAnnotation": recipe.source_annotation,
        "category": recipe.category,
        "allergens": list(recipe.allergens),
    })


def _document_to_recipe(document: dict[str, Any]) -> Recipe:
    source = document.get("source")
    return Recipe(
        id=document["_id"],
        title=document.get("title") or "",
        source_id=source if isinstance(source, ObjectId) else None,
        source_annotation=document.get("sourceAnnotation") or "",
        category=document.get("category") or "",
        allergens=list(document.get("allergens") or []),
    )


def _source_to_document(source: Source) -> dict[str, Any]:
    return _compact({
        "_id": source.id,
        "type": source.type,
        "title": source.title,
    })


def _document_to_source(document: dict[str, Any]) -> Source:
    return Source(
        id=document["_id"],
        type=document.get("type") or "",
        title=document.get("title") or "",
    )


class MongoRecipeRepository(RecipeRepository):
    ENTITY = "recipe"

    def __init__(self, collection: Collection):
        self._collection = collection
        logger.debug("MongoRecipeRepository initialized: collection=%s", collection.name)

    def list_all(self, *, timeout: float) -> list[Recipe]:
        with _store_call("list recipes", timeout):
            documents = list(self._collection.find({}))
        return [_document_to_recipe(document) for document in documents]

    def get_by_id(self, recipe_id: str, *, timeout: float) -> Recipe:
        try:
            object_id = parse_object_id(recipe_id)
        except ValueError:
            logger.info("Not a valid recipe id: %s", recipe_id)
            raise IdentifierNotValidError(self.ENTITY, recipe_id)

        with _store_call("get recipe", timeout):
            document = self._collection.find_one({"_id": object_id})

        if document is None:
            raise EntityNotFoundError(self.ENTITY, recipe_id)
        return _document_to_recipe(document)

    def add(self, recipe: Recipe, *, timeout: float) -> Recipe:
        recipe.id = ObjectId()

        with _store_call("insert recipe", timeout):
            self._collection.insert_one(_recipe_to_document(recipe))

        logger.info("Inserted recipe: id=%s", recipe.id)
        return recipe

    def update(self, recipe: Recipe, *, timeout: float) -> None:
        with _store_call("replace recipe", timeout):
            result = self._collection.replace_one({"_id": recipe.id}, _recipe_to_document(recipe))

        if result.matched_count == 0:
            logger.warning("Replace matched no recipe: id=%s", recipe.id)
        else:
            logger.info("Replaced recipe: id=%s", recipe.id)

    def delete(self, recipe: Recipe, *, timeout: float) -> None:
        with _store_call("delete recipe", timeout):
            self._collection.delete_one({"_id": recipe.id})

        logger.info("Deleted recipe: id=%s", recipe.id)


class MongoSourceRepository(SourceRepository):
    ENTITY = "source"

    def __init__(self, collection: Collection):
        self._collection = collection
        logger.debug("MongoSourceRepository initialized: collection=%s", collection.name)

    def list_all(self, *, timeout: float) -> list[Source]:
        with _store_call("list sources", timeout):
            documents = list(self._collection.find({}))
        return [_document_to_source(document) for document in documents]

    def get_by_id(self, source_id: str, *, timeout: float) -> Source:
        try:
            object_id = parse_object_id(source_id)
        except ValueError:
            logger.info("Not a valid source id: %s", source_id)
            raise IdentifierNotValidError(self.ENTITY, source_id)

        with _store_call("get source", timeout):
            document = self._collection.find_one({"_id": object_id})

        if document is None:
            raise EntityNotFoundError(self.ENTITY, source_id)
        return _document_to_source(document)

    def add(self, source: Source, *, timeout: float) -> Source:
        if not SourceType.is_valid(source.type):
            raise SourceTypeNotValidError(source.type)

        source.id = ObjectId()

        with _store_call("insert source", timeout):
            self._collection.insert_one(_source_to_document(source))

        logger.info("Inserted source: id=%s, type=%s", source.id, source.type)
        return source

    def update(self, source: Source, *, timeout: float) -> None:
        with _store_call("replace source", timeout):
            result = self._collection.replace_one({"_id": source.id}, _source_to_document(source))

        if result.matched_count == 0:
            logger.warning("Replace matched no source: id=%s", source.id)
        else:
            logger.info("Replaced source: id=%s", source.id)

    def delete(self, source: Source, *, timeout: float) -> None:
        with _store_call("delete source", timeout):
            self._collection.delete_one({"_id": source.id})

        logger.info("Deleted source: id=%s", source.id)
