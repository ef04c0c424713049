# src/app/infra/db/base.py
"""
Abstract base classes for the recipe and source repositories.
This interface allows swapping the document store for an in-memory fake.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from src.app.domain.models import Recipe, Source


class RecipeRepository(ABC):
    """
    Abstract interface for recipe persistence.

    Implementations:
    - MongoRecipeRepository: MongoDB collection
    - InMemoryRecipeRepository: dict-backed, for tests and local runs

    Every method takes the caller's deadline in seconds and raises
    StoreTimeoutError if it expires.
    """

    @abstractmethod
    def list_all(self, *, timeout: float) -> list[Recipe]:
        """
        Return all stored recipes.

        Returns:
            List of recipes, empty when the collection is empty
        """
        pass

    @abstractmethod
    def get_by_id(self, recipe_id: str, *, timeout: float) -> Recipe:
        """
        Get a recipe by its identifier.

        Args:
            recipe_id: 24-hex-character identifier

        Raises:
            IdentifierNotValidError: If recipe_id is malformed
            EntityNotFoundError: If no recipe matches
        """
        pass

    @abstractmethod
    def add(self, recipe: Recipe, *, timeout: float) -> Recipe:
        """
        Insert a recipe under a freshly generated identifier.

        Any identifier already on `recipe` is overwritten; the same
        instance is returned carrying the new one.
        """
        pass

    @abstractmethod
    def update(self, recipe: Recipe, *, timeout: float) -> None:
        """
        Replace the stored recipe with the same identifier.

        Replacing an identifier that is not stored is a no-op.
        """
        pass

    @abstractmethod
    def delete(self, recipe: Recipe, *, timeout: float) -> None:
        """Remove the stored recipe with the same identifier."""
        pass


class SourceRepository(ABC):
    """
    Abstract interface for source persistence.

    Implementations:
    - MongoSourceRepository: MongoDB collection
    - InMemorySourceRepository: dict-backed, for tests and local runs
    """

    @abstractmethod
    def list_all(self, *, timeout: float) -> list[Source]:
        pass

    @abstractmethod
    def get_by_id(self, source_id: str, *, timeout: float) -> Source:
        """
        Raises:
            IdentifierNotValidError: If source_id is malformed
            EntityNotFoundError: If no source matches
        """
        pass

    @abstractmethod
    def add(self, source: Source, *, timeout: float) -> Source:
        """
        Validate the source type and insert under a new identifier.

        Raises:
            SourceTypeNotValidError: If source.type is not a SourceType
        """
        pass

    @abstractmethod
    def update(self, source: Source, *, timeout: float) -> None:
        """Replace the stored source. The type is not re-validated."""
        pass

    @abstractmethod
    def delete(self, source: Source, *, timeout: float) -> None:
        pass
