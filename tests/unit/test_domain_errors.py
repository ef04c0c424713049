from __future__ import annotations

import pytest

from src.app.domain.errors import (
    RecipeKeeperError,
    EntityNotFoundError,
    IdentifierNotValidError,
    SourceTypeNotValidError,
    StoreError,
    StoreTimeoutError,
)


class TestRecipeKeeperError:
    def test_base_exception(self) -> None:
        error = RecipeKeeperError("Base error")
        assert str(error) == "Base error"
        assert isinstance(error, Exception)


class TestEntityNotFoundError:
    def test_includes_entity_and_id(self) -> None:
        error = EntityNotFoundError("recipe", "5f1d7f6c2b3a4e5d6c7b8a90")
        assert str(error) == "recipe with id '5f1d7f6c2b3a4e5d6c7b8a90' not found"
        assert error.entity == "recipe"
        assert error.entity_id == "5f1d7f6c2b3a4e5d6c7b8a90"


class TestIdentifierNotValidError:
    def test_includes_entity_and_id(self) -> None:
        error = IdentifierNotValidError("source", "not-an-id")
        assert str(error) == "source id 'not-an-id' not valid"
        assert error.entity == "source"
        assert error.entity_id == "not-an-id"


class TestSourceTypeNotValidError:
    def test_includes_type(self) -> None:
        error = SourceTypeNotValidError("magazine")
        assert "magazine" in str(error)
        assert error.source_type == "magazine"


class TestStoreError:
    def test_includes_operation_and_reason(self) -> None:
        error = StoreError("insert recipe", "connection refused")
        assert "insert recipe" in str(error)
        assert "connection refused" in str(error)
        assert error.operation == "insert recipe"
        assert error.reason == "connection refused"


class TestStoreTimeoutError:
    def test_includes_timeout_info(self) -> None:
        error = StoreTimeoutError("list sources", 10)
        assert "10" in str(error)
        assert error.operation == "list sources"
        assert error.timeout_seconds == 10

    def test_is_distinct_from_plain_store_error(self) -> None:
        with pytest.raises(StoreTimeoutError):
            raise StoreTimeoutError("get recipe", 0.5)
        assert not isinstance(StoreError("get recipe", "boom"), StoreTimeoutError)


class TestExceptionHierarchy:
    def test_all_domain_errors_inherit_from_base(self) -> None:
        assert issubclass(EntityNotFoundError, RecipeKeeperError)
        assert issubclass(IdentifierNotValidError, RecipeKeeperError)
        assert issubclass(SourceTypeNotValidError, RecipeKeeperError)
        assert issubclass(StoreError, RecipeKeeperError)
        assert issubclass(StoreTimeoutError, StoreError)

    def test_lookup_errors_are_not_store_errors(self) -> None:
        assert not issubclass(EntityNotFoundError, StoreError)
        assert not issubclass(IdentifierNotValidError, StoreError)
        assert not issubclass(SourceTypeNotValidError, StoreError)
