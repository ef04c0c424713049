from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.app.config import Settings, get_settings
from src.app.deps import get_recipe_repository, get_source_repository
from src.app.infra.db.memory_repo import InMemoryRecipeRepository, InMemorySourceRepository
from src.app.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        RECIPEKEEPER_MONGODB_CONSTR="mongodb://localhost:27017",
        REQUEST_TIMEOUT_SECONDS=1.0,
    )


@pytest.fixture
def recipe_repo() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def source_repo() -> InMemorySourceRepository:
    return InMemorySourceRepository()


@pytest.fixture
def client(
    settings: Settings,
    recipe_repo: InMemoryRecipeRepository,
    source_repo: InMemorySourceRepository,
) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_recipe_repository] = lambda: recipe_repo
    app.dependency_overrides[get_source_repository] = lambda: source_repo
    # no `with` block: the lifespan (and its Mongo ping) does not run
    return TestClient(app)
