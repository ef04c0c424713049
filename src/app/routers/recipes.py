# src/app/routers/recipes.py
"""
Recipe CRUD routes.

Error bodies are always empty; clients only see the status code:
- 400: malformed JSON body or sourceId
- 404: malformed or unknown recipe id
- 500: store failure (including the per-request deadline expiring)
"""
from __future__ import annotations

import logging
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from src.app.deps import RequestDeadline, get_recipe_repository, get_request_deadline
from src.app.domain.errors import EntityNotFoundError, IdentifierNotValidError, StoreError
from src.app.domain.models import Recipe, parse_object_id
from src.app.infra.db.base import RecipeRepository
from src.app.schemas.recipes import RecipeBase, RecipeForCreation, RecipeForUpdate, RecipeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


def _recipe_to_response(recipe: Recipe) -> RecipeResponse:
    return RecipeResponse(
        id=str(recipe.id),
        title=recipe.title,
        sourceId=str(recipe.source_id) if recipe.source_id is not None else "",
        sourceAnnotation=recipe.source_annotation,
        category=recipe.category,
        allergens=list(recipe.allergens),
    )


def _parse_source_id(value: str) -> Optional[ObjectId]:
    # "" clears the source reference; POST and PUT accept it alike so a
    # recipe can be created without a source as well as updated to none.
    if value == "":
        return None
    try:
        return parse_object_id(value)
    except ValueError as exc:
        logger.warning("Rejected recipe payload: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)


def _apply_payload(recipe: Recipe, payload: RecipeBase) -> Recipe:
    recipe.title = payload.title
    recipe.source_id = _parse_source_id(payload.sourceId)
    recipe.source_annotation = payload.sourceAnnotation
    recipe.category = payload.category
    recipe.allergens = list(payload.allergens)
    return recipe


async def _load_recipe(repo: RecipeRepository, recipe_id: str, deadline: RequestDeadline) -> Recipe:
    try:
        return await run_in_threadpool(
            repo.get_by_id, recipe_id, timeout=deadline.remaining("get recipe")
        )
    except (EntityNotFoundError, IdentifierNotValidError) as exc:
        logger.info("Recipe lookup failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    except StoreError as exc:
        logger.error("Failed to load recipe %s: %s", recipe_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("", response_model=list[RecipeResponse])
@router.get("/", response_model=list[RecipeResponse], include_in_schema=False)
async def list_recipes(
    repo: RecipeRepository = Depends(get_recipe_repository),
    deadline: RequestDeadline = Depends(get_request_deadline),
) -> list[RecipeResponse]:
    try:
        recipes = await run_in_threadpool(repo.list_all, timeout=deadline.remaining("list recipes"))
    except StoreError as exc:
        logger.error("Failed to list recipes: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return [_recipe_to_response(recipe) for recipe in recipes]


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    repo: RecipeRepository = Depends(get_recipe_repository),
    deadline: RequestDeadline = Depends(get_request_deadline),
) -> RecipeResponse:
    recipe = await _load_recipe(repo, recipe_id, deadline)
    return _recipe_to_response(recipe)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: RecipeForCreation,
    repo: RecipeRepository = Depends(get_recipe_repository),
    deadline: RequestDeadline = Depends(get_request_deadline),
) -> Response:
    recipe = _apply_payload(Recipe(), payload)

    try:
        await run_in_threadpool(repo.add, recipe, timeout=deadline.remaining("insert recipe"))
    except StoreError as exc:
        logger.error("Failed to create recipe: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(status_code=status.HTTP_201_CREATED)


@router.put(
    "/{recipe_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": RecipeForUpdate.model_json_schema()}},
        }
    },
)
async def update_recipe(
    recipe_id: str,
    request: Request,
    repo: RecipeRepository = Depends(get_recipe_repository),
    deadline: RequestDeadline = Depends(get_request_deadline),
) -> Response:
    # the recipe must exist before the body is looked at
    recipe = await _load_recipe(repo, recipe_id, deadline)

    try:
        payload = RecipeForUpdate.model_validate_json(await request.body())
    except ValidationError as exc:
        logger.warning("Rejected recipe update body: %s", exc.errors())
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)

    _apply_payload(recipe, payload)

    try:
        await run_in_threadpool(repo.update, recipe, timeout=deadline.remaining("replace recipe"))
    except StoreError as exc:
        logger.error("Failed to update recipe %s: %s", recipe_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    repo: RecipeRepository = Depends(get_recipe_repository),
    deadline: RequestDeadline = Depends(get_request_deadline),
) -> Response:
    recipe = await _load_recipe(repo, recipe_id, deadline)

    try:
        await run_in_threadpool(repo.delete, recipe, timeout=deadline.remaining("delete recipe"))
    except StoreError as exc:
        logger.error("Failed to delete recipe %s: %s", recipe_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
