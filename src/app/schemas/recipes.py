# src/app/schemas/recipes.py
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class RecipeBase(BaseModel):
    title: str = ""
    sourceId: str = ""
    sourceAnnotation: str = ""
    category: str = ""
    allergens: list[str] = Field(default_factory=list)

    @field_validator("allergens", mode="before")
    @classmethod
    def _null_allergens(cls, value: object) -> object:
        return [] if value is None else value


class RecipeResponse(RecipeBase):
    id: str


class RecipeForCreation(RecipeBase):
    pass


class RecipeForUpdate(RecipeBase):
    pass
