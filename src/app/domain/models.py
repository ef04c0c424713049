# src/app/domain/models.py
"""
Domain models for recipes and their sources.
These are pure data structures; identifiers use the document store's
ObjectId encoding (24 hex characters).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId


class SourceType(str, Enum):
    """Kinds of source a recipe can come from."""
    BOOK = "book"
    URL = "url"
    CUSTOM = "custom"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in cls._value2member_map_


def parse_object_id(value: str) -> ObjectId:
    """
    Parse a 24-hex-character identifier.

    Raises:
        ValueError: If value is not a well-formed identifier
    """
    if not isinstance(value, str):
        raise ValueError(f"not a valid object id: {value!r}")
    try:
        return ObjectId(value)
    except InvalidId as exc:
        raise ValueError(f"not a valid object id: {value!r}") from exc


@dataclass
class Recipe:
    """
    A stored recipe.

    `id` is assigned by the store on creation. `source_id` references a
    Source but is never checked against the sources collection.
    """
    title: str = ""
    source_id: Optional[ObjectId] = None
    source_annotation: str = ""
    category: str = ""
    allergens: list[str] = field(default_factory=list)
    id: Optional[ObjectId] = None


@dataclass
class Source:
    """A stored recipe source (cookbook, web page, ...)."""
    title: str = ""
    type: str = ""  # validated against SourceType on creation only
    id: Optional[ObjectId] = None
