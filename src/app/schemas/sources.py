# src/app/schemas/sources.py
from __future__ import annotations

from pydantic import BaseModel


class SourceBase(BaseModel):
    title: str = ""
    type: str = ""


class SourceResponse(SourceBase):
    id: str


class SourceForCreation(SourceBase):
    pass


class SourceForUpdate(SourceBase):
    pass
