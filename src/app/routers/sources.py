# src/app/routers/sources.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from src.app.deps import RequestDeadline, get_request_deadline, get_source_repository
from src.app.domain.errors import (
    EntityNotFoundError,
    IdentifierNotValidError,
    SourceTypeNotValidError,
    StoreError,
)
from src.app.domain.models import Source
from src.app.infra.db.base import SourceRepository
from src.app.schemas.sources import SourceForCreation, SourceForUpdate, SourceResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sources", tags=["sources"])


def _source_to_response(source: Source) -> SourceResponse:
    return SourceResponse(id=str(source.id), title=source.title, type=source.type)


async def _load_source(repo: SourceRepository, source_id: str, deadline: RequestDeadline) -> Source:
    try:
        return await run_in_threadpool(
            repo.get_by_id, source_id, timeout=deadline.remaining("get source")
        )
    except (EntityNotFoundError, IdentifierNotValidError) as exc:
        logger.info("Source lookup failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    except StoreError as exc:
        logger.error("Failed to load source %s: %s", source_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("", response_model=list[SourceResponse])
@router.get("/", response_model=list[SourceResponse], include_in_schema=False)
async def list_sources(
    repo: SourceRepository = Depends(get_source_repository),
    deadline: RequestDeadline = Depends(get_request_deadline),
) -> list[SourceResponse]:
    try:
        sources = await run_in_threadpool(repo.list_all, timeout=deadline.remaining("list sources"))
    except StoreError as exc:
        logger.error("Failed to list sources: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return [_source_to_response(source) for source in sources]


@router.get("/{source_id}", response_model=SourceResponse)
async def get_source(
    source_id: str,
    repo: SourceRepository = Depends(get_source_repository),
    deadline: RequestDeadline = Depends(get_request_deadline),
) -> SourceResponse:
    source = await _load_source(repo, source_id, deadline)
    return _source_to_response(source)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_source(
    payload: SourceForCreation,
    repo: SourceRepository = Depends(get_source_repository),
    deadline: RequestDeadline = Depends(get_request_deadline),
) -> Response:
    source = Source(title=payload.title, type=payload.type)

    try:
        await run_in_threadpool(repo.add, source, timeout=deadline.remaining("insert source"))
    except SourceTypeNotValidError as exc:
        logger.warning("Rejected source payload: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)
    except StoreError as exc:
        logger.error("Failed to create source: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(status_code=status.HTTP_201_CREATED)


@router.put(
    "/{source_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SourceForUpdate.model_json_schema()}},
        }
    },
)
async def update_source(
    source_id: str,
    request: Request,
    repo: SourceRepository = Depends(get_source_repository),
    deadline: RequestDeadline = Depends(get_request_deadline),
) -> Response:
    source = await _load_source(repo, source_id, deadline)

    try:
        payload = SourceForUpdate.model_validate_json(await request.body())
    except ValidationError as exc:
        logger.warning("Rejected source update body: %s", exc.errors())
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST)

    source.title = payload.title
    source.type = payload.type

    try:
        await run_in_threadpool(repo.update, source, timeout=deadline.remaining("replace source"))
    except StoreError as exc:
        logger.error("Failed to update source %s: %s", source_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{source_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_source(
    source_id: str,
    repo: SourceRepository = Depends(get_source_repository),
    deadline: RequestDeadline = Depends(get_request_deadline),
) -> Response:
    source = await _load_source(repo, source_id, deadline)

    try:
        await run_in_threadpool(repo.delete, source, timeout=deadline.remaining("delete source"))
    except StoreError as exc:
        logger.error("Failed to delete source %s: %s", source_id, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
