# src/app/main.py
from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.config import Settings, get_settings
from src.app.deps import close_mongo_client, get_mongo_client
from src.app.domain.errors import StoreError
from src.app.infra.db.mongo_repo import ping
from src.app.routers.recipes import router as recipes_router
from src.app.routers.sources import router as sources_router

# Plain stdout logging (fine for dev and containers)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        client = get_mongo_client(settings)
        try:
            await run_in_threadpool(ping, client, settings.CONNECT_TIMEOUT_SECONDS)
        except StoreError as exc:
            logger.critical("Document store is not reachable: %s", exc)
            close_mongo_client()
            raise
        logger.info("Connected to document store: database=%s", settings.RECIPEKEEPER_DATABASE_NAME)
        try:
            yield
        finally:
            close_mongo_client()

    app = FastAPI(title="Recipe Keeper API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(recipes_router)
    app.include_router(sources_router)

    # Error responses carry the status code only.
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> Response:
        return Response(status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError) -> Response:
        logger.warning("Rejected request body: %s %s: %s", request.method, request.url.path, exc.errors())
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


def run() -> None:
    try:
        settings = get_settings()
    except ValidationError as exc:
        logger.critical("Invalid configuration: %s", exc)
        raise SystemExit(1)

    logger.info("Starting web server on %s:%d", settings.HOST, settings.PORT)
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
