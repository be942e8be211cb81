"""Application entry point for the FastAPI backend."""
from __future__ import annotations

import logging
import os
from typing import Iterable

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .database import create_session, init_db
from .routers import (
    auth_router,
    comments_router,
    friends_router,
    messages_router,
    posts_router,
    users_router,
)
from .services import ScheduledPublisher
from .services.migrations import run_migrations_if_needed

logger = logging.getLogger(__name__)

settings = get_settings()
APP_NAME = settings.app_name
API_VERSION = settings.api_version
DISABLE_PUBLISHER = (
    os.getenv("DISABLE_PUBLISHER", "").lower() == "true" or os.getenv("PYTEST_CURRENT_TEST") is not None
)

app = FastAPI(title=APP_NAME, version=API_VERSION)

if settings.cors_origins.strip() and settings.cors_origins.strip() != "*":
    origins: Iterable[str] = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
else:
    origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for _router in (auth_router, posts_router, comments_router, friends_router, users_router, messages_router):
    app.include_router(_router, prefix="/api")

_publisher = ScheduledPublisher(create_session, interval_seconds=settings.publisher_interval_seconds)


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation failed", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content: dict[str, str] = {"message": "Server error"}
    if not settings.is_production:
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


@app.on_event("startup")
async def _startup() -> None:
    """Ensure database schema and background tasks are ready before serving."""

    try:
        run_migrations_if_needed(database_url=settings.database_url)
        init_db()
    except Exception:  # pragma: no cover - best effort logging
        logger.exception("Database initialisation failed")
        raise

    if DISABLE_PUBLISHER:
        logger.info("Scheduled publisher disabled")
        return

    _publisher.start()


@app.on_event("shutdown")
async def _shutdown() -> None:
    """Stop background tasks cleanly during application shutdown."""

    if DISABLE_PUBLISHER:
        return
    await _publisher.stop()


@app.get("/api/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok", "service": APP_NAME, "version": API_VERSION}
