"""
FastAPI application for the Aria character sheets.

This is the HTTP API the sheet editor talks to. Character routes live here;
account routes come from `aria.auth.routes`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aria.auth import AuthContext, auth_router, require_auth
from aria.config import get_settings
from aria.core.errors import AriaError, InvalidInput
from aria.integrations.sentry import capture_exception, init_sentry
from aria.services import CharacterService
from aria.storage import (
    DEFAULT_INDEXES,
    DocumentStore,
    create_local_storage,
    create_mongo_storage,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Storage
# =============================================================================


def build_storage() -> DocumentStore:
    """Pick the store implementation from settings."""
    settings = get_settings()
    if settings.storage_backend == "memory":
        logger.warning("Using in-memory storage - data is lost on restart")
        return create_local_storage()
    return create_mongo_storage(
        settings.mongodb_uri,
        settings.mongodb_db_name,
        settings.mongodb_timeout_ms,
    )


# =============================================================================
# Error handlers
# =============================================================================


async def handle_aria_error(request: Request, exc: AriaError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InvalidInput("Request body must be a JSON object")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """Log the details, tell the client nothing."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    capture_exception(exc, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "code": "internal_error", "message": "Internal server error"},
    )


# =============================================================================
# App Setup
# =============================================================================


def create_app(storage: DocumentStore | None = None) -> FastAPI:
    """
    Build the API.

    Args:
        storage: store to serve from; built from settings when omitted
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the store before serving, close it on shutdown."""
        init_sentry()

        store = storage or build_storage()
        # Fails (and aborts startup) when the database is unreachable
        await store.connect()
        await store.ensure_indexes(DEFAULT_INDEXES)
        app.state.storage = store

        logger.info(f"Aria API starting in {settings.environment} mode")

        yield

        await store.close()
        logger.info("Aria API shutting down")

    app = FastAPI(
        title="Aria Character API",
        description="Storage API for Aria character sheets",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AriaError, handle_aria_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)

    # Include routers
    app.include_router(auth_router)
    register_routes(app)

    return app


# =============================================================================
# Dependencies
# =============================================================================


def get_character_service(request: Request) -> CharacterService:
    return CharacterService(request.app.state.storage)


# =============================================================================
# Routes
# =============================================================================


def register_routes(app: FastAPI) -> None:

    @app.get("/")
    async def root():
        return {"status": "ok", "message": "Aria character backend online"}

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "aria-api"}

    # =========================================================================
    # Characters
    # =========================================================================

    @app.post("/characters", status_code=status.HTTP_201_CREATED)
    async def create_character(
        data: dict[str, Any] = Body(...),
        ctx: AuthContext = Depends(require_auth()),
        characters: CharacterService = Depends(get_character_service),
    ):
        """Save a new character for the caller."""
        character_id = await characters.create_character(ctx.user_id, data)
        return {
            "status": "ok",
            "message": "Character saved",
            "id": character_id,
        }

    @app.get("/characters")
    async def list_characters(
        ctx: AuthContext = Depends(require_auth()),
        characters: CharacterService = Depends(get_character_service),
    ):
        """The caller's characters, newest first."""
        return await characters.list_characters(ctx.user_id)

    @app.get("/characters/{character_id}")
    async def get_character(
        character_id: str,
        ctx: AuthContext = Depends(require_auth()),
        characters: CharacterService = Depends(get_character_service),
    ):
        return await characters.get_character(ctx.user_id, character_id)

    @app.put("/characters/{character_id}")
    async def update_character(
        character_id: str,
        data: dict[str, Any] = Body(...),
        ctx: AuthContext = Depends(require_auth()),
        characters: CharacterService = Depends(get_character_service),
    ):
        """Replace the submitted fields of one of the caller's characters."""
        return await characters.update_character(ctx.user_id, character_id, data)

    @app.delete("/characters/{character_id}")
    async def delete_character(
        character_id: str,
        ctx: AuthContext = Depends(require_auth()),
        characters: CharacterService = Depends(get_character_service),
    ):
        await characters.delete_character(ctx.user_id, character_id)
        return {"status": "ok", "message": "Character deleted"}


app = create_app()
