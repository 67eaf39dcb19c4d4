"""Todo API: FastAPI application factory and entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import Database
from .errors import register_exception_handlers
from .middleware import OriginGuardMiddleware
from .routers import health as health_router
from .routers import todos as todos_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
]

ENDPOINTS = (
    "GET    /api/todos",
    "POST   /api/todos",
    "PUT    /api/todos/:id",
    "DELETE /api/todos/:id",
    "GET    /health",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the store on startup and close it on shutdown (SIGINT/SIGTERM under uvicorn)."""
    settings: Settings = app.state.settings
    db = Database(settings.sqlite_db_path)
    db.open()
    app.state.db = db

    logger.info("Todo API server running on port %s", settings.port)
    logger.info("Environment: %s", settings.environment)
    logger.info("CORS enabled for: %s", settings.allowed_origins)
    logger.info("Available endpoints:\n  %s", "\n  ".join(ENDPOINTS))

    try:
        yield
    finally:
        logger.info("Shutting down gracefully...")
        db.close()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = get_settings()

    _configure_logging(settings.log_level)

    app = FastAPI(
        title="Todo API",
        description="Backend API service for managing todos stored in SQLite.",
        version="1.0.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app)

    # Last added runs first: the guard rejects unlisted origins before CORS handling
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(OriginGuardMiddleware, allowed_origins=settings.allowed_origins)

    app.include_router(health_router.router)
    app.include_router(todos_router.router)
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Serve the application with uvicorn on HOST:PORT."""
    settings = get_settings()
    # uvicorn calls the factory once at startup; importing this module builds nothing
    uvicorn.run(
        "todo_api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )
