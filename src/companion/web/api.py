"""FastAPI application factory.

Main entry point for the School Companion Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from companion import __version__
from companion.web.dependencies import get_curriculum_repository
from companion.web.routes import (
    ask_router,
    health_router,
    learning_router,
    notes_router,
    progress_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the curriculum catalog once at startup."""
    repository = app.dependency_overrides.get(
        get_curriculum_repository, get_curriculum_repository
    )()
    logger.info("api_startup", notes=len(repository.all_notes()))
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="School Companion API",
        description="Curriculum-grounded study companion for CBSE classes 5-7",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(notes_router)
    app.include_router(ask_router)
    app.include_router(learning_router)
    app.include_router(progress_router)

    return app


# Default app instance for uvicorn
app = create_app()
