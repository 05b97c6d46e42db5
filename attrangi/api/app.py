"""FastAPI application factory for the reference backend."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from attrangi.api.memory import InMemoryBackend
from attrangi.api.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Log startup and shutdown of the reference backend.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting Attrangi reference backend...")
    yield
    logger.info("Shutting down Attrangi reference backend...")


def create_app(backend: InMemoryBackend | None = None) -> FastAPI:
    """Create and configure the reference backend application.

    Args:
        backend: Optional pre-populated store; a fresh one if omitted.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Attrangi Reference Backend",
        description=(
            "In-memory implementation of the conversational backend contract: "
            "history, profile, phased chat replies and session summaries."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.backend = backend or InMemoryBackend()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "attrangi-reference-backend"}

    return application
