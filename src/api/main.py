"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from src.api.errors import create_exception_handlers
from src.api.middleware import setup_correlation_middleware
from src.api.routes import artifacts, health
from src.database.connection import build_engine, build_session_factory, init_db
from src.utils.structured_logging import get_logger, setup_logging
from config.settings import settings

logger = get_logger("api")


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """
    Build the application.

    Args:
        database_url: Overrides settings.database_url (used by tests)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Handles application startup and shutdown events.
        Creates the engine and schema on startup and disposes the pool on shutdown.
        """
        setup_logging()
        logger.info("Starting artifact service...")

        engine = build_engine(database_url)
        await init_db(engine)

        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)

        yield

        logger.info("Shutting down artifact service...")
        await engine.dispose()

    app = FastAPI(
        title="Artifact Service",
        description="Artifacts attached to conversation messages, with share links",
        version="1.0.0",
        lifespan=lifespan,
        exception_handlers=create_exception_handlers(),
    )

    setup_correlation_middleware(app, service_name=settings.service_name)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(artifacts.router, prefix="/v1/artifacts", tags=["artifacts"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )
