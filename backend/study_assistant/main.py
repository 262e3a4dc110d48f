"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from study_assistant.config import get_settings
from study_assistant.infrastructure.logging.log_config import setup_logging
from study_assistant.presentation.api.error_handlers import register_error_handlers
from study_assistant.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _create_tables() -> None:
    """Create the kv_store table when the database backend is in use."""
    from study_assistant.infrastructure.database import Base, engine

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Key-value store tables ready")
    except Exception:
        logger.exception("Failed to create key-value store tables")
        raise


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, prepare storage."""
    settings = get_settings()
    setup_logging()

    if settings.kv_store_backend == "database":
        await _create_tables()
    else:
        logger.warning("Using the in-memory key-value store; records are lost on restart")

    if not settings.llm_api_key.strip():
        logger.warning("LLM_API_KEY is not configured; AI requests will be rejected upstream.")

    yield

    if settings.kv_store_backend == "database":
        from study_assistant.infrastructure.database import engine

        await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "study_assistant.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
