"""Health check endpoint — no dependencies, always available."""

import time

from fastapi import APIRouter

from study_assistant.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Returns the current application health status."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "timestamp": int(time.time() * 1000),
    }
