"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from study_assistant.presentation.api.v1.endpoints.health import router as health_router
from study_assistant.presentation.api.v1.endpoints.chat import router as chat_router
from study_assistant.presentation.api.v1.endpoints.image_analysis import router as image_analysis_router
from study_assistant.presentation.api.v1.endpoints.flashcards import router as flashcards_router
from study_assistant.presentation.api.v1.endpoints.metrics import router as metrics_router
from study_assistant.presentation.api.v1.endpoints.history import router as history_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(chat_router)
router.include_router(image_analysis_router)
router.include_router(flashcards_router)
router.include_router(metrics_router)
router.include_router(history_router)
