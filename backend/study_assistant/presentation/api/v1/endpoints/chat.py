"""AI tutor chat endpoint."""

from fastapi import APIRouter, Depends

from study_assistant.application.schemas import ChatRequest, ChatResponse, ErrorResponse
from study_assistant.application.services import ChatTutorService
from study_assistant.infrastructure.dependencies import get_chat_tutor_service

router = APIRouter(tags=["AI Tutor"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={502: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
)
async def chat(
    request: ChatRequest,
    service: ChatTutorService = Depends(get_chat_tutor_service),
) -> ChatResponse:
    """Send a message to the AI tutor.

    Upstream failures are retried transparently; a terminal failure is
    returned as ``{"error", "details"}`` with the upstream status.
    """
    return await service.chat(request)
