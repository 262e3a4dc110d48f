"""Flashcard generation endpoint."""

from fastapi import APIRouter, Depends

from study_assistant.application.schemas import ErrorResponse, FlashcardRequest, FlashcardResponse
from study_assistant.application.services import FlashcardService
from study_assistant.infrastructure.dependencies import get_flashcard_service

router = APIRouter(tags=["Flashcards"])


@router.post(
    "/generate-flashcards",
    response_model=FlashcardResponse,
    responses={500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def generate_flashcards(
    request: FlashcardRequest,
    service: FlashcardService = Depends(get_flashcard_service),
) -> FlashcardResponse:
    """Generate a set of flashcards for a topic."""
    return await service.generate(request)
