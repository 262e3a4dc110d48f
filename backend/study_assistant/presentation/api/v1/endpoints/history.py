"""Study history and saved session endpoints."""

from fastapi import APIRouter, Depends, Query

from study_assistant.application.schemas import (
    ErrorResponse,
    HistoryResponse,
    HistoryType,
    SaveSessionRequest,
    SaveSessionResponse,
)
from study_assistant.application.services import StudyHistoryService
from study_assistant.domain.exceptions import KeyValueStoreError
from study_assistant.infrastructure.dependencies import get_study_history_service
from study_assistant.presentation.api.error_handlers import ApiError

router = APIRouter(tags=["Study History"])


@router.get(
    "/history",
    response_model=HistoryResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_history(
    history_type: HistoryType = Query(..., alias="type"),
    service: StudyHistoryService = Depends(get_study_history_service),
) -> HistoryResponse:
    """List the 50 most recent conversations, flashcard sets or analyses."""
    try:
        records = await service.get_history(history_type)
    except KeyValueStoreError as e:
        raise ApiError(500, "Failed to retrieve history", e.message) from e
    return HistoryResponse(history=records)


@router.post(
    "/save-session",
    response_model=SaveSessionResponse,
    responses={500: {"model": ErrorResponse}},
)
async def save_session(
    request: SaveSessionRequest,
    service: StudyHistoryService = Depends(get_study_history_service),
) -> SaveSessionResponse:
    """Store a study session snapshot."""
    try:
        session_id = await service.save_session(request.session_data)
    except KeyValueStoreError as e:
        raise ApiError(500, "Failed to save session", e.message) from e
    return SaveSessionResponse(success=True, session_id=session_id)
