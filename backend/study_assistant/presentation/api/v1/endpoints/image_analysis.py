"""Image analysis endpoint."""

from fastapi import APIRouter, Depends

from study_assistant.application.schemas import (
    ErrorResponse,
    ImageAnalysisRequest,
    ImageAnalysisResponse,
)
from study_assistant.application.services import ImageAnalysisService
from study_assistant.infrastructure.dependencies import get_image_analysis_service

router = APIRouter(tags=["Image Analysis"])


@router.post(
    "/analyze-image",
    response_model=ImageAnalysisResponse,
    responses={502: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
)
async def analyze_image(
    request: ImageAnalysisRequest,
    service: ImageAnalysisService = Depends(get_image_analysis_service),
) -> ImageAnalysisResponse:
    """Analyze an image given as a URL or base64 payload."""
    return await service.analyze(request)
