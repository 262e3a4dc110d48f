"""Image analysis use case — vision completion over a URL or base64 image."""

import logging

from study_assistant.application.interfaces import ChatProvider
from study_assistant.application.schemas.common import TokenUsageResponse
from study_assistant.application.schemas.image_analysis import (
    ImageAnalysisRequest,
    ImageAnalysisResponse,
)
from study_assistant.application.services.performance_metrics import MetricsRecorder
from study_assistant.application.services.study_history_service import StudyHistoryService
from study_assistant.application.services.tracked_completion import complete_and_record
from study_assistant.domain.entities import ChatMessage, ContentPart, FetchFailure
from study_assistant.domain.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

API_NAME = "Vision"

DEFAULT_ANALYSIS_PROMPT = (
    "Analyze this image in detail. If it contains educational content, diagrams, "
    "notes, or problems, explain them thoroughly. Identify key concepts, formulas, "
    "or information."
)


def to_image_url(request: ImageAnalysisRequest) -> str:
    """Resolve the request's image into a URL the provider accepts."""
    if request.image_url:
        return request.image_url
    encoded = (request.image_base64 or "").strip()
    if encoded.startswith("data:"):
        return encoded
    return f"data:image/jpeg;base64,{encoded}"


class ImageAnalysisService:
    """Application service — explains study images with a vision model."""

    def __init__(
        self,
        provider: ChatProvider,
        recorder: MetricsRecorder,
        history: StudyHistoryService,
        model: str,
        *,
        max_tokens: int = 1000,
    ):
        self._provider = provider
        self._recorder = recorder
        self._history = history
        self._model = model
        self._max_tokens = max_tokens

    async def analyze(self, request: ImageAnalysisRequest) -> ImageAnalysisResponse:
        """Analyze one image.

        Raises:
            UpstreamServiceError: If the provider call failed terminally.
        """
        message = ChatMessage(
            role="user",
            content=[
                ContentPart(type="text", text=request.prompt or DEFAULT_ANALYSIS_PROMPT),
                ContentPart(type="image_url", image_url={"url": to_image_url(request)}),
            ],
        )
        result = await complete_and_record(
            self._provider,
            self._recorder,
            api_name=API_NAME,
            messages=[message],
            model=self._model,
            max_tokens=self._max_tokens,
        )
        if isinstance(result, FetchFailure):
            raise UpstreamServiceError.from_failure(result, "Failed to analyze image")

        completion = result.data
        timestamp = self._history.now_ms()
        analysis_id = await self._history.store_record(
            f"analysis:{timestamp}",
            {
                "prompt": request.prompt,
                "analysis": completion.content,
                "timestamp": timestamp,
            },
        )

        return ImageAnalysisResponse(
            analysis=completion.content,
            usage=TokenUsageResponse(**completion.usage.to_dict()),
            analysis_id=analysis_id,
        )
