"""AI tutor chat use case — calls the provider, records the metric, keeps history."""

import logging

from study_assistant.application.interfaces import ChatProvider
from study_assistant.application.schemas.chat import ChatRequest, ChatResponse
from study_assistant.application.schemas.common import TokenUsageResponse
from study_assistant.application.services.performance_metrics import MetricsRecorder
from study_assistant.application.services.study_history_service import StudyHistoryService
from study_assistant.application.services.tracked_completion import complete_and_record
from study_assistant.domain.entities import ChatMessage, FetchFailure
from study_assistant.domain.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

API_NAME = "Chat"

_TUTOR_SYSTEM_PROMPT = """You are an expert AI tutor specializing in {subject}. Your role is to:
- Explain concepts clearly and thoroughly
- Break down complex topics into understandable parts
- Provide examples and analogies
- Ask probing questions to check understanding
- Encourage critical thinking
- Adapt your teaching style to the student's level
Be patient, encouraging, and always verify the student understands before moving on."""


class ChatTutorService:
    """Application service — one tutoring turn per call."""

    def __init__(
        self,
        provider: ChatProvider,
        recorder: MetricsRecorder,
        history: StudyHistoryService,
        model: str,
        *,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ):
        self._provider = provider
        self._recorder = recorder
        self._history = history
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Answer the student's message in the context of the conversation.

        Raises:
            UpstreamServiceError: If the provider call failed terminally.
        """
        result = await complete_and_record(
            self._provider,
            self._recorder,
            api_name=API_NAME,
            messages=self._build_messages(request),
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if isinstance(result, FetchFailure):
            raise UpstreamServiceError.from_failure(
                result, "Failed to get response from AI tutor"
            )

        completion = result.data
        timestamp = self._history.now_ms()
        conversation_id = await self._history.store_record(
            f"conversation:{timestamp}",
            {
                "subject": request.subject,
                "message": request.message,
                "response": completion.content,
                "timestamp": timestamp,
            },
        )

        return ChatResponse(
            response=completion.content,
            usage=TokenUsageResponse(**completion.usage.to_dict()),
            conversation_id=conversation_id,
        )

    @staticmethod
    def _build_messages(request: ChatRequest) -> list[ChatMessage]:
        subject = request.subject or "various subjects"
        messages = [ChatMessage(role="system", content=_TUTOR_SYSTEM_PROMPT.format(subject=subject))]
        messages.extend(
            ChatMessage(role=turn.role, content=turn.content)
            for turn in request.conversation_history
        )
        messages.append(ChatMessage(role="user", content=request.message))
        return messages
