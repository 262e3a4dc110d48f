"""Flashcard generation use case — prompt, call, parse, store.

The model is asked for a JSON array of ``{question, answer, hint?}``
objects. Replies are often wrapped in markdown fences or prose, so the
parser looks for a fenced ```json block first, then the first ``[...]``
span, then falls back to the whole reply.
"""

import json
import logging
import re
from typing import Any

from study_assistant.application.interfaces import ChatProvider
from study_assistant.application.schemas.common import TokenUsageResponse
from study_assistant.application.schemas.flashcards import (
    FlashcardRequest,
    FlashcardResponse,
    FlashcardSchema,
)
from study_assistant.application.services.performance_metrics import MetricsRecorder
from study_assistant.application.services.study_history_service import StudyHistoryService
from study_assistant.application.services.tracked_completion import complete_and_record
from study_assistant.domain.entities import ChatMessage, FailureKind, FetchFailure, Flashcard
from study_assistant.domain.exceptions import FlashcardParseError, UpstreamServiceError

logger = logging.getLogger(__name__)

API_NAME = "Flashcards"

_FENCED_JSON = re.compile(r"```json\n?([\s\S]*?)\n?```")
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")

_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates educational flashcards. "
    "Always respond with valid JSON."
)

_USER_PROMPT = """Generate {count} flashcards for studying "{topic}" at {difficulty} difficulty level.
Return the response as a JSON array of objects, where each object has:
- "question": the question or prompt
- "answer": the detailed answer
- "hint": a helpful hint (optional)

Make the flashcards educational, clear, and appropriate for the difficulty level."""


def parse_flashcards(content: str) -> list[Flashcard]:
    """Extract flashcards from a model reply.

    Raises:
        FlashcardParseError: If no JSON list of cards can be read.
    """
    fenced = _FENCED_JSON.search(content)
    if fenced:
        candidate = fenced.group(1)
    else:
        array = _JSON_ARRAY.search(content)
        candidate = array.group(0) if array else content

    try:
        parsed: Any = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise FlashcardParseError(content, f"invalid JSON: {exc.msg}") from exc

    if isinstance(parsed, dict) and isinstance(parsed.get("flashcards"), list):
        parsed = parsed["flashcards"]
    if not isinstance(parsed, list):
        raise FlashcardParseError(content, "expected a JSON array")

    cards: list[Flashcard] = []
    for index, item in enumerate(parsed):
        if not isinstance(item, dict):
            raise FlashcardParseError(content, f"card {index} is not an object")
        question, answer = item.get("question"), item.get("answer")
        if not isinstance(question, str) or not isinstance(answer, str):
            raise FlashcardParseError(content, f"card {index} lacks question or answer")
        hint = item.get("hint")
        cards.append(
            Flashcard(question=question, answer=answer, hint=hint if isinstance(hint, str) else None)
        )
    return cards


class FlashcardService:
    """Application service — generates and stores a flashcard set."""

    def __init__(
        self,
        provider: ChatProvider,
        recorder: MetricsRecorder,
        history: StudyHistoryService,
        model: str,
        *,
        temperature: float = 0.8,
        max_tokens: int = 2000,
    ):
        self._provider = provider
        self._recorder = recorder
        self._history = history
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate(self, request: FlashcardRequest) -> FlashcardResponse:
        """Generate ``request.count`` flashcards on ``request.topic``.

        Raises:
            UpstreamServiceError: If the provider call failed terminally or
                its reply could not be parsed into flashcards.
        """
        messages = [
            ChatMessage(role="system", content=_SYSTEM_PROMPT),
            ChatMessage(
                role="user",
                content=_USER_PROMPT.format(
                    count=request.count,
                    topic=request.topic,
                    difficulty=request.difficulty,
                ),
            ),
        ]
        result = await complete_and_record(
            self._provider,
            self._recorder,
            api_name=API_NAME,
            messages=messages,
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if isinstance(result, FetchFailure):
            raise UpstreamServiceError.from_failure(result, "Failed to generate flashcards")

        completion = result.data
        try:
            cards = parse_flashcards(completion.content)
        except FlashcardParseError as e:
            logger.error("Failed to parse flashcards for '%s': %s", request.topic, e.reason)
            raise UpstreamServiceError(
                error="Failed to parse generated flashcards",
                details=e.content,
                status_code=500,
                kind=FailureKind.PARSE_ERROR,
            ) from e

        timestamp = self._history.now_ms()
        flashcard_set_id = await self._history.store_record(
            f"flashcards:{request.topic}:{timestamp}",
            {
                "topic": request.topic,
                "difficulty": request.difficulty,
                "flashcards": [card.to_dict() for card in cards],
                "timestamp": timestamp,
            },
        )

        return FlashcardResponse(
            flashcards=[FlashcardSchema(**card.to_dict()) for card in cards],
            flashcard_set_id=flashcard_set_id,
            usage=TokenUsageResponse(**completion.usage.to_dict()),
        )
