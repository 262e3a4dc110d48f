"""FastAPI dependency injection — wires infrastructure to application layer."""

from functools import lru_cache

from fastapi import Depends

from study_assistant.config import get_settings
from study_assistant.application.interfaces import ChatProvider, KeyValueStore
from study_assistant.application.services import (
    ChatTutorService,
    FlashcardService,
    ImageAnalysisService,
    MetricsAggregator,
    MetricsRecorder,
    StudyHistoryService,
)
from study_assistant.infrastructure.http import RetryingHttpClient
from study_assistant.infrastructure.kv import InMemoryKeyValueStore
from study_assistant.infrastructure.llm import OpenAICompatibleClient


@lru_cache
def _in_memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


def get_key_value_store() -> KeyValueStore:
    """Provides the configured interaction log store."""
    settings = get_settings()
    if settings.kv_store_backend == "memory":
        return _in_memory_store()

    from study_assistant.infrastructure.database.repositories import SQLAlchemyKeyValueStore
    from study_assistant.infrastructure.database.session import async_session_factory

    return SQLAlchemyKeyValueStore(async_session_factory)


def get_chat_provider() -> ChatProvider:
    """Provides the OpenAI-compatible provider behind the retrying client."""
    settings = get_settings()
    http = RetryingHttpClient(
        max_retries=settings.retry_max_retries,
        base_delay_ms=settings.retry_base_delay_ms,
        deadline_seconds=settings.retry_deadline_seconds,
        timeout_seconds=settings.http_timeout_seconds,
    )
    return OpenAICompatibleClient(
        api_key=settings.llm_api_key,
        http=http,
        base_url=settings.llm_base_url,
        provider_name=settings.llm_provider_name,
    )


def get_metrics_recorder(
    store: KeyValueStore = Depends(get_key_value_store),
) -> MetricsRecorder:
    return MetricsRecorder(store)


def get_metrics_aggregator(
    store: KeyValueStore = Depends(get_key_value_store),
) -> MetricsAggregator:
    return MetricsAggregator(store)


def get_study_history_service(
    store: KeyValueStore = Depends(get_key_value_store),
) -> StudyHistoryService:
    return StudyHistoryService(store)


def get_chat_tutor_service(
    provider: ChatProvider = Depends(get_chat_provider),
    recorder: MetricsRecorder = Depends(get_metrics_recorder),
    history: StudyHistoryService = Depends(get_study_history_service),
) -> ChatTutorService:
    """Provides a ChatTutorService wired to the chat model."""
    return ChatTutorService(provider, recorder, history, model=get_settings().chat_model)


def get_image_analysis_service(
    provider: ChatProvider = Depends(get_chat_provider),
    recorder: MetricsRecorder = Depends(get_metrics_recorder),
    history: StudyHistoryService = Depends(get_study_history_service),
) -> ImageAnalysisService:
    """Provides an ImageAnalysisService wired to the vision model."""
    return ImageAnalysisService(provider, recorder, history, model=get_settings().vision_model)


def get_flashcard_service(
    provider: ChatProvider = Depends(get_chat_provider),
    recorder: MetricsRecorder = Depends(get_metrics_recorder),
    history: StudyHistoryService = Depends(get_study_history_service),
) -> FlashcardService:
    """Provides a FlashcardService wired to the flashcard model."""
    return FlashcardService(provider, recorder, history, model=get_settings().flashcard_model)
