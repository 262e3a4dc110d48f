"""Runs a provider completion and records exactly one CallMetric for it."""

import logging
import time

from study_assistant.application.interfaces import ChatProvider
from study_assistant.application.services.performance_metrics import MetricsRecorder
from study_assistant.domain.entities import (
    ChatCompletionResult,
    ChatMessage,
    FetchFailure,
    FetchResult,
    FetchSuccess,
)

logger = logging.getLogger(__name__)


async def complete_and_record(
    provider: ChatProvider,
    recorder: MetricsRecorder,
    *,
    api_name: str,
    messages: list[ChatMessage],
    model: str,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> FetchResult[ChatCompletionResult]:
    """Call the provider (retries included) and record the final outcome.

    The measured response time spans the whole retried call sequence.
    """
    start = time.monotonic()
    try:
        result = await provider.complete(
            messages=messages,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except Exception as exc:
        await recorder.record(
            api_name=api_name,
            endpoint=provider.endpoint,
            response_time_ms=int((time.monotonic() - start) * 1000),
            success=False,
            error_message=str(exc) or exc.__class__.__name__,
        )
        raise

    duration_ms = int((time.monotonic() - start) * 1000)

    error_message = None
    match result:
        case FetchSuccess(data=completion):
            logger.info(
                "%s answered by %s/%s in %dms (%d tokens)",
                api_name,
                completion.provider or provider.provider_name,
                completion.model or model,
                duration_ms,
                completion.usage.total_tokens,
            )
        case FetchFailure():
            error_message = result.details or result.error
            logger.warning("%s call failed after %dms: %s", api_name, duration_ms, result.error)

    await recorder.record(
        api_name=api_name,
        endpoint=provider.endpoint,
        response_time_ms=duration_ms,
        success=isinstance(result, FetchSuccess),
        error_message=error_message,
    )
    return result
