"""OpenAI-compatible chat completion client — implements the ChatProvider port.

Talks to any provider exposing ``POST {base_url}/chat/completions``
(Groq by default) through the RetryingHttpClient, so transient upstream
failures are retried before a result reaches the feature services.
"""

import logging
from typing import Any

from study_assistant.application.interfaces.chat_provider import ChatProvider
from study_assistant.domain.entities import (
    ChatCompletionResult,
    ChatMessage,
    FailureKind,
    FetchFailure,
    FetchResult,
    FetchSuccess,
    TokenUsage,
)
from study_assistant.infrastructure.http import RetryingHttpClient

logger = logging.getLogger(__name__)

COMPLETIONS_ENDPOINT = "/chat/completions"


class OpenAICompatibleClient(ChatProvider):
    """Infrastructure adapter — connects to an OpenAI-compatible API."""

    def __init__(
        self,
        api_key: str,
        http: RetryingHttpClient,
        base_url: str = "https://api.groq.com/openai/v1",
        provider_name: str = "groq",
    ):
        self._api_key = api_key
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._provider_name = provider_name

    @property
    def provider_name(self) -> str:
        return self._provider_name

    @property
    def endpoint(self) -> str:
        return COMPLETIONS_ENDPOINT

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _build_payload(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict:
        """Build the request payload for the chat completion API."""
        payload: dict = {
            "model": model,
            "messages": [self._serialize_message(m) for m in messages],
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        return payload

    @staticmethod
    def _serialize_message(msg: ChatMessage) -> dict:
        """Convert a domain ChatMessage to an API-compatible dict."""
        if isinstance(msg.content, str):
            return {"role": msg.role, "content": msg.content}

        # Multimodal content
        parts = []
        for part in msg.content:
            if part.type == "text":
                parts.append({"type": "text", "text": part.text or ""})
            elif part.type == "image_url" and part.image_url:
                parts.append({
                    "type": "image_url",
                    "image_url": part.image_url,
                })
        return {"role": msg.role, "content": parts}

    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> FetchResult[ChatCompletionResult]:
        """Send a non-streaming chat completion."""
        payload = self._build_payload(
            messages, model, temperature=temperature, max_tokens=max_tokens
        )
        result = await self._http.request(
            "POST",
            f"{self._base_url}{COMPLETIONS_ENDPOINT}",
            headers=self._get_headers(),
            json_body=payload,
        )

        match result:
            case FetchSuccess(data=data, status_code=status_code):
                return self._parse_completion_response(data, status_code)
            case FetchFailure():
                logger.error(
                    "%s completion failed [%s]: %s",
                    self._provider_name, result.kind.value, result.details,
                )
                return result

    def _parse_completion_response(
        self, data: Any, status_code: int
    ) -> FetchResult[ChatCompletionResult]:
        """Parse the JSON body into a domain entity, or a parse_error failure."""
        if not isinstance(data, dict):
            return self._parse_failure("Response body is not a JSON object", status_code)

        # Some providers report errors inside a 200 body
        if "error" in data:
            error = data["error"]
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            return self._parse_failure(message, status_code)

        choices = data.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            return self._parse_failure("No choices in response", status_code)

        choice = choices[0]
        message = choice.get("message") or {}
        content = message.get("content")
        if not isinstance(content, str):
            return self._parse_failure("Choice has no message content", status_code)

        usage_data = data.get("usage") or {}

        return FetchSuccess(
            data=ChatCompletionResult(
                model=data.get("model", ""),
                content=content,
                usage=TokenUsage(
                    prompt_tokens=usage_data.get("prompt_tokens", 0),
                    completion_tokens=usage_data.get("completion_tokens", 0),
                    total_tokens=usage_data.get("total_tokens", 0),
                ),
                provider=self._provider_name,
            ),
            status_code=status_code,
        )

    def _parse_failure(self, message: str, status_code: int) -> FetchFailure:
        logger.error("%s returned an unusable completion: %s", self._provider_name, message)
        return FetchFailure(
            kind=FailureKind.PARSE_ERROR,
            error="Malformed completion response",
            details=message,
            status_code=status_code,
        )
