"""Abstract chat provider interface — port for AI provider adapters.

Each OpenAI-compatible provider (Groq, OpenRouter, OpenAI, ...) can
implement this interface. Failures are returned, never raised.
"""

from abc import ABC, abstractmethod

from study_assistant.domain.entities import ChatCompletionResult, ChatMessage, FetchResult


class ChatProvider(ABC):
    """Port — defines what the application layer needs from any chat provider."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider (e.g. 'groq')."""
        ...

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Upstream route used for completions, recorded with each call metric."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> FetchResult[ChatCompletionResult]:
        """Send a non-streaming chat completion request.

        Args:
            messages: The conversation history.
            model: The model identifier (e.g. 'llama-3.3-70b-versatile').
            temperature: Sampling temperature (0.0–2.0).
            max_tokens: Maximum tokens in the response.

        Returns:
            FetchSuccess wrapping a ChatCompletionResult, or the terminal
            FetchFailure after retries are exhausted.
        """
        ...
