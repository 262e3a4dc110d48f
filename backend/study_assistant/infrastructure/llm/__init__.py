"""LLM provider infrastructure package."""

from .openai_compatible_client import COMPLETIONS_ENDPOINT, OpenAICompatibleClient

__all__ = ["COMPLETIONS_ENDPOINT", "OpenAICompatibleClient"]
