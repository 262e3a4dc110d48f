"""Domain entities for chat messages — framework-independent, multimodal."""

from dataclasses import dataclass, field


@dataclass
class ContentPart:
    """A single content part within a multimodal message.

    Supports text and image_url types, following the OpenAI-compatible
    multimodal format. ``image_url`` carries either a remote URL or a
    base64 data URI.
    """

    type: str  # "text" | "image_url"
    text: str | None = None
    image_url: dict[str, str] | None = None  # {"url": "..."}


@dataclass
class ChatMessage:
    """A single message in a chat conversation.

    Content can be a plain string (text-only) or a list of ContentPart
    objects for multimodal input (text + images).
    """

    role: str  # "system" | "user" | "assistant"
    content: str | list[ContentPart] = ""


@dataclass
class TokenUsage:
    """Token usage statistics from a completion."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }


@dataclass
class ChatCompletionResult:
    """The parsed result of a non-streaming chat completion."""

    model: str
    content: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    provider: str = ""
