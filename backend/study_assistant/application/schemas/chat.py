"""Pydantic v2 schemas (DTOs) for the AI tutor chat endpoint."""

from pydantic import BaseModel, Field

from .common import CamelModel, TokenUsageResponse


class ChatHistoryMessage(BaseModel):
    """A prior turn of the conversation."""

    role: str = Field(..., pattern=r"^(system|user|assistant)$")
    content: str


class ChatRequest(CamelModel):
    """Request schema for the tutor chat endpoint."""

    message: str = Field(..., min_length=1, description="The student's message")
    conversation_history: list[ChatHistoryMessage] = Field(
        default_factory=list, description="Earlier turns, oldest first"
    )
    subject: str | None = Field(default=None, description="Subject the tutor specializes in")


class ChatResponse(CamelModel):
    """Response schema for the tutor chat endpoint."""

    response: str
    usage: TokenUsageResponse | None = None
    conversation_id: str | None = None
