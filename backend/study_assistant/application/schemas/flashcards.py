"""Pydantic v2 schemas (DTOs) for flashcard generation."""

from typing import Literal

from pydantic import BaseModel, Field

from .common import CamelModel, TokenUsageResponse


class FlashcardRequest(CamelModel):
    """Request schema for flashcard generation."""

    topic: str = Field(..., min_length=1)
    count: int = Field(default=5, ge=1, le=50)
    difficulty: Literal["easy", "medium", "hard"] = "medium"


class FlashcardSchema(BaseModel):
    question: str
    answer: str
    hint: str | None = None


class FlashcardResponse(CamelModel):
    """Response schema for flashcard generation."""

    flashcards: list[FlashcardSchema]
    flashcard_set_id: str | None = None
    usage: TokenUsageResponse | None = None
