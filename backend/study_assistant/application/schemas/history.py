"""Pydantic v2 schemas (DTOs) for study history and saved sessions."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .common import CamelModel


class HistoryType(str, Enum):
    CONVERSATIONS = "conversations"
    FLASHCARDS = "flashcards"
    ANALYSES = "analyses"


class HistoryResponse(BaseModel):
    history: list[dict[str, Any]]


class SaveSessionRequest(CamelModel):
    session_data: dict[str, Any] = Field(..., description="Arbitrary study session payload")


class SaveSessionResponse(CamelModel):
    success: bool = True
    session_id: str
