"""Shared Pydantic v2 schema building blocks."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema exposed with camelCase field names; snake_case is accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenUsageResponse(BaseModel):
    """Token usage statistics, in the provider's own field names."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    error: str
    details: str | None = None
