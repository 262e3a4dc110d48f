"""Pydantic v2 schemas (DTOs) for the image analysis endpoint."""

from pydantic import Field, model_validator

from .common import CamelModel, TokenUsageResponse


class ImageAnalysisRequest(CamelModel):
    """Request schema for image analysis.

    Exactly one image source is used: ``image_url`` (remote URL or data URI)
    takes precedence over ``image_base64`` (raw base64 or data URI).
    """

    image_url: str | None = None
    image_base64: str | None = None
    prompt: str | None = Field(default=None, description="Custom analysis instructions")

    @model_validator(mode="after")
    def _require_image(self) -> "ImageAnalysisRequest":
        if not self.image_url and not self.image_base64:
            raise ValueError("Either imageUrl or imageBase64 is required")
        return self


class ImageAnalysisResponse(CamelModel):
    """Response schema for image analysis."""

    analysis: str
    usage: TokenUsageResponse | None = None
    analysis_id: str | None = None
