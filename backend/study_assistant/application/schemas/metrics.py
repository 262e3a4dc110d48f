"""Pydantic v2 schemas (DTOs) for the performance metrics endpoint."""

from pydantic import Field

from .common import CamelModel


class MetricsSummarySchema(CamelModel):
    """Rolling statistics for one logical API."""

    total_calls: int
    successful_calls: int
    failed_calls: int
    avg_response_time_ms: int = Field(alias="avgResponseTime")
    min_response_time_ms: int = Field(alias="minResponseTime")
    max_response_time_ms: int = Field(alias="maxResponseTime")
    success_rate: str


class CallMetricSchema(CamelModel):
    """A single recorded call outcome."""

    api_name: str
    endpoint: str
    response_time_ms: int = Field(alias="responseTime")
    success: bool
    error_message: str | None = None
    timestamp: int


class MetricsResponse(CamelModel):
    """Response schema for the metrics endpoint."""

    summary: dict[str, MetricsSummarySchema]
    recent_metrics: list[CallMetricSchema]
