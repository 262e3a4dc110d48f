"""API performance metrics endpoint."""

from fastapi import APIRouter, Depends

from study_assistant.application.schemas import (
    CallMetricSchema,
    ErrorResponse,
    MetricsResponse,
    MetricsSummarySchema,
)
from study_assistant.application.services import MetricsAggregator
from study_assistant.domain.exceptions import KeyValueStoreError
from study_assistant.infrastructure.dependencies import get_metrics_aggregator
from study_assistant.presentation.api.error_handlers import ApiError

router = APIRouter(tags=["Metrics"])


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_metrics(
    aggregator: MetricsAggregator = Depends(get_metrics_aggregator),
) -> MetricsResponse:
    """Summarize the most recent 100 upstream calls per API.

    ``recentMetrics`` holds the 20 newest raw records, newest first.
    """
    try:
        report = await aggregator.get_report()
    except KeyValueStoreError as e:
        raise ApiError(500, "Failed to retrieve metrics", e.message) from e

    return MetricsResponse(
        summary={
            api_name: MetricsSummarySchema(
                total_calls=s.total_calls,
                successful_calls=s.successful_calls,
                failed_calls=s.failed_calls,
                avg_response_time_ms=s.avg_response_time_ms,
                min_response_time_ms=s.min_response_time_ms,
                max_response_time_ms=s.max_response_time_ms,
                success_rate=s.success_rate,
            )
            for api_name, s in report.summary.items()
        },
        recent_metrics=[
            CallMetricSchema(
                api_name=m.api_name,
                endpoint=m.endpoint,
                response_time_ms=m.response_time_ms,
                success=m.success,
                error_message=m.error_message,
                timestamp=m.timestamp,
            )
            for m in report.recent_metrics
        ],
    )
