"""Domain entities for outbound call performance tracking."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CallMetric:
    """One immutable record of a completed (possibly retried) upstream call.

    Serialized with the camelCase field names used by the metrics API and
    stored under ``api_metric:{api_name}:{timestamp}``.
    """

    api_name: str
    endpoint: str
    response_time_ms: int
    success: bool
    timestamp: int  # epoch milliseconds
    error_message: str | None = None

    @property
    def store_key(self) -> str:
        return f"api_metric:{self.api_name}:{self.timestamp}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiName": self.api_name,
            "endpoint": self.endpoint,
            "responseTime": self.response_time_ms,
            "success": self.success,
            "errorMessage": self.error_message,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CallMetric":
        """Rebuild a metric from its stored form.

        Raises:
            KeyError, TypeError, ValueError: If the stored value is malformed.
        """
        success = data["success"]
        if not isinstance(success, bool):
            raise TypeError(f"success must be a bool, got {success!r}")
        return cls(
            api_name=str(data["apiName"]),
            endpoint=str(data.get("endpoint", "")),
            response_time_ms=int(data["responseTime"]),
            success=success,
            timestamp=int(data["timestamp"]),
            error_message=data.get("errorMessage"),
        )


@dataclass
class MetricsSummary:
    """Rolling statistics for one api_name over the retained window."""

    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    avg_response_time_ms: int = 0
    min_response_time_ms: int = 0
    max_response_time_ms: int = 0
    success_rate: str = "0.00"


@dataclass
class MetricsReport:
    """Per-api summaries plus the most recent raw metrics, newest first."""

    summary: dict[str, MetricsSummary] = field(default_factory=dict)
    recent_metrics: list[CallMetric] = field(default_factory=list)
