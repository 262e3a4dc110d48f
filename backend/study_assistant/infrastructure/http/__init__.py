"""Outbound HTTP infrastructure package."""

from .retrying_http_client import (
    RetryingHttpClient,
    backoff_delay_ms,
    classify_status,
    is_retryable_status,
)

__all__ = [
    "RetryingHttpClient",
    "backoff_delay_ms",
    "classify_status",
    "is_retryable_status",
]
