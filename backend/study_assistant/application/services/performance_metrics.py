"""Performance metrics — records outbound call outcomes and summarizes them.

The recorder appends one CallMetric per completed feature request to the
key-value log under ``api_metric:{api_name}:{timestamp}``. The aggregator
reads that log back and computes rolling per-api statistics over the most
recent records.

Usage:
    recorder = MetricsRecorder(store)
    await recorder.record(
        api_name="Chat",
        endpoint="/chat/completions",
        response_time_ms=812,
        success=True,
    )

    report = await MetricsAggregator(store).get_report()
"""

import logging
import math
import time
from collections.abc import Callable, Iterable

from study_assistant.application.interfaces import KeyValueStore
from study_assistant.domain.entities import CallMetric, MetricsReport, MetricsSummary

logger = logging.getLogger(__name__)

METRIC_KEY_PREFIX = "api_metric:"
METRICS_WINDOW = 100
RECENT_METRICS_LIMIT = 20


def epoch_ms() -> int:
    return int(time.time() * 1000)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class MetricsRecorder:
    """Appends call outcomes to the log. Never fails the caller."""

    def __init__(self, store: KeyValueStore, clock: Callable[[], int] = epoch_ms):
        self._store = store
        self._clock = clock

    async def record(
        self,
        *,
        api_name: str,
        endpoint: str,
        response_time_ms: int,
        success: bool,
        error_message: str | None = None,
    ) -> CallMetric | None:
        """Persist one CallMetric.

        ``error_message`` is kept only for failed calls; a failure without
        a message is recorded as "Unknown error".

        Returns:
            The stored metric, or None if the store rejected the write.
        """
        metric = CallMetric(
            api_name=api_name,
            endpoint=endpoint,
            response_time_ms=max(0, int(response_time_ms)),
            success=success,
            timestamp=self._clock(),
            error_message=None if success else (error_message or "Unknown error"),
        )

        try:
            await self._store.set(metric.store_key, metric.to_dict())
        except Exception:
            logger.exception(
                "Failed to record metric for %s (%s)", api_name, metric.store_key
            )
            return None

        logger.info(
            "API [%s] %s %s %dms",
            api_name,
            endpoint,
            "ok" if success else "failed",
            metric.response_time_ms,
        )
        return metric


def summarize(metrics: Iterable[CallMetric]) -> dict[str, MetricsSummary]:
    """Group metrics by api_name and compute a MetricsSummary for each."""
    groups: dict[str, list[CallMetric]] = {}
    for metric in metrics:
        groups.setdefault(metric.api_name, []).append(metric)

    summary: dict[str, MetricsSummary] = {}
    for api_name, group in groups.items():
        total = len(group)
        successful = sum(1 for m in group if m.success)
        times = [m.response_time_ms for m in group]
        summary[api_name] = MetricsSummary(
            total_calls=total,
            successful_calls=successful,
            failed_calls=total - successful,
            avg_response_time_ms=_round_half_up(sum(times) / total),
            min_response_time_ms=min(times),
            max_response_time_ms=max(times),
            success_rate=f"{successful / total * 100:.2f}",
        )
    return summary


class MetricsAggregator:
    """Builds a MetricsReport from the stored call log."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    async def get_report(self) -> MetricsReport:
        """Summarize the most recent METRICS_WINDOW records.

        Raises:
            KeyValueStoreError: If the log cannot be read.
        """
        raw_records = await self._store.get_by_prefix(METRIC_KEY_PREFIX)

        metrics: list[CallMetric] = []
        for raw in raw_records:
            try:
                metrics.append(CallMetric.from_dict(raw))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed metric record %r: %s", raw, exc)

        # sorted() is stable, so equal timestamps keep the store's key order
        newest_first = sorted(metrics, key=lambda m: m.timestamp, reverse=True)
        window = newest_first[:METRICS_WINDOW]

        return MetricsReport(
            summary=summarize(window),
            recent_metrics=window[:RECENT_METRICS_LIMIT],
        )
