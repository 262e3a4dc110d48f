"""Unit tests for the MetricsRecorder and MetricsAggregator."""

import asyncio
import itertools
from typing import Any

import pytest

from study_assistant.application.interfaces import KeyValueStore
from study_assistant.application.services.performance_metrics import (
    METRICS_WINDOW,
    RECENT_METRICS_LIMIT,
    MetricsAggregator,
    MetricsRecorder,
    summarize,
)
from study_assistant.domain.entities import CallMetric
from study_assistant.domain.exceptions import KeyValueStoreError
from study_assistant.infrastructure.kv import InMemoryKeyValueStore


# ── Fakes ──


class FailingKeyValueStore(KeyValueStore):
    """Store whose every operation fails."""

    async def set(self, key: str, value: dict[str, Any]) -> None:
        raise KeyValueStoreError("set", "connection refused")

    async def get(self, key: str) -> dict[str, Any] | None:
        raise KeyValueStoreError("get", "connection refused")

    async def get_by_prefix(self, prefix: str) -> list[dict[str, Any]]:
        raise KeyValueStoreError("get_by_prefix", "connection refused")


def _ticking_clock(start: int = 1_700_000_000_000):
    return itertools.count(start).__next__


async def _record_many(
    recorder: MetricsRecorder,
    api_name: str,
    outcomes: list[tuple[int, bool]],
) -> None:
    for response_time, success in outcomes:
        await recorder.record(
            api_name=api_name,
            endpoint="/chat/completions",
            response_time_ms=response_time,
            success=success,
            error_message=None if success else "upstream 503",
        )


# ── Recorder ──


@pytest.mark.asyncio
async def test_record_appends_metric_under_api_and_timestamp_key():
    store = InMemoryKeyValueStore()
    recorder = MetricsRecorder(store, clock=lambda: 1234)

    metric = await recorder.record(
        api_name="Chat", endpoint="/chat/completions", response_time_ms=812, success=True
    )

    assert metric is not None
    stored = await store.get("api_metric:Chat:1234")
    assert stored == {
        "apiName": "Chat",
        "endpoint": "/chat/completions",
        "responseTime": 812,
        "success": True,
        "errorMessage": None,
        "timestamp": 1234,
    }


@pytest.mark.asyncio
async def test_error_message_only_kept_for_failures():
    store = InMemoryKeyValueStore()
    recorder = MetricsRecorder(store, clock=_ticking_clock())

    ok = await recorder.record(
        api_name="Chat", endpoint="/e", response_time_ms=1, success=True, error_message="ignored"
    )
    failed = await recorder.record(
        api_name="Chat", endpoint="/e", response_time_ms=1, success=False
    )

    assert ok.error_message is None
    assert failed.error_message == "Unknown error"


@pytest.mark.asyncio
async def test_record_swallows_store_failure():
    """A broken log store never fails the caller."""
    recorder = MetricsRecorder(FailingKeyValueStore())

    result = await recorder.record(
        api_name="Chat", endpoint="/chat/completions", response_time_ms=5, success=False
    )

    assert result is None


@pytest.mark.asyncio
async def test_concurrent_appends_at_distinct_timestamps_keep_every_record():
    store = InMemoryKeyValueStore()
    recorder = MetricsRecorder(store, clock=_ticking_clock())

    await asyncio.gather(*(
        recorder.record(api_name="Chat", endpoint="/e", response_time_ms=i, success=True)
        for i in range(50)
    ))

    assert len(await store.get_by_prefix("api_metric:Chat:")) == 50


@pytest.mark.asyncio
async def test_concurrent_appends_at_identical_timestamp_keep_one_record():
    """Same (api_name, timestamp) collides; exactly one record survives."""
    store = InMemoryKeyValueStore()
    recorder = MetricsRecorder(store, clock=lambda: 42)

    results = await asyncio.gather(*(
        recorder.record(api_name="Chat", endpoint="/e", response_time_ms=i, success=True)
        for i in range(5)
    ))

    assert all(r is not None for r in results)
    records = await store.get_by_prefix("api_metric:")
    assert len(records) == 1
    assert records[0]["timestamp"] == 42
    assert records[0]["responseTime"] in range(5)


# ── Summary math ──


def test_summarize_five_successes_two_failures():
    metrics = [
        CallMetric("Chat", "/e", t, success, timestamp=i)
        for i, (t, success) in enumerate(
            [(100, True)] * 5 + [(300, False)] * 2
        )
    ]

    summary = summarize(metrics)["Chat"]

    assert summary.total_calls == 7
    assert summary.successful_calls == 5
    assert summary.failed_calls == 2
    assert summary.successful_calls + summary.failed_calls == summary.total_calls
    assert summary.success_rate == "71.43"


def test_summarize_min_max_and_rounded_average():
    metrics = [
        CallMetric("Vision", "/e", t, True, timestamp=i)
        for i, t in enumerate([120, 80, 401, 200])
    ]

    summary = summarize(metrics)["Vision"]

    assert summary.min_response_time_ms == 80
    assert summary.max_response_time_ms == 401
    assert summary.avg_response_time_ms == 200  # 200.25
    assert summary.success_rate == "100.00"


def test_summarize_average_rounds_half_up():
    metrics = [CallMetric("Chat", "/e", t, True, timestamp=t) for t in (1, 2)]
    assert summarize(metrics)["Chat"].avg_response_time_ms == 2


def test_summarize_groups_by_api_name():
    metrics = [
        CallMetric("Chat", "/e", 10, True, timestamp=1),
        CallMetric("Vision", "/e", 20, False, timestamp=2, error_message="x"),
        CallMetric("Chat", "/e", 30, False, timestamp=3, error_message="y"),
    ]

    summary = summarize(metrics)

    assert set(summary) == {"Chat", "Vision"}
    assert summary["Chat"].total_calls == 2
    assert summary["Chat"].success_rate == "50.00"
    assert summary["Vision"].success_rate == "0.00"


# ── Aggregator ──


@pytest.mark.asyncio
async def test_report_from_recorded_calls():
    store = InMemoryKeyValueStore()
    recorder = MetricsRecorder(store, clock=_ticking_clock())
    await _record_many(recorder, "Chat", [(100, True)] * 5 + [(250, False)] * 2)

    report = await MetricsAggregator(store).get_report()

    chat = report.summary["Chat"]
    assert (chat.total_calls, chat.successful_calls, chat.failed_calls) == (7, 5, 2)
    assert chat.success_rate == "71.43"
    assert chat.min_response_time_ms == 100
    assert chat.max_response_time_ms == 250
    assert chat.avg_response_time_ms == 143  # 1000 / 7
    assert len(report.recent_metrics) == 7
    assert report.recent_metrics[0].success is False


@pytest.mark.asyncio
async def test_report_only_uses_most_recent_window():
    store = InMemoryKeyValueStore()
    recorder = MetricsRecorder(store, clock=_ticking_clock(start=1))
    # The oldest 50 calls are slow failures and must fall out of the window
    await _record_many(recorder, "Chat", [(9999, False)] * 50 + [(10, True)] * 100)

    report = await MetricsAggregator(store).get_report()

    chat = report.summary["Chat"]
    assert chat.total_calls == METRICS_WINDOW == 100
    assert chat.failed_calls == 0
    assert chat.max_response_time_ms == 10
    assert len(report.recent_metrics) == RECENT_METRICS_LIMIT == 20
    assert [m.timestamp for m in report.recent_metrics] == list(range(150, 130, -1))


@pytest.mark.asyncio
async def test_report_window_is_shared_across_api_names():
    store = InMemoryKeyValueStore()
    recorder = MetricsRecorder(store, clock=_ticking_clock(start=1))
    await _record_many(recorder, "Vision", [(10, True)] * 60)
    await _record_many(recorder, "Chat", [(10, True)] * 60)

    report = await MetricsAggregator(store).get_report()

    assert report.summary["Chat"].total_calls == 60
    assert report.summary["Vision"].total_calls == 40


@pytest.mark.asyncio
async def test_report_is_stable_for_equal_timestamps():
    store = InMemoryKeyValueStore()
    for api_name in ("Chat", "Flashcards", "Vision"):
        await MetricsRecorder(store, clock=lambda: 500).record(
            api_name=api_name, endpoint="/e", response_time_ms=1, success=True
        )
    aggregator = MetricsAggregator(store)

    first = [m.api_name for m in (await aggregator.get_report()).recent_metrics]
    second = [m.api_name for m in (await aggregator.get_report()).recent_metrics]

    assert first == second
    assert sorted(first) == ["Chat", "Flashcards", "Vision"]


@pytest.mark.asyncio
async def test_report_skips_malformed_records():
    store = InMemoryKeyValueStore()
    await store.set("api_metric:Chat:1", {"apiName": "Chat", "timestamp": "soon"})
    await MetricsRecorder(store, clock=lambda: 2).record(
        api_name="Chat", endpoint="/e", response_time_ms=7, success=True
    )

    report = await MetricsAggregator(store).get_report()

    assert report.summary["Chat"].total_calls == 1


@pytest.mark.asyncio
async def test_report_skips_records_with_non_bool_success():
    store = InMemoryKeyValueStore()
    await store.set(
        "api_metric:Chat:1",
        {"apiName": "Chat", "endpoint": "/e", "responseTime": 5, "success": "false", "timestamp": 1},
    )
    await MetricsRecorder(store, clock=lambda: 2).record(
        api_name="Chat", endpoint="/e", response_time_ms=7, success=False
    )

    report = await MetricsAggregator(store).get_report()

    chat = report.summary["Chat"]
    assert chat.total_calls == 1
    assert chat.successful_calls == 0


def test_call_metric_requires_bool_success():
    with pytest.raises(TypeError):
        CallMetric.from_dict(
            {"apiName": "Chat", "responseTime": 1, "success": "false", "timestamp": 1}
        )


@pytest.mark.asyncio
async def test_report_ignores_other_prefixes():
    store = InMemoryKeyValueStore()
    await store.set("conversation:1", {"message": "hi", "timestamp": 1})

    report = await MetricsAggregator(store).get_report()

    assert report.summary == {}
    assert report.recent_metrics == []


@pytest.mark.asyncio
async def test_report_propagates_store_failure():
    with pytest.raises(KeyValueStoreError):
        await MetricsAggregator(FailingKeyValueStore()).get_report()
