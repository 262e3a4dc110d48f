"""Retrying HTTP client: bounded retry with linear backoff over httpx.

Every call returns a FetchResult; nothing is raised past this module.
Classification per attempt:

    2xx + JSON body        -> FetchSuccess
    2xx + malformed body   -> terminal parse_error
    429                    -> retryable (rate_limited)
    >= 500                 -> retryable (server_error)
    other non-2xx          -> terminal client_error
    httpx.TransportError   -> retryable (network_error)

Attempts are driven by ``tenacity.AsyncRetrying`` on the classified
result. The k-th retry waits ``base_delay_ms * k``. When the budget is
spent the failure of the last attempt is returned as-is.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    stop_any,
)

from study_assistant.domain.entities import FailureKind, FetchFailure, FetchResult, FetchSuccess

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_MS = 1000

SleepFunc = Callable[[float], Awaitable[None]]


def backoff_delay_ms(retry_index: int, base_delay_ms: int = DEFAULT_BASE_DELAY_MS) -> int:
    """Delay before the ``retry_index``-th retry (1-based)."""
    if retry_index < 1:
        return 0
    return base_delay_ms * retry_index


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def _is_retryable_failure(outcome: FetchResult[Any]) -> bool:
    return isinstance(outcome, FetchFailure) and outcome.retryable


def classify_status(status_code: int) -> FailureKind:
    if status_code == 429:
        return FailureKind.RATE_LIMITED
    if status_code >= 500:
        return FailureKind.SERVER_ERROR
    return FailureKind.CLIENT_ERROR


class RetryingHttpClient:
    """Executes JSON HTTP requests with bounded sequential retries.

    Retries are awaited with ``asyncio.sleep`` so one retrying call never
    stalls other requests. The per-attempt timeout is the httpx timeout;
    ``deadline_seconds`` optionally caps the whole sequence.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
        deadline_seconds: float | None = None,
        timeout_seconds: float = 60.0,
        sleep: SleepFunc = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._http_client = http_client
        self._max_retries = max_retries
        self._base_delay_ms = base_delay_ms
        self._deadline_seconds = deadline_seconds
        self._timeout_seconds = timeout_seconds
        self._sleep = sleep
        self._clock = clock

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout_seconds)

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        max_retries: int | None = None,
    ) -> FetchResult[Any]:
        """Send a request, retrying transient failures.

        Args:
            method: HTTP method, e.g. "POST".
            url: Absolute target URL.
            headers: Request headers.
            json_body: JSON-serialisable body, or None for no body.
            max_retries: Retries allowed after the first attempt
                (defaults to the client's configured budget).

        Returns:
            FetchSuccess with the decoded JSON body, or the terminal
            FetchFailure of the last attempt.
        """
        budget = self._max_retries if max_retries is None else max(0, max_retries)
        started = self._clock()

        # After attempt k fails, the next wait is the k-th retry's backoff
        def next_delay_ms(state: RetryCallState) -> int:
            return backoff_delay_ms(state.attempt_number, self._base_delay_ms)

        def deadline_reached(state: RetryCallState) -> bool:
            return self._would_cross_deadline(started, next_delay_ms(state))

        def log_retry(state: RetryCallState) -> None:
            outcome: FetchFailure = state.outcome.result()
            logger.warning(
                "%s %s failed (%s), retrying in %dms (%d of %d retries)",
                method,
                url,
                outcome.status_code or outcome.kind.value,
                next_delay_ms(state),
                state.attempt_number,
                budget,
            )

        def give_up(state: RetryCallState) -> FetchFailure:
            outcome: FetchFailure = state.outcome.result()
            if state.attempt_number <= budget:
                logger.warning(
                    "%s %s: giving up before retry %d, deadline of %.1fs would be exceeded",
                    method, url, state.attempt_number, self._deadline_seconds,
                )
                return FetchFailure(
                    kind=FailureKind.DEADLINE_EXCEEDED,
                    error="Request deadline exceeded",
                    details=outcome.details,
                    status_code=outcome.status_code,
                )
            logger.error(
                "%s %s failed after %d attempt(s): %s",
                method, url, state.attempt_number, outcome.error,
            )
            return outcome

        retrying = AsyncRetrying(
            retry=retry_if_result(_is_retryable_failure),
            stop=stop_any(stop_after_attempt(budget + 1), deadline_reached),
            wait=lambda state: next_delay_ms(state) / 1000,
            sleep=self._sleep,
            before_sleep=log_retry,
            retry_error_callback=give_up,
        )

        client = await self._get_client()
        should_close = self._http_client is None
        try:
            return await retrying(self._attempt, client, method, url, headers, json_body)
        finally:
            if should_close:
                await client.aclose()

    def _would_cross_deadline(self, started: float, delay_ms: int) -> bool:
        if self._deadline_seconds is None:
            return False
        elapsed = self._clock() - started
        return elapsed + delay_ms / 1000 > self._deadline_seconds

    async def _attempt(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        headers: dict[str, str] | None,
        json_body: Any,
    ) -> FetchResult[Any]:
        """Run a single attempt and classify its outcome."""
        try:
            response = await client.request(method, url, headers=headers, json=json_body)
        except httpx.TransportError as exc:
            return FetchFailure(
                kind=FailureKind.NETWORK_ERROR,
                error="Network error",
                details=str(exc) or exc.__class__.__name__,
                retryable=True,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return FetchFailure(
                kind=FailureKind.INVALID_REQUEST,
                error="Request could not be sent",
                details=str(exc) or exc.__class__.__name__,
            )

        if not response.is_success:
            return FetchFailure(
                kind=classify_status(response.status_code),
                error=f"Upstream request failed with status {response.status_code}",
                details=response.text,
                status_code=response.status_code,
                retryable=is_retryable_status(response.status_code),
            )

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("%s %s returned a malformed body: %s", method, url, exc)
            return FetchFailure(
                kind=FailureKind.PARSE_ERROR,
                error="Malformed response body",
                details=response.text or str(exc),
                status_code=response.status_code,
            )

        return FetchSuccess(data=data, status_code=response.status_code)
