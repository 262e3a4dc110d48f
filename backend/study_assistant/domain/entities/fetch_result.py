"""Closed result variant returned by outbound HTTP calls.

Callers branch on the variant type instead of on HTTP status codes:

    match result:
        case FetchSuccess(data=data):
            ...
        case FetchFailure(kind=kind, error=error, details=details):
            ...
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(str, Enum):
    """Why an outbound call ended without a usable payload."""

    CLIENT_ERROR = "client_error"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    INVALID_REQUEST = "invalid_request"
    PARSE_ERROR = "parse_error"
    DEADLINE_EXCEEDED = "deadline_exceeded"


@dataclass(frozen=True)
class FetchSuccess(Generic[T]):
    """The call completed and its body was parsed."""

    data: T
    status_code: int = 200


@dataclass(frozen=True)
class FetchFailure:
    """The call ended in a terminal failure.

    ``details`` carries the upstream body (verbatim) or the exception
    message from the last attempt only.
    """

    kind: FailureKind
    error: str
    details: str | None = None
    status_code: int | None = None
    retryable: bool = False


FetchResult = FetchSuccess[T] | FetchFailure
