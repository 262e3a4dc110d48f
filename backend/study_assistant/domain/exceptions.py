"""Domain-specific exceptions — framework-independent."""

from study_assistant.domain.entities.fetch_result import FailureKind, FetchFailure


class UpstreamServiceError(Exception):
    """Raised by a feature service when its provider call failed terminally.

    Carries the user-facing ``error`` and the upstream ``details`` so the
    presentation layer can render ``{"error": ..., "details": ...}``.
    """

    def __init__(
        self,
        error: str,
        details: str | None = None,
        status_code: int = 502,
        kind: FailureKind | None = None,
    ):
        self.error = error
        self.details = details
        self.status_code = status_code
        self.kind = kind
        super().__init__(f"{status_code}: {error}")

    @classmethod
    def from_failure(cls, failure: FetchFailure, error: str) -> "UpstreamServiceError":
        """Translate a terminal FetchFailure into an HTTP-facing error."""
        if failure.kind is FailureKind.DEADLINE_EXCEEDED:
            status_code = 504
        elif failure.status_code is not None and 400 <= failure.status_code < 600:
            status_code = failure.status_code
        else:
            status_code = 502
        return cls(
            error=error,
            details=failure.details or failure.error,
            status_code=status_code,
            kind=failure.kind,
        )


class KeyValueStoreError(Exception):
    """Raised when the key-value store cannot be read or written."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"kv_store {operation} failed: {message}")


class FlashcardParseError(Exception):
    """Raised when the model reply does not contain a flashcard list."""

    def __init__(self, content: str, reason: str):
        self.content = content
        self.reason = reason
        super().__init__(f"Could not parse flashcards: {reason}")
