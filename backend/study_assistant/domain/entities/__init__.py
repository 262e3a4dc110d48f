from .chat_message import ChatMessage, ContentPart, TokenUsage, ChatCompletionResult
from .call_metric import CallMetric, MetricsSummary, MetricsReport
from .fetch_result import FailureKind, FetchFailure, FetchResult, FetchSuccess
from .flashcard import Flashcard

__all__ = [
    "ChatMessage",
    "ContentPart",
    "TokenUsage",
    "ChatCompletionResult",
    "CallMetric",
    "MetricsSummary",
    "MetricsReport",
    "FailureKind",
    "FetchFailure",
    "FetchResult",
    "FetchSuccess",
    "Flashcard",
]
