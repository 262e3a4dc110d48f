from .common import CamelModel, ErrorResponse, TokenUsageResponse
from .chat import ChatHistoryMessage, ChatRequest, ChatResponse
from .image_analysis import ImageAnalysisRequest, ImageAnalysisResponse
from .flashcards import FlashcardRequest, FlashcardResponse, FlashcardSchema
from .metrics import CallMetricSchema, MetricsResponse, MetricsSummarySchema
from .history import HistoryResponse, HistoryType, SaveSessionRequest, SaveSessionResponse

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "TokenUsageResponse",
    "ChatHistoryMessage",
    "ChatRequest",
    "ChatResponse",
    "ImageAnalysisRequest",
    "ImageAnalysisResponse",
    "FlashcardRequest",
    "FlashcardResponse",
    "FlashcardSchema",
    "CallMetricSchema",
    "MetricsResponse",
    "MetricsSummarySchema",
    "HistoryResponse",
    "HistoryType",
    "SaveSessionRequest",
    "SaveSessionResponse",
]
