from .performance_metrics import MetricsAggregator, MetricsRecorder
from .study_history_service import StudyHistoryService
from .chat_tutor_service import ChatTutorService
from .image_analysis_service import ImageAnalysisService
from .flashcard_service import FlashcardService

__all__ = [
    "MetricsAggregator",
    "MetricsRecorder",
    "StudyHistoryService",
    "ChatTutorService",
    "ImageAnalysisService",
    "FlashcardService",
]
