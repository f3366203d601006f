# Business logic services package
from .entity_store import EntityStore
from .pagination import PageMeta, normalize_page_params, paginate
from .sentiment_analyzer import SentimentAnalyzer
from .classification_gateway import Classification, ClassificationGateway
from .attachment_store import AttachmentStore, StoredBlob
from .feedback_engine import FeedbackEngine
from .complaint_manager import ComplaintLifecycleManager
from .ai_service import AIService

__all__ = [
    "EntityStore",
    "PageMeta",
    "normalize_page_params",
    "paginate",
    "SentimentAnalyzer",
    "Classification",
    "ClassificationGateway",
    "AttachmentStore",
    "StoredBlob",
    "FeedbackEngine",
    "ComplaintLifecycleManager",
    "AIService",
]
