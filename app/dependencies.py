"""
FastAPI dependencies wiring the engines to a request's database session
"""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.exceptions import UpstreamUnavailableError
from app.services.ai_service import AIService
from app.services.attachment_store import AttachmentStore
from app.services.classification_gateway import ClassificationGateway
from app.services.complaint_manager import ComplaintLifecycleManager
from app.services.entity_store import EntityStore
from app.services.feedback_engine import FeedbackEngine
from app.services.sentiment_analyzer import SentimentAnalyzer
from app.logging_config import logger


@lru_cache()
def get_classification_gateway() -> ClassificationGateway:
    """Process-wide classifier client configuration, built once"""
    return ClassificationGateway()


@lru_cache()
def get_sentiment_analyzer() -> SentimentAnalyzer:
    return SentimentAnalyzer()


@lru_cache()
def get_attachment_store() -> AttachmentStore:
    return AttachmentStore()


@lru_cache()
def _build_ai_service() -> AIService:
    return AIService()


def get_ai_service() -> AIService:
    try:
        return _build_ai_service()
    except ValueError as e:
        logger.error(f"AI service not available: {str(e)}")
        raise UpstreamUnavailableError("AI service is not configured")


async def get_entity_store(db: AsyncSession = Depends(get_db)) -> EntityStore:
    return EntityStore(db)


async def get_feedback_engine(
    store: EntityStore = Depends(get_entity_store),
    gateway: ClassificationGateway = Depends(get_classification_gateway),
    attachments: AttachmentStore = Depends(get_attachment_store),
    analyzer: SentimentAnalyzer = Depends(get_sentiment_analyzer),
) -> FeedbackEngine:
    return FeedbackEngine(store, gateway, attachments=attachments, sentiment_analyzer=analyzer)


async def get_complaint_manager(
    store: EntityStore = Depends(get_entity_store),
    gateway: ClassificationGateway = Depends(get_classification_gateway),
) -> ComplaintLifecycleManager:
    return ComplaintLifecycleManager(store, gateway)
