"""
Gateway to the external text classifiers used to tag comments and complaints.

Classification enriches a write; it is never a precondition for it. Each call
is attempted once with a bounded timeout and every failure collapses to a safe
default label instead of propagating.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from app.models import Sentiment, Severity, UNKNOWN_SENTIMENT
from app.logging_config import logger

SENTIMENT_LABELS = {
    "LABEL_0": Sentiment.NEGATIVE.value,
    "LABEL_1": Sentiment.NEUTRAL.value,
    "LABEL_2": Sentiment.POSITIVE.value,
}

SEVERITY_LABELS = [severity.value for severity in Severity]


@dataclass(frozen=True)
class Classification:
    """Outcome of one classifier call; ``degraded`` marks a substituted default"""

    label: str
    degraded: bool = False

    @classmethod
    def fallback(cls, label: str) -> "Classification":
        return cls(label=label, degraded=True)


class ClassificationGateway:
    """Calls the sentiment and zero-shot severity models"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        sentiment_url: Optional[str] = None,
        severity_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the gateway. Configuration is fixed for the lifetime of the instance.

        Args:
            api_key: Hugging Face token (uses settings if not provided)
            sentiment_url: Sentiment model endpoint
            severity_url: Zero-shot classification endpoint
            timeout: Seconds allowed for a single call
        """
        self.api_key = api_key or settings.HUGGING_FACE_API_KEY
        self.sentiment_url = sentiment_url or settings.SENTIMENT_MODEL_URL
        self.severity_url = severity_url or settings.SEVERITY_MODEL_URL
        self.timeout = timeout if timeout is not None else settings.CLASSIFIER_TIMEOUT
        self.headers = {"Content-Type": "application/json"}
        if self.api_key:
            self.headers["Authorization"] = f"Bearer {self.api_key}"
        else:
            logger.warning("No Hugging Face API key configured, classifier calls will degrade")
        logger.info(f"Classification gateway initialized with {self.timeout}s timeout")

    async def _post(self, url: str, payload: Dict[str, Any]) -> Any:
        """Single POST to a classifier; raises on transport, status or JSON errors"""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(url, json=payload, headers=dict(self.headers))
            response.raise_for_status()
            return response.json()

    async def classify_sentiment_outcome(self, text: str) -> Classification:
        """
        Label text as Positive, Neutral or Negative

        Returns:
            Classification whose label is ``Unknown`` (degraded) when the
            classifier is unreachable or its answer cannot be interpreted
        """
        try:
            data = await self._post(self.sentiment_url, {"inputs": text})
        except httpx.TimeoutException:
            logger.warning(f"Sentiment classifier timed out after {self.timeout}s")
            return Classification.fallback(UNKNOWN_SENTIMENT)
        except httpx.HTTPStatusError as e:
            logger.warning(f"Sentiment classifier returned {e.response.status_code}")
            return Classification.fallback(UNKNOWN_SENTIMENT)
        except Exception as e:
            logger.error(f"Sentiment classification error: {str(e)}")
            return Classification.fallback(UNKNOWN_SENTIMENT)

        ranked = data[0] if isinstance(data, list) and data else []
        if not isinstance(ranked, list) or not ranked or not isinstance(ranked[0], dict):
            logger.error(f"Invalid sentiment response: {data!r}")
            return Classification.fallback(UNKNOWN_SENTIMENT)

        top_label = ranked[0].get("label")
        sentiment = SENTIMENT_LABELS.get(top_label)
        if sentiment is None:
            logger.error(f"Unrecognized sentiment label: {top_label!r}")
            return Classification.fallback(UNKNOWN_SENTIMENT)

        logger.debug(f"Sentiment classified as {sentiment} ({top_label})")
        return Classification(label=sentiment)

    async def classify_sentiment(self, text: str) -> str:
        """Plain-label form of :meth:`classify_sentiment_outcome`"""
        return (await self.classify_sentiment_outcome(text)).label

    async def classify_severity_outcome(self, text: str) -> Classification:
        """
        Rank Moderate/High/Urgent against the text and take the top label

        Returns:
            Classification falling back to Moderate (degraded) on any failure
        """
        payload = {"inputs": text, "parameters": {"candidate_labels": SEVERITY_LABELS}}
        try:
            data = await self._post(self.severity_url, payload)
        except httpx.TimeoutException:
            logger.warning(f"Severity classifier timed out after {self.timeout}s")
            return Classification.fallback(Severity.MODERATE.value)
        except Exception as e:
            logger.error(f"Severity classification error: {str(e)}")
            return Classification.fallback(Severity.MODERATE.value)

        labels = data.get("labels") if isinstance(data, dict) else None
        top_label = labels[0] if isinstance(labels, list) and labels else None
        if top_label not in SEVERITY_LABELS:
            logger.error(f"Invalid severity response: {data!r}")
            return Classification.fallback(Severity.MODERATE.value)

        logger.debug(f"Severity classified as {top_label}")
        return Classification(label=top_label)

    async def classify_severity(self, text: str) -> str:
        """Plain-label form of :meth:`classify_severity_outcome`"""
        return (await self.classify_severity_outcome(text)).label
