"""
VADER sentiment analysis used to label comments when the remote classifier cannot
"""
from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from app.models import Sentiment
from app.logging_config import logger


class SentimentAnalyzer:
    """Service for analyzing sentiment of text using VADER"""

    def __init__(self, positive_threshold: float = 0.05, negative_threshold: float = -0.05):
        """
        Initialize sentiment analyzer

        Args:
            positive_threshold: Compound score at or above which text is Positive
            negative_threshold: Compound score at or below which text is Negative
        """
        self.analyzer = SentimentIntensityAnalyzer()
        self.positive_threshold = positive_threshold
        self.negative_threshold = negative_threshold
        logger.info(
            f"Sentiment analyzer initialized with thresholds: "
            f"{negative_threshold} / {positive_threshold}"
        )

    def analyze(self, text: str) -> float:
        """
        Analyze sentiment of text and return compound score

        Args:
            text: Text to analyze

        Returns:
            Compound sentiment score (-1 to 1)
        """
        try:
            scores = self.analyzer.polarity_scores(text)
            compound_score = scores['compound']

            logger.debug(f"Sentiment analysis - Text length: {len(text)}, Score: {compound_score}")
            return compound_score

        except Exception as e:
            logger.error(f"Error analyzing sentiment: {str(e)}")
            raise

    def label(self, text: str) -> Sentiment:
        """
        Map text onto one of the three persisted sentiment labels

        Args:
            text: Text to classify

        Returns:
            Sentiment.POSITIVE, Sentiment.NEUTRAL or Sentiment.NEGATIVE
        """
        score = self.analyze(text)
        if score >= self.positive_threshold:
            return Sentiment.POSITIVE
        if score <= self.negative_threshold:
            return Sentiment.NEGATIVE
        return Sentiment.NEUTRAL
