"""
AI service for drafting support replies to comments and complaints
"""
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from app.config import settings
from app.exceptions import UpstreamUnavailableError
from app.logging_config import logger

FALLBACK_REPLY = "Sorry, I'm unable to provide a response right now."

COMMENT_SYSTEM_PROMPT = (
    "You are a helpful customer support assistant. Based on the sentiment and description "
    "provided, write a short, professional, human-like reply. Do NOT use any placeholders like "
    "[Customer Name] or [Your Name]. Write the full message as-is, ready to send. Keep it polite, "
    "warm, and direct."
)

COMPLAINT_SYSTEM_PROMPT = (
    "You are a professional customer complaint resolution assistant. Based on the severity and "
    "description, write a short and empathetic reply. Be helpful, calm, and acknowledge the "
    "seriousness based on severity level."
)


class AIService:
    """Service for generating ready-to-send replies with a chat model"""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        """
        Initialize AI service

        Args:
            api_key: Hugging Face API token (uses settings if not provided)
            base_url: OpenAI-compatible endpoint (uses settings if not provided)
        """
        self.api_key = api_key or settings.HUGGING_FACE_API_KEY
        if not self.api_key:
            raise ValueError("Hugging Face API key is required")

        self.client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=base_url or settings.AI_REPLY_BASE_URL,
            max_retries=0,
        )
        self.model = settings.AI_REPLY_MODEL
        self.max_tokens = settings.AI_REPLY_MAX_TOKENS
        self.temperature = 0.7

        logger.info(f"AI service initialized with {self.model}")

    async def generate_comment_reply(self, sentiment: str, description: str) -> str:
        """
        Draft a reply to a customer comment

        Args:
            sentiment: Positive, Neutral or Negative
            description: The customer's comment

        Raises:
            UpstreamUnavailableError: If the model call fails
        """
        prompt = (
            f"Sentiment: {sentiment}\n"
            f"Customer description: \"{description}\"\n\n"
            "Write a ready-to-send reply without using placeholders. If negative, be apologetic "
            "and helpful. If positive, thank them. If neutral, acknowledge their description. "
            "Keep it under 100 words."
        )
        try:
            response = await self._call_chat_api(COMMENT_SYSTEM_PROMPT, prompt)
        except Exception as e:
            logger.error(f"AI comment reply error: {str(e)}")
            raise UpstreamUnavailableError("AI service failed")
        return self._extract_reply(response)

    async def generate_complaint_reply(self, severity: str, description: str) -> str:
        """
        Draft a reply to a customer complaint

        Args:
            severity: Moderate, High or Urgent
            description: The complaint text

        Raises:
            UpstreamUnavailableError: If the model call fails
        """
        prompt = (
            f"Severity: {severity}\n"
            f"Complaint: \"{description}\"\n\n"
            "Write a polite, human-sounding message ready to be sent. For \"Urgent\", be especially "
            "quick and serious. For \"High\", be helpful and promise fast resolution. For "
            "\"Moderate\", acknowledge and show intent to fix. Keep it under 100 words."
        )
        try:
            response = await self._call_chat_api(COMPLAINT_SYSTEM_PROMPT, prompt)
        except Exception as e:
            logger.error(f"AI complaint reply error: {str(e)}")
            raise UpstreamUnavailableError("Complaint AI service failed")
        return self._extract_reply(response)

    async def _call_chat_api(self, system_prompt: str, user_prompt: str) -> Any:
        """
        Make a single chat completion call

        Returns:
            OpenAI response object
        """
        try:
            return await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )

        except openai.RateLimitError as e:
            logger.warning(f"Reply model rate limit hit: {str(e)}")
            raise

        except openai.APIError as e:
            logger.error(f"Reply model API error: {str(e)}")
            raise

    def _extract_reply(self, response: Any) -> str:
        """Pull the reply text out of a completion, falling back to a fixed message"""
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            content = None

        if not content or not content.strip():
            logger.warning("Reply model returned no content, using fallback reply")
            return FALLBACK_REPLY
        return content.strip()
