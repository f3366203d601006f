"""
Configuration management using pydantic-settings and python-dotenv
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///offline.db",
        description="Async database connection URL",
        alias="DATABASE_URL"
    )
    DATABASE_ECHO: bool = Field(
        default=False,
        description="Echo SQL queries for debugging",
        alias="DATABASE_ECHO"
    )

    # Attachment storage
    SUPABASE_URL: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
        alias="SUPABASE_URL"
    )
    SUPABASE_SERVICE_KEY: Optional[str] = Field(
        default=None,
        description="Supabase service role key",
        alias="SUPABASE_SERVICE_KEY"
    )
    ATTACHMENT_BUCKET: str = Field(
        default="post-images",
        description="Storage bucket holding post attachments"
    )

    # Hugging Face inference
    HUGGING_FACE_API_KEY: Optional[str] = Field(
        default=None,
        description="Hugging Face API token for classification and reply generation",
        alias="HUGGING_FACE_API_KEY"
    )
    SENTIMENT_MODEL_URL: str = Field(
        default="https://router.huggingface.co/hf-inference/models/cardiffnlp/twitter-roberta-base-sentiment",
        description="Sentiment classification endpoint"
    )
    SEVERITY_MODEL_URL: str = Field(
        default="https://router.huggingface.co/hf-inference/models/joeddav/xlm-roberta-large-xnli",
        description="Zero-shot classification endpoint used for complaint severity"
    )
    CLASSIFIER_TIMEOUT: float = Field(
        default=10.0,
        description="Timeout in seconds for a single classification call"
    )
    SEVERITY_CLASSIFICATION_ENABLED: bool = Field(
        default=False,
        description="Classify complaint severity instead of assigning the fixed default"
    )

    # Reply generation
    AI_REPLY_BASE_URL: str = Field(
        default="https://router.huggingface.co/v1",
        description="OpenAI-compatible chat completion base URL"
    )
    AI_REPLY_MODEL: str = Field(
        default="google/gemma-2-2b-it:nebius",
        description="Chat model used to draft replies"
    )
    AI_REPLY_MAX_TOKENS: int = Field(
        default=200,
        description="Maximum tokens for a drafted reply"
    )

    # Session tokens issued by the identity service
    JWT_SECRET: str = Field(
        default="change-me",
        description="Shared secret used to verify session tokens",
        alias="JWT_SECRET"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Session token signing algorithm"
    )

    # Application
    ENVIRONMENT: str = Field(
        default="development",
        description="Application environment"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "allow"  # Allow extra fields from environment variables


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
