"""
Request bodies for the HTTP API.

Strings are trimmed before their length is checked; ids must be UUIDs.
"""
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.exceptions import InputValidationError
from app.models import Sentiment, Severity


def _trimmed(value: Any, minimum: int, maximum: int, message: str) -> str:
    if not isinstance(value, str):
        raise ValueError(message)
    value = value.strip()
    if not minimum <= len(value) <= maximum:
        raise ValueError(message)
    return value


def _uuid_string(value: Any, message: str) -> str:
    try:
        return str(UUID(str(value)))
    except (TypeError, ValueError):
        raise ValueError(message)


def validation_message(error: ValidationError) -> str:
    """Join pydantic errors into the single message used in error envelopes"""
    messages = []
    for item in error.errors():
        message = item.get("msg", "Invalid value")
        messages.append(message.removeprefix("Value error, "))
    return ", ".join(messages)


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PostCreate(RequestModel):
    title: str
    description: str

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, value):
        return _trimmed(value, 1, 200, "Title must be between 1 and 200 characters")

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value):
        return _trimmed(value, 1, 2000, "Description must be between 1 and 2000 characters")


class PostUpdate(RequestModel):
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, value):
        if value is None:
            return None
        return _trimmed(value, 1, 200, "Title must be between 1 and 200 characters")

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value):
        if value is None:
            return None
        return _trimmed(value, 1, 2000, "Description must be between 1 and 2000 characters")


class CommentCreate(RequestModel):
    content: str
    post_id: str = Field(alias="postId")

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, value):
        return _trimmed(value, 1, 500, "Comment must be between 1 and 500 characters")

    @field_validator("post_id", mode="before")
    @classmethod
    def check_post_id(cls, value):
        return _uuid_string(value, "Invalid post ID")


class CommentReplyCreate(RequestModel):
    content: str
    comment_id: str = Field(alias="commentId")

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, value):
        return _trimmed(value, 1, 500, "Reply must be between 1 and 500 characters")

    @field_validator("comment_id", mode="before")
    @classmethod
    def check_comment_id(cls, value):
        return _uuid_string(value, "Invalid comment ID")


class ComplaintCreate(RequestModel):
    order_id: str = Field(alias="orderId")
    product_type: str = Field(alias="productType")
    description: str

    @field_validator("order_id", mode="before")
    @classmethod
    def check_order_id(cls, value):
        return _trimmed(value, 3, 50, "Order ID must be between 3 and 50 characters")

    @field_validator("product_type", mode="before")
    @classmethod
    def check_product_type(cls, value):
        return _trimmed(value, 2, 100, "Product type must be between 2 and 100 characters")

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value):
        return _trimmed(value, 10, 1000, "Description must be between 10 and 1000 characters")


class ComplaintReplyCreate(RequestModel):
    content: str
    complaint_id: str = Field(alias="complaintId")

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, value):
        return _trimmed(value, 1, 500, "Reply must be between 1 and 500 characters")

    @field_validator("complaint_id", mode="before")
    @classmethod
    def check_complaint_id(cls, value):
        return _uuid_string(value, "Invalid complaint ID")


class AICommentReplyRequest(RequestModel):
    sentiment: Sentiment
    description: str

    @field_validator("sentiment", mode="before")
    @classmethod
    def check_sentiment(cls, value):
        if value not in [sentiment.value for sentiment in Sentiment]:
            raise ValueError("Sentiment must be Positive, Neutral, or Negative")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value):
        return _trimmed(value, 1, 500, "Description must be between 1 and 500 characters")


class AIComplaintReplyRequest(RequestModel):
    severity: Severity
    description: str

    @field_validator("severity", mode="before")
    @classmethod
    def check_severity(cls, value):
        if value not in [severity.value for severity in Severity]:
            raise ValueError("Severity must be Moderate, High, or Urgent")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value):
        return _trimmed(value, 1, 1000, "Description must be between 1 and 1000 characters")


def parse_form(model: type, **fields) -> Any:
    """Validate multipart form fields with a request model"""
    try:
        return model(**fields)
    except ValidationError as e:
        raise InputValidationError(validation_message(e))
