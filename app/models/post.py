from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4
from sqlmodel import Field, SQLModel, Column, JSON

from .clock import utc_now
from .enums import Sentiment


class Post(SQLModel, table=True):
    __tablename__ = "posts"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200, nullable=False)
    description: str = Field(max_length=2000, nullable=False)
    author: str = Field(max_length=64, index=True, nullable=False)
    likes: int = Field(default=0, ge=0)
    liked_by: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    comments: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    image: Optional[UUID] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class Comment(SQLModel, table=True):
    __tablename__ = "comments"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    content: str = Field(max_length=500, nullable=False)
    sentiment: Sentiment = Field(nullable=False)
    user: str = Field(max_length=64, nullable=False)
    post: UUID = Field(index=True, nullable=False)
    replies: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CommentReply(SQLModel, table=True):
    __tablename__ = "comment_replies"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    content: str = Field(max_length=500, nullable=False)
    user: str = Field(max_length=64, nullable=False)
    comment: UUID = Field(index=True, nullable=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
