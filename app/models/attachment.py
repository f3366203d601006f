from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4
from sqlmodel import Field, SQLModel

from .clock import utc_now


class Attachment(SQLModel, table=True):
    __tablename__ = "attachments"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    url: str = Field(nullable=False)
    public_id: str = Field(nullable=False)
    uploaded_by: str = Field(max_length=64, nullable=False)
    created_at: datetime = Field(default_factory=utc_now)
