from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4
from sqlmodel import Field, SQLModel, Column, JSON

from .clock import utc_now
from .enums import ComplaintStatus, Severity


class Complaint(SQLModel, table=True):
    __tablename__ = "complaints"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    order_id: str = Field(min_length=3, max_length=50, nullable=False)
    product_type: str = Field(min_length=2, max_length=100, nullable=False)
    description: str = Field(min_length=10, max_length=1000, nullable=False)
    user_id: str = Field(max_length=64, index=True, nullable=False)
    severity: Severity = Field(default=Severity.MODERATE)
    status: ComplaintStatus = Field(default=ComplaintStatus.OPEN)
    replies: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class ComplaintReply(SQLModel, table=True):
    __tablename__ = "complaint_replies"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    content: str = Field(max_length=500, nullable=False)
    user_id: str = Field(max_length=64, nullable=False)
    complaint_id: UUID = Field(index=True, nullable=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
