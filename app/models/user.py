from datetime import datetime
from typing import Optional
from sqlmodel import Field, SQLModel

from .clock import utc_now
from .enums import Role


class User(SQLModel, table=True):
    """Read model of an identity owned by the external identity service"""
    __tablename__ = "users"

    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(max_length=50, nullable=False)
    email: Optional[str] = Field(default=None, max_length=254)
    role: Role = Field(default=Role.USER)
    created_at: datetime = Field(default_factory=utc_now)
