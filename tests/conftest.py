"""
Shared fixtures: an in-memory database seeded with users, and classifier doubles
"""
from typing import List

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.models import Role, Severity, User
from app.security import Actor
from app.services.classification_gateway import Classification
from app.services.entity_store import EntityStore


class StubGateway:
    """Classifier double returning fixed outcomes and recording its inputs"""

    def __init__(
        self,
        sentiment: str = "Positive",
        severity: str = Severity.URGENT.value,
        degraded: bool = False,
    ):
        self.sentiment = sentiment
        self.severity = severity
        self.degraded = degraded
        self.sentiment_calls: List[str] = []
        self.severity_calls: List[str] = []

    async def classify_sentiment_outcome(self, text: str) -> Classification:
        self.sentiment_calls.append(text)
        return Classification(label=self.sentiment, degraded=self.degraded)

    async def classify_sentiment(self, text: str) -> str:
        return (await self.classify_sentiment_outcome(text)).label

    async def classify_severity_outcome(self, text: str) -> Classification:
        self.severity_calls.append(text)
        return Classification(label=self.severity, degraded=self.degraded)

    async def classify_severity(self, text: str) -> str:
        return (await self.classify_severity_outcome(text)).label


@pytest.fixture
async def session():
    """Fresh in-memory database per test, seeded with three users"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as db_session:
        db_session.add_all([
            User(id="user-1", name="Jordan", email="jordan@example.com"),
            User(id="user-2", name="Sam", email="sam@example.com"),
            User(id="admin-1", name="Support Desk", email="desk@example.com", role=Role.ADMIN),
        ])
        await db_session.commit()
        yield db_session

    await engine.dispose()


@pytest.fixture
def store(session):
    return EntityStore(session)


@pytest.fixture
def make_gateway():
    return StubGateway


@pytest.fixture
def gateway():
    return StubGateway()


@pytest.fixture
def owner():
    return Actor(user_id="user-1", email="jordan@example.com")


@pytest.fixture
def other_user():
    return Actor(user_id="user-2", email="sam@example.com")


@pytest.fixture
def admin():
    return Actor(user_id="admin-1", role=Role.ADMIN, email="desk@example.com")
