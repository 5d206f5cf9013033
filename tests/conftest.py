"""
Pytest configuration and fixtures for mailscore tests.

Provides:
- Async test database with SQLite
- Test client for API testing
- Factory fixtures for sent emails and subscribers
- In-memory fakes for the store contracts
"""

from collections.abc import AsyncGenerator
from datetime import datetime
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mailscore.config import Settings, ValidationConfig, get_settings
from mailscore.core.datetime_utils import utc_now
from mailscore.main import app
from mailscore.models import Base, EmailStatus, NewsletterSubscriber, SentEmail
from mailscore.services.email_validation import (
    SentEmailRecord,
    build_validation_service,
    get_validation_service,
)
from mailscore.services.email_validation.base import EventStore, SubscriberStore
from mailscore.services.email_validation.models import SendReceipt
from mailscore.services.email_validation.null import NullMxChecker, NullSessionChecker
from mailscore.services.email_validation.reputation import StaticReputationOracle
from mailscore.services.email_validation.stores import SqlEventStore, SqlSubscriberStore

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# Override settings for testing
class TestSettings(Settings):
    database_url: str = TEST_DATABASE_URL
    debug: bool = True
    resend_api_key: str = ""
    email_domain: str = "mailscore.test"
    reputation_api_url: str = ""
    mx_check_enabled: bool = False
    smtp_check_host: str = ""


class FakeEventStore(EventStore):
    """In-memory event store holding SentEmailRecords."""

    def __init__(self, records: list[SentEmailRecord] | None = None) -> None:
        self.records = records or []

    async def count_sent(self, since: datetime, status: EmailStatus | None = None) -> int:
        return sum(
            1
            for r in self.records
            if r.sent_at >= since and (status is None or r.status == status)
        )

    async def get_sent_by_id(self, sent_email_id: int) -> SentEmailRecord | None:
        return next((r for r in self.records if r.id == sent_email_id), None)


class FakeSubscriberStore(SubscriberStore):
    """In-memory subscriber store holding unsubscribe timestamps."""

    def __init__(self, unsubscribed_at: list[datetime] | None = None) -> None:
        self.unsubscribed_at = unsubscribed_at or []

    async def count_unsubscribed(self, since: datetime) -> int:
        return sum(1 for ts in self.unsubscribed_at if ts >= since)


@pytest_asyncio.fixture
async def db_engine():
    """Create async test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create async test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_transport():
    """Transport mock that accepts every message."""
    transport = AsyncMock()
    transport.provider_name = "mock"
    transport.send.return_value = SendReceipt(message_id="msg-123")
    return transport


@pytest.fixture
def sql_service(session_factory, mock_transport):
    """Validation service backed by the SQLite test database."""
    return build_validation_service(
        TestSettings(),
        ValidationConfig({}),
        event_store=SqlEventStore(session_factory),
        subscriber_store=SqlSubscriberStore(session_factory),
        oracle=StaticReputationOracle(),
        mx_checker=NullMxChecker(),
        session_checker=NullSessionChecker(),
        transport=mock_transport,
    )


@pytest_asyncio.fixture
async def client(sql_service) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client with the validation service overridden."""

    def override_get_settings():
        return TestSettings()

    app.dependency_overrides[get_validation_service] = lambda: sql_service
    app.dependency_overrides[get_settings] = override_get_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ============================================================================
# Factory Fixtures
# ============================================================================


@pytest.fixture
def make_sent_email(db_session: AsyncSession):
    """Factory for persisted SentEmail rows."""

    async def _make(
        status: EmailStatus = EmailStatus.DELIVERED,
        sent_at: datetime | None = None,
        subject: str = "Your weekly tour update",
        html_content: str = "<p>Hello</p><p>company address</p><a>unsubscribe</a>",
        recipient: str = "reader@gmail.com",
    ) -> SentEmail:
        sent = SentEmail(
            recipient=recipient,
            subject=subject,
            html_content=html_content,
            status=status,
            sent_at=sent_at or utc_now(),
        )
        db_session.add(sent)
        await db_session.commit()
        await db_session.refresh(sent)
        return sent

    return _make


@pytest.fixture
def make_subscriber(db_session: AsyncSession):
    """Factory for persisted NewsletterSubscriber rows."""

    async def _make(email: str, unsubscribed_at: datetime | None = None) -> NewsletterSubscriber:
        subscriber = NewsletterSubscriber(email=email, unsubscribed_at=unsubscribed_at)
        db_session.add(subscriber)
        await db_session.commit()
        await db_session.refresh(subscriber)
        return subscriber

    return _make


@pytest.fixture
def make_record():
    """Factory for in-memory SentEmailRecords."""

    def _make(
        id: int = 1,
        status: EmailStatus = EmailStatus.DELIVERED,
        sent_at: datetime | None = None,
        subject: str = "Your weekly tour update",
        html_content: str = "<p>Hello</p><p>company address</p><a>unsubscribe</a>",
    ) -> SentEmailRecord:
        return SentEmailRecord(
            id=id,
            subject=subject,
            html_content=html_content,
            status=status,
            sent_at=sent_at or utc_now(),
        )

    return _make


@pytest.fixture
def fake_event_store() -> FakeEventStore:
    """Empty in-memory event store; append to `.records`."""
    return FakeEventStore()


@pytest.fixture
def fake_subscriber_store() -> FakeSubscriberStore:
    """Empty in-memory subscriber store; append to `.unsubscribed_at`."""
    return FakeSubscriberStore()


@pytest.fixture
def test_settings() -> TestSettings:
    """Settings with every network collaborator switched off."""
    return TestSettings()
