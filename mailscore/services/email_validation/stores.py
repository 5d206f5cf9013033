"""SQLAlchemy-backed event and subscriber stores.

Each query opens its own session so counts can run concurrently.
"""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mailscore.core.datetime_utils import to_naive_utc
from mailscore.models.sent_email import SentEmail
from mailscore.models.subscriber import NewsletterSubscriber

from .base import EventStore, SubscriberStore
from .models import EmailStatus, SentEmailRecord


class SqlEventStore(EventStore):
    """Reads the sent_emails table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def count_sent(self, since: datetime, status: EmailStatus | None = None) -> int:
        query = select(func.count()).select_from(SentEmail).where(SentEmail.sent_at >= since)
        if status is not None:
            query = query.where(SentEmail.status == status)

        async with self._session_factory() as session:
            result = await session.execute(query)
            return int(result.scalar_one())

    async def get_sent_by_id(self, sent_email_id: int) -> SentEmailRecord | None:
        async with self._session_factory() as session:
            sent = await session.get(SentEmail, sent_email_id)
            if sent is None:
                return None
            return SentEmailRecord(
                id=sent.id,
                subject=sent.subject or "",
                html_content=sent.html_content or "",
                status=sent.status,
                sent_at=to_naive_utc(sent.sent_at),
            )


class SqlSubscriberStore(SubscriberStore):
    """Reads the newsletter_subscribers table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def count_unsubscribed(self, since: datetime) -> int:
        query = (
            select(func.count())
            .select_from(NewsletterSubscriber)
            .where(NewsletterSubscriber.unsubscribed_at >= since)
        )
        async with self._session_factory() as session:
            result = await session.execute(query)
            return int(result.scalar_one())
