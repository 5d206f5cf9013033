from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from mailscore.models.base import Base, TimestampMixin


class NewsletterSubscriber(TimestampMixin, Base):
    """Newsletter subscriber. Unsubscribing sets unsubscribed_at."""

    __tablename__ = "newsletter_subscribers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    unsubscribed_at: Mapped[datetime | None] = mapped_column(default=None, index=True)

    def __repr__(self) -> str:
        return f"<NewsletterSubscriber {self.email}>"
