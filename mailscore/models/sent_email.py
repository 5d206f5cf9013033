import enum
from datetime import datetime

from sqlalchemy import Enum, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from mailscore.models.base import Base


class EmailStatus(str, enum.Enum):
    """Latest delivery status of a sent email."""

    QUEUED = "queued"
    DELIVERED = "delivered"
    OPENED = "opened"
    CLICKED = "clicked"
    BOUNCED = "bounced"
    FAILED = "failed"
    SPAM = "spam"


class SentEmail(Base):
    """A campaign email handed to the transport, with its latest delivery status."""

    __tablename__ = "sent_emails"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    recipient: Mapped[str] = mapped_column(String(320), index=True, default="")
    subject: Mapped[str] = mapped_column(String(998), default="")
    html_content: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[EmailStatus] = mapped_column(
        Enum(EmailStatus, name="email_status", values_callable=lambda e: [m.value for m in e]),
        default=EmailStatus.QUEUED,
        index=True,
    )
    sent_at: Mapped[datetime] = mapped_column(default=func.now(), index=True)

    def __repr__(self) -> str:
        return f"<SentEmail {self.id} {self.status.value} @ {self.sent_at}>"
