from mailscore.models.base import Base
from mailscore.models.sent_email import EmailStatus, SentEmail
from mailscore.models.subscriber import NewsletterSubscriber

__all__ = [
    "Base",
    "EmailStatus",
    "SentEmail",
    "NewsletterSubscriber",
]
