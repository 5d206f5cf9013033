"""Abstract contracts for the collaborators the validation service depends on."""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import EmailStatus, OutboundMessage, SendReceipt, SentEmailRecord


class ReputationOracle(ABC):
    """Per-domain trust score provider."""

    provider_name: str = "unknown"

    @abstractmethod
    async def score_domain(self, domain: str) -> float:
        """
        Score a mail domain.

        Args:
            domain: Lower-cased domain part of an address

        Returns:
            Trust score between 0 and 100

        Raises:
            Any exception on lookup failure
        """
        pass


class MxChecker(ABC):
    """Answers whether a domain resolves a mail exchanger."""

    @abstractmethod
    async def has_mx(self, domain: str) -> bool:
        pass


class SessionChecker(ABC):
    """Answers whether a transport session can be opened."""

    @abstractmethod
    async def can_connect(self) -> bool:
        pass


class Transport(ABC):
    """Outbound mail transport."""

    provider_name: str = "unknown"

    @abstractmethod
    async def send(self, message: OutboundMessage) -> SendReceipt:
        """
        Send a message.

        Raises:
            Any exception on delivery failure
        """
        pass


class EventStore(ABC):
    """Read access to persisted sent-email events."""

    @abstractmethod
    async def count_sent(self, since: datetime, status: EmailStatus | None = None) -> int:
        """Count sent emails at or after `since`, optionally filtered by status."""
        pass

    @abstractmethod
    async def get_sent_by_id(self, sent_email_id: int) -> SentEmailRecord | None:
        pass


class SubscriberStore(ABC):
    """Read access to newsletter subscribers."""

    @abstractmethod
    async def count_unsubscribed(self, since: datetime) -> int:
        """Count subscribers who unsubscribed at or after `since`."""
        pass
