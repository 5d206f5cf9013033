"""Passthrough collaborators for when a real check or transport is not configured."""

import uuid

from mailscore.core.logging import get_logger

from .base import MxChecker, SessionChecker, Transport
from .models import OutboundMessage, SendReceipt

logger = get_logger(__name__)


class NullMxChecker(MxChecker):
    """Assumes every domain has a mail exchanger."""

    async def has_mx(self, domain: str) -> bool:
        return True


class NullSessionChecker(SessionChecker):
    """Assumes a transport session can always be opened."""

    async def can_connect(self) -> bool:
        return True


class NullTransport(Transport):
    """
    Transport that only logs.

    Use when no Resend API key is configured or for testing.
    """

    provider_name = "null"

    async def send(self, message: OutboundMessage) -> SendReceipt:
        message_id = f"null-{uuid.uuid4()}"
        logger.bind(to=message.to, subject=message.subject, message_id=message_id).warning(
            "transport_not_configured"
        )
        return SendReceipt(message_id=message_id)
