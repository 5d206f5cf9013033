"""Outbound transport backed by the Resend API."""

import asyncio

import resend

from mailscore.core.logging import get_logger

from .base import Transport
from .models import OutboundMessage, SendReceipt

logger = get_logger(__name__)


class ResendTransport(Transport):
    """Sends probe emails through Resend. Errors propagate to the caller."""

    provider_name = "resend"

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    async def send(self, message: OutboundMessage) -> SendReceipt:
        resend.api_key = self.api_key
        params = {
            "from": message.from_address,
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
        }

        logger.bind(to=message.to).info("sending_probe_email")
        # The SDK is synchronous
        response = await asyncio.to_thread(resend.Emails.send, params)

        message_id = response.get("id") if response else None
        if not message_id:
            raise RuntimeError("Resend returned no message id")

        logger.bind(to=message.to, message_id=message_id).info("probe_email_sent")
        return SendReceipt(message_id=message_id)
