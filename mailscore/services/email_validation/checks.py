"""Network gates for the deliverability probe: MX lookup and transport session."""

import asyncio
import smtplib

import dns.asyncresolver
import dns.exception
import dns.resolver

from mailscore.core.logging import get_logger

from .base import MxChecker, SessionChecker

logger = get_logger(__name__)


class DnsMxChecker(MxChecker):
    """Resolves MX records with dnspython."""

    def __init__(self, timeout_seconds: float = 5.0) -> None:
        self.timeout = timeout_seconds

    async def has_mx(self, domain: str) -> bool:
        try:
            answer = await dns.asyncresolver.resolve(domain, "MX", lifetime=self.timeout)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer, dns.resolver.NoNameservers):
            logger.bind(domain=domain).info("mx_not_found")
            return False
        except dns.exception.Timeout:
            logger.bind(domain=domain).warning("mx_lookup_timeout")
            return False

        hosts = [str(record.exchange).rstrip(".") for record in answer]
        return any(hosts)


class SmtpSessionChecker(SessionChecker):
    """Opens and closes an SMTP session to the configured relay."""

    def __init__(self, host: str, port: int = 587, timeout_seconds: int = 10) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout_seconds

    def _connect(self) -> bool:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            code, _ = smtp.noop()
            return code == 250

    async def can_connect(self) -> bool:
        try:
            return await asyncio.to_thread(self._connect)
        except (smtplib.SMTPException, OSError) as e:
            logger.bind(host=self.host, port=self.port, error=str(e)).warning(
                "smtp_session_failed"
            )
            return False
