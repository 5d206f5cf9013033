"""Deliverability probe.

Runs the gates strictly in order and stops at the first failure:

    format -> domain -> mx -> smtp -> send

Gates that passed stay recorded in the result even when a later stage fails.
The probe never raises; collaborator errors become failure results.
"""

from mailscore.core.logging import get_logger

from .base import MxChecker, ReputationOracle, SessionChecker, Transport
from .format import extract_domain, is_valid_format
from .models import DeliverabilityChecks, DeliverabilityResult, OutboundMessage, normalize_address

logger = get_logger(__name__)

DEFAULT_DOMAIN_THRESHOLD = 50.0

ERROR_INVALID_FORMAT = "invalid format"
ERROR_LOW_REPUTATION = "domain reputation too low"
ERROR_NO_MX = "no mx records found"
ERROR_NO_SESSION = "transport session unavailable"


class DeliverabilityProbe:
    """Checks whether a recipient is reachable, then sends a real probe email."""

    def __init__(
        self,
        oracle: ReputationOracle,
        mx_checker: MxChecker,
        session_checker: SessionChecker,
        transport: Transport,
        from_address: str,
        domain_threshold: float = DEFAULT_DOMAIN_THRESHOLD,
    ) -> None:
        self.oracle = oracle
        self.mx_checker = mx_checker
        self.session_checker = session_checker
        self.transport = transport
        self.from_address = from_address
        self.domain_threshold = domain_threshold

    async def probe(self, to: str, subject: str, html_content: str) -> DeliverabilityResult:
        """Run every gate and, if all pass, send the message."""
        checks = DeliverabilityChecks()
        recipient = normalize_address(to) if isinstance(to, str) else ""
        log = logger.bind(to=recipient)

        checks.format = is_valid_format(recipient)
        if not checks.format:
            return self._failure(ERROR_INVALID_FORMAT, checks)

        domain = extract_domain(recipient)

        try:
            reputation = await self.oracle.score_domain(domain)
            checks.domain = float(reputation) > self.domain_threshold
        except Exception as e:
            log.bind(domain=domain, error=str(e)).warning("probe_reputation_failed")
            return self._failure(str(e) or type(e).__name__, checks)
        if not checks.domain:
            return self._failure(ERROR_LOW_REPUTATION, checks)

        try:
            checks.mx = await self.mx_checker.has_mx(domain)
        except Exception as e:
            log.bind(domain=domain, error=str(e)).warning("probe_mx_failed")
            return self._failure(str(e) or type(e).__name__, checks)
        if not checks.mx:
            return self._failure(ERROR_NO_MX, checks)

        try:
            checks.smtp = await self.session_checker.can_connect()
        except Exception as e:
            log.bind(error=str(e)).warning("probe_session_failed")
            return self._failure(str(e) or type(e).__name__, checks)
        if not checks.smtp:
            return self._failure(ERROR_NO_SESSION, checks)

        message = OutboundMessage(
            from_address=self.from_address,
            to=recipient,
            subject=subject,
            html=html_content,
        )
        try:
            receipt = await self.transport.send(message)
        except Exception as e:
            log.bind(error=str(e)).error("probe_send_failed")
            return self._failure(str(e) or type(e).__name__, checks)

        log.bind(message_id=receipt.message_id).info("probe_send_succeeded")
        return DeliverabilityResult(success=True, message_id=receipt.message_id, checks=checks)

    def _failure(self, error: str, checks: DeliverabilityChecks) -> DeliverabilityResult:
        return DeliverabilityResult(success=False, error=error, checks=checks)
