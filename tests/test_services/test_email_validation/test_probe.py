"""Tests for the deliverability probe."""

from unittest.mock import AsyncMock

import pytest

from mailscore.services.email_validation.models import OutboundMessage, SendReceipt
from mailscore.services.email_validation.probe import DeliverabilityProbe


class TestDeliverabilityProbe:
    """Tests for DeliverabilityProbe.probe."""

    @pytest.fixture
    def oracle(self):
        """Oracle mock that scores every domain 95."""
        mock = AsyncMock()
        mock.provider_name = "mock"
        mock.score_domain.return_value = 95.0
        return mock

    @pytest.fixture
    def mx_checker(self):
        mock = AsyncMock()
        mock.has_mx.return_value = True
        return mock

    @pytest.fixture
    def session_checker(self):
        mock = AsyncMock()
        mock.can_connect.return_value = True
        return mock

    @pytest.fixture
    def transport(self):
        mock = AsyncMock()
        mock.provider_name = "mock"
        mock.send.return_value = SendReceipt(message_id="msg-123")
        return mock

    @pytest.fixture
    def probe(self, oracle, mx_checker, session_checker, transport):
        return DeliverabilityProbe(
            oracle=oracle,
            mx_checker=mx_checker,
            session_checker=session_checker,
            transport=transport,
            from_address="noreply@mailscore.test",
        )

    @pytest.mark.asyncio
    async def test_all_gates_pass_and_message_is_sent(self, probe, transport):
        """Should send and return the transport's message id."""
        result = await probe.probe("user@gmail.com", "Hi", "<p>x</p>")

        assert result.success is True
        assert result.message_id == "msg-123"
        assert result.error is None
        assert result.checks.all_passed()
        transport.send.assert_awaited_once_with(
            OutboundMessage(
                from_address="noreply@mailscore.test",
                to="user@gmail.com",
                subject="Hi",
                html="<p>x</p>",
            )
        )

    @pytest.mark.asyncio
    async def test_invalid_format_calls_no_collaborator(
        self, probe, oracle, mx_checker, session_checker, transport
    ):
        """A malformed address fails before any network work."""
        result = await probe.probe("not-an-email", "Hi", "<p>x</p>")

        assert result.success is False
        assert result.error == "invalid format"
        assert result.message_id is None
        assert result.checks.model_dump() == {
            "format": False,
            "domain": False,
            "mx": False,
            "smtp": False,
        }
        oracle.score_domain.assert_not_called()
        mx_checker.has_mx.assert_not_called()
        session_checker.can_connect.assert_not_called()
        transport.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_address_is_normalized(self, probe, oracle, transport):
        """The recipient is trimmed and lower-cased before any gate."""
        await probe.probe("  User@GMAIL.com ", "Hi", "<p>x</p>")

        oracle.score_domain.assert_awaited_once_with("gmail.com")
        assert transport.send.await_args.args[0].to == "user@gmail.com"

    @pytest.mark.asyncio
    async def test_low_reputation_stops_before_mx(self, probe, oracle, mx_checker, transport):
        """Domains at or below the threshold fail the domain gate."""
        oracle.score_domain.return_value = 50.0

        result = await probe.probe("user@shady.example", "Hi", "<p>x</p>")

        assert result.success is False
        assert result.error == "domain reputation too low"
        assert result.checks.format is True
        assert result.checks.domain is False
        mx_checker.has_mx.assert_not_called()
        transport.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_reputation_error_becomes_failure(self, probe, oracle, transport):
        """An oracle exception is reported, never raised."""
        oracle.score_domain.side_effect = RuntimeError("oracle down")

        result = await probe.probe("user@gmail.com", "Hi", "<p>x</p>")

        assert result.success is False
        assert result.error == "oracle down"
        assert result.checks.format is True
        assert result.checks.domain is False
        transport.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_error_without_message_uses_type_name(self, probe, oracle):
        """Exceptions with no message report their type name."""
        oracle.score_domain.side_effect = TimeoutError()

        result = await probe.probe("user@gmail.com", "Hi", "<p>x</p>")

        assert result.error == "TimeoutError"

    @pytest.mark.asyncio
    async def test_missing_mx_fails(self, probe, mx_checker, session_checker, transport):
        """Domains without MX records fail the mx gate."""
        mx_checker.has_mx.return_value = False

        result = await probe.probe("user@gmail.com", "Hi", "<p>x</p>")

        assert result.error == "no mx records found"
        assert result.checks.domain is True
        assert result.checks.mx is False
        session_checker.can_connect.assert_not_called()
        transport.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_mx_error_becomes_failure(self, probe, mx_checker):
        """An MX checker exception is reported as the error."""
        mx_checker.has_mx.side_effect = OSError("resolver unreachable")

        result = await probe.probe("user@gmail.com", "Hi", "<p>x</p>")

        assert result.success is False
        assert result.error == "resolver unreachable"
        assert result.checks.mx is False

    @pytest.mark.asyncio
    async def test_no_session_fails(self, probe, session_checker, transport):
        """A closed transport session fails the smtp gate."""
        session_checker.can_connect.return_value = False

        result = await probe.probe("user@gmail.com", "Hi", "<p>x</p>")

        assert result.error == "transport session unavailable"
        assert result.checks.mx is True
        assert result.checks.smtp is False
        transport.send.assert_not_called()

    @pytest.mark.asyncio
    async def test_send_failure_keeps_passed_gates(self, probe, transport):
        """A transport error after all gates passed keeps the gate record."""
        transport.send.side_effect = RuntimeError("rejected by provider")

        result = await probe.probe("user@gmail.com", "Hi", "<p>x</p>")

        assert result.success is False
        assert result.message_id is None
        assert result.error == "rejected by provider"
        assert result.checks.all_passed()

    @pytest.mark.asyncio
    async def test_custom_threshold(self, oracle, mx_checker, session_checker, transport):
        """The domain threshold is configurable and strict."""
        probe = DeliverabilityProbe(
            oracle=oracle,
            mx_checker=mx_checker,
            session_checker=session_checker,
            transport=transport,
            from_address="noreply@mailscore.test",
            domain_threshold=95.0,
        )

        result = await probe.probe("user@gmail.com", "Hi", "<p>x</p>")

        assert result.error == "domain reputation too low"

    @pytest.mark.asyncio
    async def test_success_implies_all_gates(self, probe):
        """success is true only when every gate is true."""
        for address in ["user@gmail.com", "bad", "x@y"]:
            result = await probe.probe(address, "Hi", "<p>x</p>")
            if result.success:
                assert result.checks.all_passed()
                assert result.message_id is not None
            else:
                assert result.error is not None
