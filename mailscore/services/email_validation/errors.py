"""Errors raised by the email validation service."""


class EmailValidationError(Exception):
    """Base class for email validation errors."""


class SentEmailNotFoundError(EmailValidationError, LookupError):
    """No sent email exists with the requested id."""

    def __init__(self, sent_email_id: int) -> None:
        super().__init__(f"Sent email {sent_email_id} not found")
        self.sent_email_id = sent_email_id


class StoreUnavailableError(EmailValidationError):
    """The event or subscriber store failed to answer a query."""


class ReputationLookupError(EmailValidationError):
    """The reputation service could not score a domain."""
