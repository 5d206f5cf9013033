"""Email validation models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from mailscore.models.sent_email import EmailStatus


def normalize_address(address: str) -> str:
    """Trim and lower-case an address before any comparison."""
    return address.strip().lower()


class TimeWindow(str, Enum):
    """Trailing window for health metrics."""

    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"
    NINETY_DAYS = "90d"

    @property
    def days(self) -> int:
        return int(self.value.rstrip("d"))


class EmailTemplate(BaseModel):
    """Template submitted for validation. Validated by value, never mutated."""

    subject: str = ""
    html_content: str = ""
    text_content: str | None = None


class ValidationResult(BaseModel):
    """Template quality report.

    Issues block sending, warnings lower the score, suggestions are advisory.
    """

    is_valid: bool
    score: int = Field(ge=0, le=100)
    issues: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    spam_score: int = Field(ge=0, le=10)
    deliverability_score: int = Field(ge=0, le=100)


class DeliverabilityChecks(BaseModel):
    """Which deliverability gates passed."""

    format: bool = False
    domain: bool = False
    mx: bool = False
    smtp: bool = False

    def all_passed(self) -> bool:
        return self.format and self.domain and self.mx and self.smtp


class DeliverabilityResult(BaseModel):
    """Outcome of a deliverability probe."""

    success: bool
    message_id: str | None = None
    error: str | None = None
    checks: DeliverabilityChecks


class OutboundMessage(BaseModel):
    """Message handed to the transport."""

    from_address: str
    to: str
    subject: str
    html: str


class SendReceipt(BaseModel):
    """Transport acknowledgement."""

    message_id: str


class SentEmailRecord(BaseModel):
    """Read-only view of a persisted sent email."""

    id: int
    subject: str = ""
    html_content: str = ""
    status: EmailStatus
    sent_at: datetime


class HealthMetrics(BaseModel):
    """Sending health over a trailing window. Rates are percentages."""

    total_emails: int
    delivered_rate: float
    open_rate: float
    click_rate: float
    bounce_rate: float
    spam_complaints: int
    unsubscribes: int
    reputation_score: int


class ListValidationReport(BaseModel):
    """Counts for a list hygiene pass."""

    total: int
    valid: int
    invalid: int
    duplicates: int
    disposable: int
    validity_rate: float


class ListValidationResult(BaseModel):
    """Disjoint buckets for a raw address list."""

    valid: list[str] = Field(default_factory=list)
    invalid: list[str] = Field(default_factory=list)
    duplicates: list[str] = Field(default_factory=list)
    disposable: list[str] = Field(default_factory=list)
    report: ListValidationReport


class QualityFactors(BaseModel):
    """Per-message quality factors, each 0-100."""

    deliverability: int
    engagement: int
    content: int
    timing: int


class QualityScore(BaseModel):
    """Composite quality score for a sent email."""

    score: int
    factors: QualityFactors
    recommendations: list[str] = Field(default_factory=list)
