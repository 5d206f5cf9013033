"""Per-message quality score for a sent email."""

from datetime import datetime

from mailscore.core.datetime_utils import to_naive_utc
from mailscore.core.logging import get_logger

from .base import EventStore
from .errors import SentEmailNotFoundError, StoreUnavailableError
from .models import EmailStatus, EmailTemplate, QualityFactors, QualityScore
from .rules import Bucket, Rule, evaluate_rules, round_half_up
from .template import TemplateValidator

logger = get_logger(__name__)

# Statuses not listed (queued) count as fully deliverable
DELIVERABILITY_BY_STATUS: dict[EmailStatus, int] = {
    EmailStatus.BOUNCED: 0,
    EmailStatus.FAILED: 20,
    EmailStatus.SPAM: 10,
    EmailStatus.DELIVERED: 80,
    EmailStatus.OPENED: 90,
    EmailStatus.CLICKED: 100,
}
DEFAULT_DELIVERABILITY = 100

ENGAGEMENT_BY_STATUS: dict[EmailStatus, int] = {
    EmailStatus.CLICKED: 100,
    EmailStatus.OPENED: 60,
    EmailStatus.DELIVERED: 20,
}
DEFAULT_ENGAGEMENT = 0

# (first hour, last hour, score), inclusive; first match wins
TIMING_BUCKETS: list[tuple[int, int, int]] = [
    (9, 11, 100),
    (14, 16, 80),
    (7, 9, 70),
    (18, 20, 60),
]
DEFAULT_TIMING = 50

RECOMMENDATION_RULES: list[Rule[QualityFactors]] = [
    Rule(
        name="low_deliverability",
        check=lambda f: f.deliverability < 50,
        bucket=Bucket.RECOMMENDATION,
        message="Improve deliverability by checking sender reputation",
    ),
    Rule(
        name="low_engagement",
        check=lambda f: f.engagement < 30,
        bucket=Bucket.RECOMMENDATION,
        message="Enhance email content to increase engagement",
    ),
    Rule(
        name="low_content",
        check=lambda f: f.content < 70,
        bucket=Bucket.RECOMMENDATION,
        message="Review email template for best practices",
    ),
    Rule(
        name="poor_timing",
        check=lambda f: f.timing < 60,
        bucket=Bucket.RECOMMENDATION,
        message="Consider sending emails during peak hours (9-11 AM)",
    ),
]


def timing_score(sent_at: datetime) -> int:
    """Score the hour-of-day bucket a message was sent in."""
    hour = to_naive_utc(sent_at).hour
    for first, last, score in TIMING_BUCKETS:
        if first <= hour <= last:
            return score
    return DEFAULT_TIMING


class QualityScorer:
    """Blends deliverability, engagement, content and timing into one score."""

    def __init__(
        self,
        event_store: EventStore,
        template_validator: TemplateValidator | None = None,
    ) -> None:
        self.event_store = event_store
        self.template_validator = template_validator or TemplateValidator()

    async def get_quality_score(self, sent_email_id: int) -> QualityScore:
        """
        Score a sent email.

        Raises:
            SentEmailNotFoundError: if no record has this id
            StoreUnavailableError: if the store query fails
        """
        try:
            record = await self.event_store.get_sent_by_id(sent_email_id)
        except Exception as e:
            logger.bind(sent_email_id=sent_email_id, error=str(e)).error("quality_lookup_failed")
            raise StoreUnavailableError(f"Could not load sent email {sent_email_id}: {e}") from e

        if record is None:
            raise SentEmailNotFoundError(sent_email_id)

        content = self.template_validator.validate(
            EmailTemplate(subject=record.subject, html_content=record.html_content)
        )
        factors = QualityFactors(
            deliverability=DELIVERABILITY_BY_STATUS.get(record.status, DEFAULT_DELIVERABILITY),
            engagement=ENGAGEMENT_BY_STATUS.get(record.status, DEFAULT_ENGAGEMENT),
            content=content.score,
            timing=timing_score(record.sent_at),
        )

        total = factors.deliverability + factors.engagement + factors.content + factors.timing
        outcome = evaluate_rules(RECOMMENDATION_RULES, factors, {})

        return QualityScore(
            score=round_half_up(total / 4),
            factors=factors,
            recommendations=outcome.bucket(Bucket.RECOMMENDATION),
        )
