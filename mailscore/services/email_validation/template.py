"""Template quality report built from independent scoring rules."""

import re
from dataclasses import dataclass

from mailscore.core.logging import get_logger

from .models import EmailTemplate, ValidationResult
from .rules import Bucket, Rule, evaluate_rules
from .spam import SpamScorer

logger = get_logger(__name__)

IMG_TAG_PATTERN = re.compile(r"<img\b[^>]*>")
RESPONSIVE_MARKERS = ("@media", "viewport")

HIGH_SPAM_THRESHOLD = 5
MODERATE_SPAM_THRESHOLD = 3

SCORE = "score"
DELIVERABILITY = "deliverability"


@dataclass(frozen=True)
class TemplateContext:
    """Facts about a template that the rules inspect."""

    subject: str
    html: str
    spam_score: int
    images_missing_alt: int


def count_images_missing_alt(html: str) -> int:
    """Count <img> tags that have no alt attribute."""
    return sum(1 for tag in IMG_TAG_PATTERN.findall(html) if "alt=" not in tag)


def build_template_rules(
    subject_max_length: int = 50,
    unsubscribe_marker: str = "unsubscribe",
    address_marker: str = "company address",
) -> list[Rule[TemplateContext]]:
    """Template rules in reporting order. Markers are matched literally."""

    return [
        Rule(
            name="subject_required",
            check=lambda c: not c.subject.strip(),
            bucket=Bucket.ISSUE,
            message="Subject line is required",
            penalties={SCORE: 20},
        ),
        Rule(
            name="subject_too_long",
            check=lambda c: bool(c.subject.strip()) and len(c.subject) > subject_max_length,
            bucket=Bucket.WARNING,
            message=f"Subject line is longer than recommended ({subject_max_length} characters)",
            penalties={SCORE: 5, DELIVERABILITY: 10},
        ),
        Rule(
            name="html_required",
            check=lambda c: not c.html.strip(),
            bucket=Bucket.ISSUE,
            message="HTML content is required",
            penalties={SCORE: 30},
        ),
        Rule(
            name="missing_unsubscribe",
            check=lambda c: unsubscribe_marker not in c.html,
            bucket=Bucket.WARNING,
            message="Missing unsubscribe link",
            penalties={SCORE: 5, DELIVERABILITY: 15},
        ),
        Rule(
            name="missing_company_address",
            check=lambda c: address_marker not in c.html,
            bucket=Bucket.WARNING,
            message="Missing company address (required for CAN-SPAM compliance)",
            penalties={SCORE: 10, DELIVERABILITY: 10},
        ),
        Rule(
            name="not_responsive",
            check=lambda c: not any(m in c.html for m in RESPONSIVE_MARKERS),
            bucket=Bucket.SUGGESTION,
            message="Consider adding mobile-responsive CSS",
        ),
        Rule(
            name="image_missing_alt",
            check=lambda c: c.images_missing_alt,
            bucket=Bucket.SUGGESTION,
            message="Add alt text to images for better accessibility",
        ),
        Rule(
            name="high_spam_score",
            check=lambda c: c.spam_score > HIGH_SPAM_THRESHOLD,
            bucket=Bucket.ISSUE,
            message=lambda c: f"High spam score detected: {c.spam_score}/10",
            penalties={SCORE: 15, DELIVERABILITY: 20},
        ),
        Rule(
            name="moderate_spam_score",
            check=lambda c: MODERATE_SPAM_THRESHOLD < c.spam_score <= HIGH_SPAM_THRESHOLD,
            bucket=Bucket.WARNING,
            message=lambda c: f"Moderate spam score: {c.spam_score}/10",
            penalties={SCORE: 5},
        ),
    ]


class TemplateValidator:
    """
    Validates an email template and grades it.

    Issues make the template invalid; warnings and suggestions only affect
    the scores. The validator holds no per-call state.
    """

    def __init__(
        self,
        spam_scorer: SpamScorer | None = None,
        subject_max_length: int = 50,
        unsubscribe_marker: str = "unsubscribe",
        address_marker: str = "company address",
    ) -> None:
        self.spam_scorer = spam_scorer or SpamScorer()
        self.rules = build_template_rules(
            subject_max_length=subject_max_length,
            unsubscribe_marker=unsubscribe_marker,
            address_marker=address_marker,
        )

    def validate(self, template: EmailTemplate) -> ValidationResult:
        """Return the quality report for a template."""
        subject = template.subject or ""
        html = template.html_content or ""
        context = TemplateContext(
            subject=subject,
            html=html,
            spam_score=self.spam_scorer.score(subject, html),
            images_missing_alt=count_images_missing_alt(html),
        )

        outcome = evaluate_rules(self.rules, context, {SCORE: 100, DELIVERABILITY: 100})
        logger.bind(fired=outcome.fired, spam_score=context.spam_score).debug(
            "template_rules_evaluated"
        )
        issues = outcome.bucket(Bucket.ISSUE)

        return ValidationResult(
            is_valid=not issues,
            score=outcome.scores[SCORE],
            issues=issues,
            warnings=outcome.bucket(Bucket.WARNING),
            suggestions=outcome.bucket(Bucket.SUGGESTION),
            spam_score=context.spam_score,
            deliverability_score=outcome.scores[DELIVERABILITY],
        )
