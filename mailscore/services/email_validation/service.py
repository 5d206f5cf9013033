"""Facade combining the pure scorers with the async orchestration components."""

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mailscore.config import Settings, ValidationConfig

from .base import (
    EventStore,
    MxChecker,
    ReputationOracle,
    SessionChecker,
    SubscriberStore,
    Transport,
)
from .checks import DnsMxChecker, SmtpSessionChecker
from .format import is_valid_format
from .health import HealthMetricsAggregator
from .list_hygiene import ListHygieneValidator
from .models import (
    DeliverabilityResult,
    EmailTemplate,
    HealthMetrics,
    ListValidationResult,
    QualityScore,
    TimeWindow,
    ValidationResult,
)
from .null import NullMxChecker, NullSessionChecker, NullTransport
from .probe import DeliverabilityProbe
from .quality import QualityScorer
from .reputation import CachedReputationOracle, HttpReputationOracle, StaticReputationOracle
from .spam import SpamScorer
from .stores import SqlEventStore, SqlSubscriberStore
from .template import TemplateValidator
from .transport import ResendTransport


class EmailValidationService:
    """
    Email validation and deliverability scoring.

    Template and list checks are synchronous and pure. Probing, health
    metrics and quality scoring reach collaborators and are async.
    """

    def __init__(
        self,
        template_validator: TemplateValidator,
        list_validator: ListHygieneValidator,
        probe: DeliverabilityProbe,
        health: HealthMetricsAggregator,
        quality: QualityScorer,
    ) -> None:
        self.template_validator = template_validator
        self.list_validator = list_validator
        self.probe = probe
        self.health = health
        self.quality = quality

    def validate_format(self, address: str) -> bool:
        return is_valid_format(address)

    def spam_score(self, subject: str, html_content: str) -> int:
        return self.template_validator.spam_scorer.score(subject, html_content)

    def validate_template(self, template: EmailTemplate) -> ValidationResult:
        return self.template_validator.validate(template)

    def validate_list(self, addresses: Iterable[str]) -> ListValidationResult:
        return self.list_validator.validate(addresses)

    async def test_deliverability(
        self, to: str, subject: str, html_content: str
    ) -> DeliverabilityResult:
        return await self.probe.probe(to, subject, html_content)

    async def get_health_metrics(
        self, window: TimeWindow | str = TimeWindow.THIRTY_DAYS
    ) -> HealthMetrics:
        return await self.health.get_health_metrics(window)

    async def get_quality_score(self, sent_email_id: int) -> QualityScore:
        return await self.quality.get_quality_score(sent_email_id)


def build_template_validator(config: ValidationConfig) -> TemplateValidator:
    """Template validator using the configured lexicon and markers."""
    return TemplateValidator(
        SpamScorer(config.spam_lexicon, config.shortener_domains),
        subject_max_length=config.subject_max_length,
        unsubscribe_marker=config.unsubscribe_marker,
        address_marker=config.address_marker,
    )


def build_reputation_oracle(settings: Settings, config: ValidationConfig) -> ReputationOracle:
    """Remote oracle with cache when a URL is configured, else the lookup table."""
    if not settings.reputation_api_url:
        return StaticReputationOracle(config.domain_scores, config.default_domain_score)

    remote = HttpReputationOracle(
        base_url=settings.reputation_api_url,
        api_key=settings.reputation_api_key,
        timeout_seconds=settings.reputation_timeout,
    )
    return CachedReputationOracle(remote, cache_ttl_hours=settings.reputation_cache_ttl_hours)


def build_validation_service(
    settings: Settings,
    config: ValidationConfig,
    event_store: EventStore,
    subscriber_store: SubscriberStore,
    oracle: ReputationOracle | None = None,
    mx_checker: MxChecker | None = None,
    session_checker: SessionChecker | None = None,
    transport: Transport | None = None,
) -> EmailValidationService:
    """Wire the service from configuration. Explicit collaborators take precedence."""
    template_validator = build_template_validator(config)

    if mx_checker is None:
        mx_checker = DnsMxChecker() if settings.mx_check_enabled else NullMxChecker()
    if session_checker is None:
        if settings.smtp_check_host:
            session_checker = SmtpSessionChecker(
                settings.smtp_check_host,
                settings.smtp_check_port,
                settings.smtp_check_timeout,
            )
        else:
            session_checker = NullSessionChecker()
    if transport is None:
        if settings.resend_api_key:
            transport = ResendTransport(settings.resend_api_key)
        else:
            transport = NullTransport()

    probe = DeliverabilityProbe(
        oracle=oracle if oracle is not None else build_reputation_oracle(settings, config),
        mx_checker=mx_checker,
        session_checker=session_checker,
        transport=transport,
        from_address=settings.sender_address,
        domain_threshold=config.domain_pass_threshold,
    )

    return EmailValidationService(
        template_validator=template_validator,
        list_validator=ListHygieneValidator(config.disposable_domains),
        probe=probe,
        health=HealthMetricsAggregator(event_store, subscriber_store),
        quality=QualityScorer(event_store, template_validator),
    )


def build_sql_validation_service(
    settings: Settings,
    config: ValidationConfig,
    session_factory: async_sessionmaker[AsyncSession],
) -> EmailValidationService:
    """Service backed by the SQL event and subscriber stores."""
    return build_validation_service(
        settings,
        config,
        event_store=SqlEventStore(session_factory),
        subscriber_store=SqlSubscriberStore(session_factory),
    )
