"""Email validation and deliverability scoring service."""

from mailscore.config import get_config, get_settings

from .errors import (
    EmailValidationError,
    ReputationLookupError,
    SentEmailNotFoundError,
    StoreUnavailableError,
)
from .format import is_valid_format
from .list_hygiene import ListHygieneValidator
from .models import (
    DeliverabilityChecks,
    DeliverabilityResult,
    EmailStatus,
    EmailTemplate,
    HealthMetrics,
    ListValidationReport,
    ListValidationResult,
    QualityFactors,
    QualityScore,
    SentEmailRecord,
    TimeWindow,
    ValidationResult,
)
from .service import (
    EmailValidationService,
    build_sql_validation_service,
    build_template_validator,
    build_validation_service,
)
from .spam import SpamScorer, spam_score
from .template import TemplateValidator

__all__ = [
    "DeliverabilityChecks",
    "DeliverabilityResult",
    "EmailStatus",
    "EmailTemplate",
    "EmailValidationError",
    "EmailValidationService",
    "HealthMetrics",
    "ListHygieneValidator",
    "ListValidationReport",
    "ListValidationResult",
    "QualityFactors",
    "QualityScore",
    "ReputationLookupError",
    "SentEmailNotFoundError",
    "SentEmailRecord",
    "SpamScorer",
    "StoreUnavailableError",
    "TemplateValidator",
    "TimeWindow",
    "ValidationResult",
    "build_sql_validation_service",
    "build_template_validator",
    "build_validation_service",
    "get_validation_service",
    "is_valid_format",
    "spam_score",
]

_service_instance: EmailValidationService | None = None


def get_validation_service() -> EmailValidationService:
    """
    Get the configured validation service instance.

    Uses singleton pattern so the reputation cache survives between calls.
    Falls back to null collaborators where credentials are not configured.
    """
    global _service_instance
    if _service_instance is not None:
        return _service_instance

    from mailscore.core.database import AsyncSessionLocal

    _service_instance = build_sql_validation_service(
        get_settings(),
        get_config().validation,
        AsyncSessionLocal,
    )
    return _service_instance


def reset_validation_service() -> None:
    """Reset the service instance. Useful for testing."""
    global _service_instance
    _service_instance = None
