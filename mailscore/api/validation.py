from fastapi import APIRouter, HTTPException, Query, status

from mailscore.core.logging import get_logger
from mailscore.dependencies import ValidationService
from mailscore.schemas.validation import (
    DeliverabilityRequest,
    ListValidationRequest,
    TemplateValidationRequest,
)
from mailscore.services.email_validation import (
    DeliverabilityResult,
    EmailTemplate,
    HealthMetrics,
    ListValidationResult,
    QualityScore,
    SentEmailNotFoundError,
    StoreUnavailableError,
    TimeWindow,
    ValidationResult,
)

logger = get_logger(__name__)

router = APIRouter()


@router.post("/template", response_model=ValidationResult)
async def validate_template(
    body: TemplateValidationRequest,
    service: ValidationService,
) -> ValidationResult:
    """Grade a template. Issues make it invalid; warnings only lower the score."""
    template = EmailTemplate(
        subject=body.subject,
        html_content=body.html_content,
        text_content=body.text_content,
    )
    return service.validate_template(template)


@router.post("/list", response_model=ListValidationResult)
async def validate_list(
    body: ListValidationRequest,
    service: ValidationService,
) -> ListValidationResult:
    """Split an address list into valid, invalid, duplicate and disposable buckets."""
    result = service.validate_list(body.emails)
    logger.bind(total=result.report.total, validity_rate=result.report.validity_rate).info(
        "list_validated"
    )
    return result


@router.post("/deliverability", response_model=DeliverabilityResult)
async def test_deliverability(
    body: DeliverabilityRequest,
    service: ValidationService,
) -> DeliverabilityResult:
    """
    Run the deliverability gates and send a probe email.

    Always answers 200; failures are reported in the body.
    """
    return await service.test_deliverability(body.to, body.subject, body.html_content)


@router.get("/health-metrics", response_model=HealthMetrics)
async def get_health_metrics(
    service: ValidationService,
    window: TimeWindow = Query(default=TimeWindow.THIRTY_DAYS),
) -> HealthMetrics:
    """Sending health for the trailing window (7d, 30d or 90d)."""
    try:
        return await service.get_health_metrics(window)
    except StoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e


@router.get("/quality/{sent_email_id}", response_model=QualityScore)
async def get_quality_score(
    sent_email_id: int,
    service: ValidationService,
) -> QualityScore:
    """Composite quality score for one sent email."""
    try:
        return await service.get_quality_score(sent_email_id)
    except SentEmailNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Email not found",
        ) from e
    except StoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e
