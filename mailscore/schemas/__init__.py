from mailscore.schemas.validation import (
    DeliverabilityRequest,
    ListValidationRequest,
    TemplateValidationRequest,
)

__all__ = [
    "DeliverabilityRequest",
    "ListValidationRequest",
    "TemplateValidationRequest",
]
