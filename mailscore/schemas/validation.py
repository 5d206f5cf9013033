from pydantic import BaseModel, Field


class TemplateValidationRequest(BaseModel):
    """Request body for validating a template."""

    subject: str = ""
    html_content: str = ""
    text_content: str | None = None


class ListValidationRequest(BaseModel):
    """Request body for list hygiene."""

    emails: list[str] = Field(default_factory=list, max_length=100_000)


class DeliverabilityRequest(BaseModel):
    """Request body for a deliverability probe."""

    to: str
    subject: str = Field(max_length=998)
    html_content: str
