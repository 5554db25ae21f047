"""
Form Intake Service — Pydantic Request/Response Schemas
========================================================

What:  The API contract for the three submission endpoints.
How:   Submission models pick recognized keys out of an arbitrary JSON object
       (exact key match, unknown keys ignored, missing keys → None). Record
       models turn an inserted row back into camelCase JSON.

Type coercion is the only validation performed: numbers sent for text
fields become strings and `needsLoan` follows pydantic's lax boolean rules.
Formats (email, phone, ...) are never checked.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _coerce_text(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


FormText = Annotated[Optional[str], BeforeValidator(_coerce_text)]


def form_field(key: str, *legacy_keys: str) -> Any:
    """
    Declare a form field read from `key` (or any legacy key) and written back as `key`.
    """
    return Field(
        default=None,
        validation_alias=AliasChoices(key, *legacy_keys),
        serialization_alias=key,
    )


# ══════════════════════════════════════════════════════════════════════════
# Submissions: what the forms send
# ══════════════════════════════════════════════════════════════════════════


class FormSubmission(BaseModel):
    """Base for submission bodies: unrecognized keys are dropped silently."""

    model_config = ConfigDict(extra="ignore")

    def columns(self) -> Dict[str, Any]:
        """Values keyed by column name, ready for INSERT."""
        return self.model_dump()

    def public_fields(self) -> Dict[str, Any]:
        """Values keyed by their wire name, used for the notification email."""
        return self.model_dump(by_alias=True)


class StudyFormSubmission(FormSubmission):
    """
    Body of POST /submit-form.

    The study form front end historically posted `selectedCountry`,
    `currentCgpa`, etc.; those keys are accepted alongside the plain names.
    """

    country: FormText = form_field("country", "selectedCountry")
    qualification: FormText = form_field("qualification", "selectedQualification")
    age: FormText = form_field("age", "selectedAge")
    education_topic: FormText = form_field("educationTopic", "selectedEducationTopic")
    cgpa: FormText = form_field("cgpa", "currentCgpa")
    budget: FormText = form_field("budget", "selectedBudget")
    needs_loan: Optional[bool] = form_field("needsLoan")
    name: FormText = form_field("name")
    email: FormText = form_field("email")
    phone: FormText = form_field("phone")


class WorkFormSubmission(FormSubmission):
    """Body of POST /submit-work-form."""

    occupation: FormText = form_field("occupation")
    education: FormText = form_field("education")
    experience: FormText = form_field("experience")
    name: FormText = form_field("name")
    email: FormText = form_field("email")
    phone: FormText = form_field("phone")


class InvestFormSubmission(FormSubmission):
    """Body of POST /submit-invest-form."""

    name: FormText = form_field("name")
    email: FormText = form_field("email")
    country: FormText = form_field("country")


# ══════════════════════════════════════════════════════════════════════════
# Records: the inserted row as returned to the caller
# ══════════════════════════════════════════════════════════════════════════


class InquiryRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    created_at: datetime

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class StudyInquiryRecord(InquiryRecord):
    country: Optional[str] = None
    qualification: Optional[str] = None
    age: Optional[str] = None
    education_topic: Optional[str] = None
    cgpa: Optional[str] = None
    budget: Optional[str] = None
    needs_loan: Optional[bool] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class WorkInquiryRecord(InquiryRecord):
    occupation: Optional[str] = None
    education: Optional[str] = None
    experience: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class InvestInquiryRecord(InquiryRecord):
    name: Optional[str] = None
    email: Optional[str] = None
    country: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Envelopes
# ══════════════════════════════════════════════════════════════════════════


class SubmissionResponse(BaseModel):
    """
    Success envelope for every submission endpoint.

    Example:
        {
            "success": true,
            "message": "Investment inquiry submitted successfully",
            "data": {"id": 7, "name": "Alice", "email": "a@x.com",
                     "country": "Canada", "createdAt": "2024-05-01T10:00:00"}
        }
    """
    success: bool = Field(default=True)
    message: str = Field(description="Human-readable success message")
    data: Dict[str, Any] = Field(description="The inserted row")


class ErrorResponse(BaseModel):
    """Failure envelope shared by every error handler."""
    success: bool = Field(default=False)
    message: str = Field(description="Error category, e.g. 'Database error'")
    error: str = Field(description="Underlying error message")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    mail: str = Field(description="enabled or disabled")
    uptime_seconds: float = Field(description="Seconds since service started")
