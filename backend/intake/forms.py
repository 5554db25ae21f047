"""
Form Intake Service — Inquiry Form Descriptors
===============================================

What:  One `InquiryForm` per form kind, bundling everything that differs
       between the study, work and investment submissions.
How:   The submission service, the mail service and the routes all take an
       `InquiryForm` instead of branching on the form kind.
"""

from dataclasses import dataclass
from typing import Dict, Type

from intake.database import Base
from intake.models.inquiry import InvestInquiry, StudyInquiry, WorkInquiry
from intake.schemas.inquiry import (
    FormSubmission,
    InquiryRecord,
    InvestFormSubmission,
    InvestInquiryRecord,
    StudyFormSubmission,
    StudyInquiryRecord,
    WorkFormSubmission,
    WorkInquiryRecord,
)


@dataclass(frozen=True)
class InquiryForm:
    """
    Attributes:
        kind:            Short name used in logs ("study", "work", "invest")
        model:           ORM model whose table receives the row
        submission:      Pydantic model that extracts the recognized fields
        record:          Pydantic model that serializes the inserted row
        success_message: `message` of the 200 response
        email_subject:   Subject line of the notification email
        email_intro:     One-line paragraph placed above the field table
    """

    kind: str
    model: Type[Base]
    submission: Type[FormSubmission]
    record: Type[InquiryRecord]
    success_message: str
    email_subject: str
    email_intro: str


STUDY_FORM = InquiryForm(
    kind="study",
    model=StudyInquiry,
    submission=StudyFormSubmission,
    record=StudyInquiryRecord,
    success_message="Form submitted successfully",
    email_subject="Study Abroad Inquiry",
    email_intro="For Study: This person wants to study abroad. Their details are:",
)

WORK_FORM = InquiryForm(
    kind="work",
    model=WorkInquiry,
    submission=WorkFormSubmission,
    record=WorkInquiryRecord,
    success_message="Work profile saved successfully",
    email_subject="Work Abroad Inquiry",
    email_intro="For Work: This person wants to work abroad. Their details are:",
)

INVEST_FORM = InquiryForm(
    kind="invest",
    model=InvestInquiry,
    submission=InvestFormSubmission,
    record=InvestInquiryRecord,
    success_message="Investment inquiry submitted successfully",
    email_subject="Investment Abroad Inquiry",
    email_intro="For Investment: This person wants to invest abroad. Their details are:",
)

FORMS: Dict[str, InquiryForm] = {
    form.kind: form for form in (STUDY_FORM, WORK_FORM, INVEST_FORM)
}
