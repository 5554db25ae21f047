"""
Form Intake Service — Submission Route Handlers
================================================

What:  POST /submit-form, /submit-work-form and /submit-invest-form.
How:   Each route parses its own body schema and hands off to `_submit`,
       which is the single code path for every form kind:
         1. Insert and commit the row (InquiryService)
         2. Schedule the notification email as a background task
         3. Return {success, message, data}

Error responses (produced by the global handlers in main.py):
    HTTP 422: Body is not a JSON object or a value cannot be coerced
    HTTP 500: Database error, with the driver message in `error`
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from intake.database import get_db_session
from intake.forms import INVEST_FORM, STUDY_FORM, WORK_FORM, InquiryForm
from intake.middleware.request_id import request_id_var
from intake.schemas.inquiry import (
    ErrorResponse,
    FormSubmission,
    InvestFormSubmission,
    StudyFormSubmission,
    SubmissionResponse,
    WorkFormSubmission,
)
from intake.services.inquiry_service import inquiry_service
from intake.services.mail_service import MailService, get_mail_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Submissions"])

RESPONSES = {
    200: {"description": "Submission stored", "model": SubmissionResponse},
    422: {"description": "Body could not be read", "model": ErrorResponse},
    500: {"description": "Database error", "model": ErrorResponse},
}


async def _submit(
    form: InquiryForm,
    submission: FormSubmission,
    background_tasks: BackgroundTasks,
    db: AsyncSession,
    mail: MailService,
) -> SubmissionResponse:
    """
    Store one submission and schedule its notification.

    The email task only starts after the response has been sent and its
    result is never inspected; a DatabaseError from the insert propagates
    before anything is scheduled.
    """
    logger.info("Received %s form submission", form.kind)
    record = await inquiry_service.submit(db, form, submission)

    background_tasks.add_task(
        mail.dispatch, form, submission.public_fields(), request_id_var.get("")
    )

    return SubmissionResponse(message=form.success_message, data=record.to_json())


@router.post(
    "/submit-form",
    response_model=SubmissionResponse,
    responses=RESPONSES,
    summary="Submit a study-abroad inquiry",
)
async def submit_study_form(
    submission: StudyFormSubmission,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    mail: MailService = Depends(get_mail_service),
) -> SubmissionResponse:
    return await _submit(STUDY_FORM, submission, background_tasks, db, mail)


@router.post(
    "/submit-work-form",
    response_model=SubmissionResponse,
    responses=RESPONSES,
    summary="Submit a work-abroad inquiry",
)
async def submit_work_form(
    submission: WorkFormSubmission,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    mail: MailService = Depends(get_mail_service),
) -> SubmissionResponse:
    return await _submit(WORK_FORM, submission, background_tasks, db, mail)


@router.post(
    "/submit-invest-form",
    response_model=SubmissionResponse,
    responses=RESPONSES,
    summary="Submit an investment inquiry",
)
async def submit_invest_form(
    submission: InvestFormSubmission,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db_session),
    mail: MailService = Depends(get_mail_service),
) -> SubmissionResponse:
    return await _submit(INVEST_FORM, submission, background_tasks, db, mail)
