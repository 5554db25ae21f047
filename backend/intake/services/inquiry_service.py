"""
Form Intake Service — Inquiry Submission Service
=================================================

What:  Persists one form submission and returns the inserted row.
How:   Builds a parameterized `INSERT ... RETURNING` for the form's table,
       executes it on the request's session and commits immediately.
Who:   Called by the submission routes.

Flow (POST /submit-*):
    ┌──────────┐    ┌──────────────┐    ┌──────────┐    ┌──────────────┐
    │  Route   │───▶│   INSERT …   │───▶│  COMMIT  │───▶│ Mail (bg)    │
    │ (schema) │    │   RETURNING  │    │          │    │ MailService  │
    └──────────┘    └──────────────┘    └──────────┘    └──────────────┘

    On a driver error the transaction is rolled back and DatabaseError is
    raised; the route never schedules the email in that case.
"""

import logging
from typing import Union

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from intake.exceptions import DatabaseError
from intake.forms import InquiryForm
from intake.schemas.inquiry import FormSubmission, InquiryRecord

logger = logging.getLogger(__name__)


def driver_message(exc: Union[SQLAlchemyError, OSError]) -> str:
    """The underlying driver's message, unwrapped from SQLAlchemy's DBAPIError."""
    original = getattr(exc, "orig", None) or exc
    return str(original) or type(original).__name__


class InquiryService:
    """
    Stateless submission logic shared by every form kind.

    No retries: a failed insert is reported once and the caller resubmits.
    Identical submissions produce separate rows.
    """

    async def submit(
        self,
        db: AsyncSession,
        form: InquiryForm,
        submission: FormSubmission,
    ) -> InquiryRecord:
        """
        Insert `submission` into `form`'s table.

        Args:
            db: Request-scoped session
            form: Descriptor of the form being submitted
            submission: Parsed body holding only the recognized fields

        Returns:
            The inserted row, including server-assigned `id` and `created_at`

        Raises:
            DatabaseError: The insert or commit failed (→ 500)
        """
        table = form.model.__table__
        # Values are bound parameters; nothing from the request is spliced into SQL
        stmt = insert(table).values(**submission.columns()).returning(*table.c)

        try:
            result = await db.execute(stmt)
            row = result.mappings().one()
            await db.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Error inserting %s data: %s", form.kind, e)
            await self._rollback(db)
            raise DatabaseError(
                error=driver_message(e),
                context={"form": form.kind, "table": table.name},
            )

        record = form.record.model_validate(dict(row))
        logger.info("%s data inserted successfully: id=%s", form.kind, record.id)
        return record

    async def _rollback(self, db: AsyncSession) -> None:
        # Connection may already be gone; the insert error is reported.
        try:
            await db.rollback()
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Rollback failed: %s", e)


# ── Singleton Instance ────────────────────────────────────────────────────
inquiry_service = InquiryService()
