"""
Form Intake Service — Inquiry Service Unit Tests
=================================================

What:  InquiryService.submit() with a mocked session (no database).

What we test:
    ✅ INSERT is parameterized and targets the form's table
    ✅ Commit happens before the record is returned
    ✅ Driver errors → rollback + DatabaseError carrying the driver message
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, OperationalError

from intake.exceptions import DatabaseError
from intake.forms import INVEST_FORM, STUDY_FORM
from intake.schemas.inquiry import InvestFormSubmission, StudyFormSubmission
from intake.services.inquiry_service import InquiryService, driver_message


def _result_with_row(row):
    result = MagicMock()
    result.mappings.return_value.one.return_value = row
    return result


class TestInquiryServiceSubmit:

    def setup_method(self):
        self.service = InquiryService()

    @pytest.mark.asyncio
    async def test_submit_returns_inserted_row(self, mock_db_session):
        created = datetime(2024, 5, 1, 10, 0, 0)
        mock_db_session.execute.return_value = _result_with_row(
            {"id": 7, "name": "Alice", "email": "a@x.com", "country": "Canada", "created_at": created}
        )
        submission = InvestFormSubmission.model_validate(
            {"name": "Alice", "email": "a@x.com", "country": "Canada"}
        )

        record = await self.service.submit(mock_db_session, INVEST_FORM, submission)

        assert record.id == 7
        assert record.to_json() == {
            "id": 7,
            "name": "Alice",
            "email": "a@x.com",
            "country": "Canada",
            "createdAt": "2024-05-01T10:00:00",
        }
        mock_db_session.commit.assert_awaited_once()
        mock_db_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insert_uses_bound_parameters(self, mock_db_session):
        mock_db_session.execute.return_value = _result_with_row(
            {"id": 1, "name": "x'); DROP TABLE invest; --", "email": None,
             "country": None, "created_at": datetime(2024, 1, 1)}
        )
        hostile = "x'); DROP TABLE invest; --"
        submission = InvestFormSubmission.model_validate({"name": hostile})

        await self.service.submit(mock_db_session, INVEST_FORM, submission)

        stmt = mock_db_session.execute.call_args.args[0]
        compiled = stmt.compile(dialect=postgresql.dialect())
        assert stmt.table.name == "invest"
        assert hostile not in str(compiled)
        assert compiled.params["name"] == hostile
        assert compiled.params["country"] is None

    @pytest.mark.asyncio
    async def test_study_columns_are_snake_case(self, mock_db_session):
        mock_db_session.execute.return_value = _result_with_row(
            {"id": 3, "education_topic": "Law", "needs_loan": True, "created_at": datetime(2024, 1, 1)}
        )
        submission = StudyFormSubmission.model_validate({"educationTopic": "Law", "needsLoan": True})

        record = await self.service.submit(mock_db_session, STUDY_FORM, submission)

        compiled = mock_db_session.execute.call_args.args[0].compile(dialect=postgresql.dialect())
        assert compiled.params["education_topic"] == "Law"
        assert compiled.params["needs_loan"] is True
        assert record.to_json()["educationTopic"] == "Law"

    @pytest.mark.asyncio
    async def test_operational_error_raises_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "INSERT", {}, ConnectionRefusedError("could not connect to server")
        )

        with pytest.raises(DatabaseError) as excinfo:
            await self.service.submit(mock_db_session, INVEST_FORM, InvestFormSubmission())

        assert excinfo.value.message == "Database error"
        assert excinfo.value.error == "could not connect to server"
        assert excinfo.value.context["table"] == "invest"
        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute.return_value = _result_with_row({"id": 1, "created_at": datetime(2024, 1, 1)})
        mock_db_session.commit.side_effect = IntegrityError("COMMIT", {}, Exception("deadlock detected"))

        with pytest.raises(DatabaseError) as excinfo:
            await self.service.submit(mock_db_session, INVEST_FORM, InvestFormSubmission())

        assert excinfo.value.error == "deadlock detected"
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_os_error_is_translated(self, mock_db_session):
        mock_db_session.execute.side_effect = ConnectionRefusedError(111, "Connection refused")

        with pytest.raises(DatabaseError) as excinfo:
            await self.service.submit(mock_db_session, INVEST_FORM, InvestFormSubmission())

        assert "Connection refused" in excinfo.value.error

    @pytest.mark.asyncio
    async def test_failed_rollback_still_reports_original_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("INSERT", {}, Exception("server closed the connection"))
        mock_db_session.rollback = AsyncMock(side_effect=OperationalError("ROLLBACK", {}, Exception("gone")))

        with pytest.raises(DatabaseError) as excinfo:
            await self.service.submit(mock_db_session, INVEST_FORM, InvestFormSubmission())

        assert excinfo.value.error == "server closed the connection"


class TestDriverMessage:

    def test_unwraps_dbapi_error(self):
        exc = OperationalError("SELECT 1", {}, Exception("timeout expired"))
        assert driver_message(exc) == "timeout expired"

    def test_empty_message_falls_back_to_type_name(self):
        assert driver_message(ConnectionResetError()) == "ConnectionResetError"
