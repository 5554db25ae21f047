"""
Form Intake Service — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Route tests run the real app (lifespan included) against a temporary
       SQLite database through aiosqlite; SMTP is always mocked.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:    Settings pointing at a per-test SQLite file, mail configured
    ├── smtp_deliver:     Patched MailService._deliver (records outgoing messages)
    ├── app:              FastAPI app with its lifespan entered
    ├── test_client:      HTTPX AsyncClient bound to `app`
    ├── mock_db_session:  AsyncMock session for service unit tests
    └── invest_payload / study_payload / work_payload: sample bodies
"""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any intake import: the module-level settings/app read these
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test-intake.db"
os.environ["EMAIL_USER"] = ""
os.environ["EMAIL_PASS"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from intake.config import Settings  # noqa: E402
from intake.main import create_app  # noqa: E402
from intake.services.mail_service import MailService  # noqa: E402


@pytest.fixture
def test_settings(tmp_path):
    """Settings for one test: private SQLite file, mail enabled, INFO logs."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'intake.db'}",
        email_user="forms@example.com",
        email_pass="app-password",
        email_receiver="office@example.com",
        log_level="INFO",
    )


@pytest.fixture
def smtp_deliver():
    """
    Replaces the blocking SMTP exchange.

    Usage:
        message = smtp_deliver.call_args.args[0]   # email.message.EmailMessage
    """
    with patch.object(MailService, "_deliver") as deliver:
        yield deliver


@pytest_asyncio.fixture
async def app(test_settings, smtp_deliver):
    """The application with startup (tables, mail service) already run."""
    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Background tasks finish before the response is handed back, so the mail
    mock can be inspected right after the request.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def invest_payload():
    return {"name": "Alice", "email": "a@x.com", "country": "Canada"}


@pytest.fixture
def work_payload():
    return {
        "occupation": "Nurse",
        "education": "BSc Nursing",
        "experience": "5 years",
        "name": "Ravi",
        "email": "ravi@example.com",
        "phone": "+977-9800000000",
    }


@pytest.fixture
def study_payload():
    return {
        "country": "Australia",
        "qualification": "Bachelor",
        "age": "24",
        "educationTopic": "Computer Science",
        "cgpa": "3.6",
        "budget": "20-30 lakhs",
        "needsLoan": True,
        "name": "Sita",
        "email": "sita@example.com",
        "phone": "9812345678",
    }
