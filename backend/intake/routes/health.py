"""
Form Intake Service — Health Check Route
=========================================

What:  GET /health for container probes and load balancers.
How:   Pings the database with SELECT 1 and reports whether mail is configured.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
Mail being disabled is reported but never makes the service unhealthy.
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from intake import __version__
from intake.database import Database, get_database
from intake.schemas.inquiry import HealthResponse
from intake.services.mail_service import MailService, get_mail_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    database: Database = Depends(get_database),
    mail: MailService = Depends(get_mail_service),
):
    db_ok = await database.ping()
    health = HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        version=__version__,
        database="connected" if db_ok else "disconnected",
        mail="enabled" if mail.enabled else "disabled",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not db_ok:
        logger.warning("Health check: database unreachable")
        return JSONResponse(status_code=503, content=health.model_dump())
    return health
