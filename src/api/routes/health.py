"""Health check endpoint."""

import sqlite3
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_db
from api.models.responses import HealthResponse
from core.config import API_VERSION, FUB_API_KEY

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(conn: sqlite3.Connection = Depends(get_db)):
    """
    Health check endpoint for monitoring.

    Returns 200 if healthy, 503 if unhealthy.
    """
    crm_configured = bool(FUB_API_KEY)
    timestamp = datetime.now(timezone.utc).isoformat()

    try:
        conn.execute("SELECT 1 FROM appointment_outcomes LIMIT 1")
        database_available = True
    except sqlite3.Error:
        database_available = False

    if crm_configured and database_available:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            crm_configured=True,
            database_available=True,
            timestamp=timestamp,
        )
    else:
        error = "FUB_API_KEY is not configured" if not crm_configured else "Outcome database unavailable"
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                crm_configured=crm_configured,
                database_available=database_available,
                timestamp=timestamp,
                error=error,
            ).model_dump(),
        )
