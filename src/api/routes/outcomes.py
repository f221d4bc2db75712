"""
Local outcome tracking endpoints.

These manage appointment outcomes locally. Nothing here writes to Follow Up
Boss, so updating an outcome never triggers FUB's notification emails.
"""

import sqlite3
from datetime import date, datetime, timedelta, timezone

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from api.dependencies import get_crm, get_db
from api.logging import logged_request
from api.models import (
    BulkOutcomeRequest,
    BulkUpdateResponse,
    DeleteResponse,
    OutcomeListResponse,
    OutcomeRecord,
    OutcomeStatsResponse,
    OutcomeUpdateRequest,
    OutcomeUpdateResponse,
)
from api.models.responses import ErrorCodes
from api.routes.common import upstream_error
from core.crm_client import CRMError
from services.fub import get_appointment_outcomes, get_appointments
from services.metrics import find_pending_appointments, is_past_appointment
from services.outcomes import (
    delete_outcome,
    get_all_outcomes,
    get_outcome,
    get_outcomes_for_appointments,
    get_stats,
    set_outcome,
    set_outcomes_bulk,
)

router = APIRouter(prefix="/api/outcomes", tags=["outcomes"])


def missing_outcome_fields(outcome_id: int | None, outcome_name: str | None) -> list[str]:
    missing = []
    if not outcome_id:
        missing.append("outcome_id")
    if not outcome_name:
        missing.append("outcome_name")
    return missing


@router.get("", response_model=OutcomeListResponse)
def list_outcomes_endpoint(request: Request, conn: sqlite3.Connection = Depends(get_db)):
    """All locally tracked outcomes."""
    with logged_request(conn, request):
        outcomes = get_all_outcomes(conn)
        return {"outcomes": outcomes, "count": len(outcomes)}


@router.get("/stats", response_model=OutcomeStatsResponse)
def outcome_stats_endpoint(request: Request, conn: sqlite3.Connection = Depends(get_db)):
    """Count, distinct outcomes and first/last timestamps."""
    with logged_request(conn, request):
        return get_stats(conn)


@router.get("/types")
async def outcome_types_endpoint(
    request: Request,
    conn: sqlite3.Connection = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_crm),
):
    """Outcome choices from FUB (for the dropdown)."""
    with logged_request(conn, request):
        return await get_appointment_outcomes(client=client)


@router.post("/bulk", response_model=BulkUpdateResponse)
def bulk_update_endpoint(
    request: Request,
    body: BulkOutcomeRequest,
    conn: sqlite3.Connection = Depends(get_db),
):
    """Set multiple outcomes at once."""
    with logged_request(conn, request):
        if not body.outcomes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "outcomes array is required",
                    "code": ErrorCodes.INVALID_REQUEST,
                    "details": [],
                },
            )

        errors = []
        for item in body.outcomes:
            missing = missing_outcome_fields(item.outcome_id, item.outcome_name)
            if missing:
                errors.append(f"Appointment {item.appointment_id}: missing {', '.join(missing)}")
        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "outcome_id and outcome_name are required",
                    "code": ErrorCodes.INVALID_REQUEST,
                    "details": errors,
                },
            )

        count = set_outcomes_bulk(conn, [item.model_dump() for item in body.outcomes])
        return BulkUpdateResponse(success=True, updated=count)


@router.get("/appointments/pending")
async def pending_appointments_endpoint(
    request: Request,
    days: int = Query(30, ge=1, le=365),
    conn: sqlite3.Connection = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_crm),
):
    """
    Past appointments that still need an outcome.

    An appointment is pending when it has ended and has no outcome in FUB
    and no local outcome.
    """
    with logged_request(conn, request) as request_log:
        end = date.today()
        start = end - timedelta(days=days)

        try:
            appointments = await get_appointments(start.isoformat(), end.isoformat(), client=client)
        except CRMError as e:
            raise upstream_error("Failed to fetch pending appointments", e) from e

        now = datetime.now(timezone.utc)
        past_appointments = [apt for apt in appointments if is_past_appointment(apt, now)]
        overrides = get_outcomes_for_appointments(
            conn, [apt["id"] for apt in past_appointments if "id" in apt]
        )
        pending = find_pending_appointments(past_appointments, overrides, now)

        request_log.appointments_count = len(past_appointments)
        return {"total": len(past_appointments), "pending": len(pending), "appointments": pending}


@router.get("/{appointment_id}", response_model=OutcomeRecord)
def get_outcome_endpoint(
    request: Request, appointment_id: int, conn: sqlite3.Connection = Depends(get_db)
):
    """Local outcome for one appointment, or an empty placeholder."""
    with logged_request(conn, request):
        outcome = get_outcome(conn, appointment_id)
        if outcome:
            return outcome
        return OutcomeRecord(appointment_id=appointment_id)


@router.put("/{appointment_id}", response_model=OutcomeUpdateResponse)
def set_outcome_endpoint(
    request: Request,
    appointment_id: int,
    body: OutcomeUpdateRequest,
    conn: sqlite3.Connection = Depends(get_db),
):
    """Set or update the local outcome for an appointment."""
    with logged_request(conn, request):
        missing = missing_outcome_fields(body.outcome_id, body.outcome_name)
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "outcome_id and outcome_name are required",
                    "code": ErrorCodes.INVALID_REQUEST,
                    "details": [f"Missing: {', '.join(missing)}"],
                },
            )

        set_outcome(
            conn,
            appointment_id,
            body.outcome_id,
            body.outcome_name,
            body.notes or None,
            body.updated_by or None,
        )
        return OutcomeUpdateResponse(success=True, outcome=get_outcome(conn, appointment_id))


@router.delete("/{appointment_id}", response_model=DeleteResponse)
def delete_outcome_endpoint(
    request: Request, appointment_id: int, conn: sqlite3.Connection = Depends(get_db)
):
    """Remove the local outcome (revert to FUB's outcome)."""
    with logged_request(conn, request):
        success = delete_outcome(conn, appointment_id)
        return DeleteResponse(
            success=success,
            message="Outcome removed" if success else "No local outcome found",
        )
