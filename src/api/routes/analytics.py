"""Dashboard analytics endpoints."""

import sqlite3

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import get_crm, get_db
from api.logging import logged_request
from api.models import IsaUsersRequest, IsaUsersResponse
from api.models.responses import ErrorCodes
from api.routes.common import resolve_date_range, upstream_error, validate_dashboard_type
from core.crm_client import CRMError
from services.fub import get_appointment_outcomes, get_appointment_types, get_users
from services.metrics import compare_metrics, fetch_metrics, get_agent_metrics
from services.outcomes import get_isa_user_ids, set_isa_user_ids

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/metrics")
async def metrics_endpoint(
    request: Request,
    start: str | None = None,
    end: str | None = None,
    user_id: int | None = None,
    dashboard_type: str | None = None,
    conn: sqlite3.Connection = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_crm),
):
    """
    Aggregated appointment metrics for a date range.

    Defaults to the last 30 days when start/end are not both given.
    """
    with logged_request(conn, request) as request_log:
        start, end = resolve_date_range(start, end)
        dashboard_type = validate_dashboard_type(dashboard_type)

        try:
            metrics = await fetch_metrics(conn, start, end, user_id, dashboard_type, client=client)
        except CRMError as e:
            raise upstream_error("Failed to fetch metrics", e) from e

        request_log.appointments_count = metrics["summary"]["total_appointments"]
        return metrics


@router.get("/compare")
async def compare_endpoint(
    request: Request,
    period1_start: str | None = None,
    period1_end: str | None = None,
    period2_start: str | None = None,
    period2_end: str | None = None,
    user_id: int | None = None,
    dashboard_type: str | None = None,
    conn: sqlite3.Connection = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_crm),
):
    """Compare metrics between two periods. All four dates are required."""
    with logged_request(conn, request) as request_log:
        dates = {
            "period1_start": period1_start,
            "period1_end": period1_end,
            "period2_start": period2_start,
            "period2_end": period2_end,
        }
        missing = [name for name, value in dates.items() if not value]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "Missing required parameters",
                    "code": ErrorCodes.INVALID_REQUEST,
                    "details": missing,
                },
            )
        resolve_date_range(period1_start, period1_end, "period1_start", "period1_end")
        resolve_date_range(period2_start, period2_end, "period2_start", "period2_end")
        dashboard_type = validate_dashboard_type(dashboard_type)

        try:
            comparison = await compare_metrics(
                conn,
                period1_start,
                period1_end,
                period2_start,
                period2_end,
                user_id,
                dashboard_type,
                client=client,
            )
        except CRMError as e:
            raise upstream_error("Failed to compare metrics", e) from e

        request_log.appointments_count = (
            comparison["period1"]["summary"]["total_appointments"]
            + comparison["period2"]["summary"]["total_appointments"]
        )
        return comparison


@router.get("/agent/{user_id}")
async def agent_metrics_endpoint(
    request: Request,
    user_id: int,
    start: str | None = None,
    end: str | None = None,
    dashboard_type: str | None = None,
    conn: sqlite3.Connection = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_crm),
):
    """Metrics for a single agent."""
    with logged_request(conn, request) as request_log:
        start, end = resolve_date_range(start, end)
        dashboard_type = validate_dashboard_type(dashboard_type)

        try:
            metrics = await get_agent_metrics(conn, user_id, start, end, dashboard_type, client=client)
        except CRMError as e:
            raise upstream_error("Failed to fetch agent metrics", e) from e

        request_log.appointments_count = metrics["summary"]["total_appointments"]
        return metrics


@router.get("/users")
async def users_endpoint(
    request: Request,
    conn: sqlite3.Connection = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_crm),
):
    """All FUB users (agents)."""
    with logged_request(conn, request):
        return await get_users(client=client)


@router.get("/appointment-types")
async def appointment_types_endpoint(
    request: Request,
    conn: sqlite3.Connection = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_crm),
):
    """FUB appointment type catalog."""
    with logged_request(conn, request):
        return await get_appointment_types(client=client)


@router.get("/appointment-outcomes")
async def appointment_outcomes_endpoint(
    request: Request,
    conn: sqlite3.Connection = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_crm),
):
    """FUB appointment outcome catalog."""
    with logged_request(conn, request):
        return await get_appointment_outcomes(client=client)


@router.get("/isa-users", response_model=IsaUsersResponse)
def get_isa_users_endpoint(request: Request, conn: sqlite3.Connection = Depends(get_db)):
    """Users designated as Inside Sales Associates."""
    with logged_request(conn, request):
        return IsaUsersResponse(isa_user_ids=get_isa_user_ids(conn))


@router.post("/isa-users", response_model=IsaUsersResponse)
def set_isa_users_endpoint(
    request: Request,
    body: IsaUsersRequest,
    conn: sqlite3.Connection = Depends(get_db),
):
    """Replace the ISA designation with the given users."""
    with logged_request(conn, request):
        return IsaUsersResponse(isa_user_ids=set_isa_user_ids(conn, body.isa_user_ids))
