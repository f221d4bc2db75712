"""Query parsing and error helpers shared by the API routers."""

from datetime import date, datetime, timedelta

from fastapi import HTTPException, status

from api.models.responses import ErrorCodes
from core.config import DASHBOARD_APPOINTMENT_TYPES, DEFAULT_RANGE_DAYS


def get_default_date_range(days: int = DEFAULT_RANGE_DAYS) -> tuple[str, str]:
    """Last N days up to today, as YYYY-MM-DD strings."""
    end = date.today()
    start = end - timedelta(days=days)
    return start.isoformat(), end.isoformat()


def parse_date(value: str, name: str) -> date:
    """Parse a YYYY-MM-DD query value."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": f"Invalid {name} format",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": ["Expected format: YYYY-MM-DD"],
            },
        )


def resolve_date_range(
    start: str | None,
    end: str | None,
    start_name: str = "start",
    end_name: str = "end",
) -> tuple[str, str]:
    """Use the given range when both ends are present, else the default range."""
    if not (start and end):
        return get_default_date_range()
    if parse_date(start, start_name) > parse_date(end, end_name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": f"{start_name} must not be after {end_name}",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [f"{start_name}={start}", f"{end_name}={end}"],
            },
        )
    return start, end


def validate_dashboard_type(dashboard_type: str | None) -> str | None:
    """Reject unknown dashboard types; empty means no filtering."""
    if not dashboard_type:
        return None
    if dashboard_type not in DASHBOARD_APPOINTMENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Invalid dashboard_type",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [f"Expected one of: {', '.join(DASHBOARD_APPOINTMENT_TYPES)}"],
            },
        )
    return dashboard_type


def upstream_error(message: str, error: Exception) -> HTTPException:
    """502 for a failed Follow Up Boss fetch."""
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={
            "error": message,
            "code": ErrorCodes.UPSTREAM_ERROR,
            "details": [str(error)],
        },
    )
