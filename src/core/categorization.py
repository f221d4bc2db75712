"""
Outcome categorization and dashboard-type filtering.
"""

from collections.abc import Collection

from core.config import (
    DASHBOARD_APPOINTMENT_TYPES,
    DASHBOARD_ISA,
    OUTCOME_CATEGORY_KEYWORDS,
)
from models.appointments import Appointment


def categorize_outcome(outcome_name: str | None) -> str:
    """
    Map an outcome label to 'successful', 'nurture' or 'failed'.

    Case-insensitive substring match, successful checked before nurture.
    A label containing keywords from both lands in the first match.
    """
    name = (outcome_name or "").lower()
    for category, keywords in OUTCOME_CATEGORY_KEYWORDS.items():
        if any(keyword in name for keyword in keywords):
            return category
    return "failed"


def resolve_agent_id(appointment: Appointment) -> int | None:
    """Responsible agent: first invitee with a userId, else the creator."""
    for invitee in appointment.get("invitees") or []:
        if invitee.get("userId"):
            return invitee["userId"]
    return appointment.get("createdById")


def normalize_type(type_name: str | None) -> str:
    """Normalize an appointment type label for allow-list comparison."""
    return (type_name or "").strip().lower()


def is_dashboard_appointment(
    appointment: Appointment,
    dashboard_type: str | None,
    isa_user_ids: Collection[int] = (),
) -> bool:
    """
    Check if an appointment belongs on the given dashboard.

    No dashboard type means everything is included. The ISA dashboard also
    requires the responsible agent to be a designated ISA user.
    """
    if not dashboard_type:
        return True

    allowed_types = {normalize_type(t) for t in DASHBOARD_APPOINTMENT_TYPES[dashboard_type]}
    if normalize_type(appointment.get("type")) not in allowed_types:
        return False

    if dashboard_type == DASHBOARD_ISA:
        return resolve_agent_id(appointment) in isa_user_ids

    return True
