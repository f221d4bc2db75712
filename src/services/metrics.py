"""
Appointment metrics: local outcome merge, dashboard filtering and aggregation.
"""

import asyncio
import sqlite3
from collections import defaultdict
from collections.abc import Collection
from datetime import datetime, timezone

import httpx

from core.categorization import categorize_outcome, is_dashboard_appointment, resolve_agent_id
from core.config import (
    NO_OUTCOME,
    OUTCOME_CATEGORIES,
    OUTCOME_CATEGORY_KEYWORDS,
    UNKNOWN_AGENT,
    UNKNOWN_TYPE,
)
from models.appointments import AgentBreakdown, Appointment, OutcomeOverride, User
from services.fub import get_appointments, get_users
from services.outcomes import get_isa_user_ids, get_outcomes_for_appointments


def percentage(count: int | float, total: int | float) -> float:
    """Percentage rounded to one decimal place, 0.0 when total is 0."""
    if not total:
        return 0.0
    return round(count / total * 100, 1)


def empty_categories() -> dict[str, int]:
    return {category: 0 for category in OUTCOME_CATEGORIES}


def agent_label(user: User | None) -> str:
    """by_agent key: the user's name, "User <id>" when nameless, else Unknown Agent."""
    if not user:
        return UNKNOWN_AGENT
    return user.get("name") or f"User {user['id']}"


# =============================================================================
# MERGE & FILTER
# =============================================================================


def apply_outcome_overrides(
    appointments: list[Appointment], overrides: list[OutcomeOverride]
) -> list[Appointment]:
    """
    Replace FUB outcomes with locally recorded ones.

    Returns copies; appointments without a local outcome are unchanged.
    """
    override_map = {o["appointment_id"]: o for o in overrides}
    merged = []
    for appointment in appointments:
        override = override_map.get(appointment.get("id"))
        if override:
            appointment = {
                **appointment,
                "outcome": override["outcome_name"],
                "outcomeId": override["outcome_id"],
            }
        merged.append(appointment)
    return merged


def filter_appointments(
    appointments: list[dict],
    dashboard_type: str | None,
    isa_user_ids: Collection[int] = (),
) -> list[dict]:
    """Keep only the appointments that belong on the given dashboard."""
    isa_ids = set(isa_user_ids)
    return [
        apt for apt in appointments if is_dashboard_appointment(apt, dashboard_type, isa_ids)
    ]


def is_past_appointment(appointment: Appointment, now: datetime) -> bool:
    """
    Check if an appointment has ended (its end, or start if end is missing).

    Naive timestamps are treated as UTC; unparseable ones are never past.
    """
    timestamp = appointment.get("end") or appointment.get("start")
    if not timestamp:
        return False
    try:
        ends_at = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return False
    if ends_at.tzinfo is None:
        ends_at = ends_at.replace(tzinfo=timezone.utc)
    return ends_at < now


def find_pending_appointments(
    appointments: list[dict], overrides: list[dict], now: datetime
) -> list[dict]:
    """Past appointments with no outcome, neither in FUB nor locally."""
    local_ids = {o["appointment_id"] for o in overrides}
    return [
        apt
        for apt in appointments
        if is_past_appointment(apt, now)
        and apt.get("id") not in local_ids
        and not apt.get("outcomeId")
    ]


# =============================================================================
# AGGREGATION
# =============================================================================


def aggregate_appointments(appointments: list[Appointment], users: list[User]) -> dict:
    """
    Group appointments by type, outcome, type x outcome and agent.

    Every breakdown sums to len(appointments). Percentages are of the
    period total, except type x outcome percentages which are of the type's
    own total.
    """
    user_map = {u["id"]: u for u in users}
    total = len(appointments)

    by_type: dict[str, int] = defaultdict(int)
    by_outcome: dict[str, int] = defaultdict(int)
    categories = empty_categories()
    by_type_outcome: dict[str, dict] = {}
    by_agent: dict[str, AgentBreakdown] = {}

    for appointment in appointments:
        type_name = appointment.get("type") or UNKNOWN_TYPE
        outcome_name = appointment.get("outcome") or NO_OUTCOME
        category = categorize_outcome(outcome_name)

        by_type[type_name] += 1
        by_outcome[outcome_name] += 1
        categories[category] += 1

        type_entry = by_type_outcome.setdefault(
            type_name,
            {"total": 0, "counts": defaultdict(int), "outcome_categories": empty_categories()},
        )
        type_entry["total"] += 1
        type_entry["counts"][outcome_name] += 1
        type_entry["outcome_categories"][category] += 1

        agent_id = resolve_agent_id(appointment)
        agent = user_map.get(agent_id)
        agent_name = agent_label(agent)
        agent_entry = by_agent.setdefault(
            agent_name,
            {
                "user_id": agent["id"] if agent else None,
                "total": 0,
                "by_type": defaultdict(int),
                "by_outcome": defaultdict(int),
                "outcome_categories": empty_categories(),
            },
        )
        agent_entry["total"] += 1
        agent_entry["by_type"][type_name] += 1
        agent_entry["by_outcome"][outcome_name] += 1
        agent_entry["outcome_categories"][category] += 1

    # Second pass: percentages, and plain dicts for serialization
    for type_entry in by_type_outcome.values():
        type_entry["counts"] = dict(type_entry["counts"])
        type_entry["percentage"] = percentage(type_entry["total"], total)
        type_entry["percentages"] = {
            outcome: percentage(count, type_entry["total"])
            for outcome, count in type_entry["counts"].items()
        }

    for agent_entry in by_agent.values():
        agent_entry["by_type"] = dict(agent_entry["by_type"])
        agent_entry["by_outcome"] = dict(agent_entry["by_outcome"])
        agent_entry["percentage"] = percentage(agent_entry["total"], total)
        agent_entry["success_rate"] = percentage(
            agent_entry["outcome_categories"]["successful"], agent_entry["total"]
        )

    return {
        "total": total,
        "outcome_categories": categories,
        "by_type": {
            "counts": dict(by_type),
            "percentages": {t: percentage(c, total) for t, c in by_type.items()},
        },
        "by_outcome": {
            "counts": dict(by_outcome),
            "percentages": {o: percentage(c, total) for o, c in by_outcome.items()},
        },
        "by_type_outcome": by_type_outcome,
        "by_agent": by_agent,
    }


def calculate_metrics(
    appointments: list[dict],
    users: list[dict],
    overrides: list[dict],
    start_date: str,
    end_date: str,
    dashboard_type: str | None = None,
    isa_user_ids: Collection[int] = (),
) -> dict:
    """
    Build the full dashboard metrics for already-fetched data.

    Local outcomes are merged in before filtering, so every breakdown
    reflects them. Rates and percentages are JSON numbers (floats rounded
    to one decimal, e.g. 50.0), not strings.
    """
    merged = apply_outcome_overrides(appointments, overrides)
    filtered = filter_appointments(merged, dashboard_type, isa_user_ids)
    aggregated = aggregate_appointments(filtered, users)

    total = aggregated["total"]
    categories = aggregated["outcome_categories"]
    filtered_ids = {apt.get("id") for apt in filtered}

    return {
        "summary": {
            "total_appointments": total,
            "appointments_with_outcome": total - aggregated["by_outcome"]["counts"].get(NO_OUTCOME, 0),
            "success_rate": percentage(categories["successful"], total),
            "nurture_rate": percentage(categories["nurture"], total),
            "failed_rate": percentage(categories["failed"], total),
            "date_range": {"start": start_date, "end": end_date},
            "dashboard_type": dashboard_type,
        },
        "outcome_categories": categories,
        "by_type": aggregated["by_type"],
        "by_outcome": aggregated["by_outcome"],
        "by_type_outcome": aggregated["by_type_outcome"],
        "by_agent": aggregated["by_agent"],
        "metadata": {
            "appointment_types": list(aggregated["by_type"]["counts"]),
            "appointment_outcomes": list(aggregated["by_outcome"]["counts"]),
            "users": [{"id": u["id"], "name": u.get("name"), "email": u.get("email")} for u in users],
            "outcome_keywords": OUTCOME_CATEGORY_KEYWORDS,
            "overrides_applied": sum(1 for o in overrides if o["appointment_id"] in filtered_ids),
        },
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }


# =============================================================================
# FETCH + AGGREGATE
# =============================================================================


async def fetch_metrics(
    conn: sqlite3.Connection,
    start_date: str,
    end_date: str,
    user_id: int | None = None,
    dashboard_type: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> dict:
    """
    Fetch appointments and users from FUB and aggregate them.

    Raises CRMError if appointments cannot be fetched.
    """
    appointments, users = await asyncio.gather(
        get_appointments(start_date, end_date, user_id, client=client),
        get_users(client=client),
    )
    overrides = get_outcomes_for_appointments(conn, [apt["id"] for apt in appointments if "id" in apt])
    isa_user_ids = get_isa_user_ids(conn)

    return calculate_metrics(
        appointments, users, overrides, start_date, end_date, dashboard_type, isa_user_ids
    )


def _rate_change(period1: dict, period2: dict, key: str) -> dict:
    first = period1["summary"][key]
    second = period2["summary"][key]
    return {"absolute": round(second - first, 1), "period1": first, "period2": second}


async def compare_metrics(
    conn: sqlite3.Connection,
    period1_start: str,
    period1_end: str,
    period2_start: str,
    period2_end: str,
    user_id: int | None = None,
    dashboard_type: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> dict:
    """Compare metrics between two periods."""
    period1, period2 = await asyncio.gather(
        fetch_metrics(conn, period1_start, period1_end, user_id, dashboard_type, client=client),
        fetch_metrics(conn, period2_start, period2_end, user_id, dashboard_type, client=client),
    )

    total1 = period1["summary"]["total_appointments"]
    total2 = period2["summary"]["total_appointments"]

    return {
        "period1": period1,
        "period2": period2,
        "changes": {
            "appointments": {
                "absolute": total2 - total1,
                "percentage": percentage(total2 - total1, total1),
            },
            "success_rate": _rate_change(period1, period2, "success_rate"),
            "nurture_rate": _rate_change(period1, period2, "nurture_rate"),
            "failed_rate": _rate_change(period1, period2, "failed_rate"),
        },
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }


async def get_agent_metrics(
    conn: sqlite3.Connection,
    user_id: int,
    start_date: str,
    end_date: str,
    dashboard_type: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> dict:
    """Metrics for one agent, with that agent's own breakdown pulled out."""
    metrics = await fetch_metrics(conn, start_date, end_date, user_id, dashboard_type, client=client)

    agent = next((u for u in metrics["metadata"]["users"] if u["id"] == user_id), None)
    agent_name = agent_label(agent) if agent else None

    return {
        "agent": agent,
        **metrics,
        "agent_specific": metrics["by_agent"].get(agent_name) or {
            "user_id": user_id,
            "total": 0,
            "percentage": 0.0,
            "by_type": {},
            "by_outcome": {},
            "outcome_categories": empty_categories(),
            "success_rate": 0.0,
        },
    }
