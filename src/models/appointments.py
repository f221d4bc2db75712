"""
Data models for appointments, local outcomes and metrics.

Appointments and users are kept as the dicts FUB returns (camelCase keys);
these TypedDicts document the fields the dashboard relies on.
"""

from typing import TypedDict


class Invitee(TypedDict, total=False):
    """Appointment invitee. Leads carry personId, agents carry userId."""
    personId: int
    userId: int
    name: str
    email: str


class Appointment(TypedDict, total=False):
    """FUB appointment record."""
    id: int
    title: str
    start: str
    end: str
    type: str | None
    typeId: int | None
    outcome: str | None
    outcomeId: int | None
    createdById: int | None
    invitees: list[Invitee]


class User(TypedDict, total=False):
    """FUB user (agent)."""
    id: int
    name: str
    email: str
    role: str


class OutcomeOverride(TypedDict):
    """Locally recorded outcome that shadows FUB's appointment outcome."""
    id: int
    appointment_id: int
    outcome_id: int | None
    outcome_name: str | None
    notes: str | None
    updated_by: str | None
    updated_at: str
    created_at: str


class OutcomeStats(TypedDict):
    """Summary of the local outcome table."""
    total: int
    unique_outcomes: int
    first_entry: str | None
    last_update: str | None


class CategoryTotals(TypedDict):
    successful: int
    nurture: int
    failed: int


class CountBreakdown(TypedDict):
    """Label -> count plus label -> percentage of the period total."""
    counts: dict[str, int]
    percentages: dict[str, float]


class TypeOutcomeBreakdown(TypedDict):
    total: int
    percentage: float
    counts: dict[str, int]
    percentages: dict[str, float]
    outcome_categories: CategoryTotals


class AgentBreakdown(TypedDict):
    user_id: int | None
    total: int
    percentage: float
    by_type: dict[str, int]
    by_outcome: dict[str, int]
    outcome_categories: CategoryTotals
    success_rate: float
