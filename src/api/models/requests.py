"""Pydantic request bodies for API endpoints."""

from pydantic import BaseModel


class OutcomeUpdateRequest(BaseModel):
    """
    Body for PUT /api/outcomes/{appointment_id}.

    outcome_id and outcome_name are checked by the route so a missing value
    is reported with the standard error format.
    """

    outcome_id: int | None = None
    outcome_name: str | None = None
    notes: str | None = None
    updated_by: str | None = None


class BulkOutcomeItem(BaseModel):
    appointment_id: int
    outcome_id: int | None = None
    outcome_name: str | None = None
    notes: str | None = None
    updated_by: str | None = None


class BulkOutcomeRequest(BaseModel):
    outcomes: list[BulkOutcomeItem] = []


class IsaUsersRequest(BaseModel):
    isa_user_ids: list[int]
