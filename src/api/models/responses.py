"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    crm_configured: bool
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class OutcomeRecord(BaseModel):
    """A locally stored appointment outcome (or the empty placeholder)."""

    appointment_id: int
    outcome_id: int | None = None
    outcome_name: str | None = None
    notes: str | None = None
    updated_by: str | None = None
    updated_at: str | None = None
    created_at: str | None = None


class OutcomeListResponse(BaseModel):
    outcomes: list[OutcomeRecord]
    count: int


class OutcomeUpdateResponse(BaseModel):
    success: bool
    outcome: OutcomeRecord


class BulkUpdateResponse(BaseModel):
    success: bool
    updated: int


class DeleteResponse(BaseModel):
    success: bool
    message: str


class OutcomeStatsResponse(BaseModel):
    total: int
    unique_outcomes: int
    first_entry: str | None = None
    last_update: str | None = None


class IsaUsersResponse(BaseModel):
    isa_user_ids: list[int]


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
