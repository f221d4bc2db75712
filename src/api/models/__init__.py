"""API Pydantic models."""

from .requests import BulkOutcomeItem, BulkOutcomeRequest, IsaUsersRequest, OutcomeUpdateRequest
from .responses import (
    BulkUpdateResponse,
    DeleteResponse,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    IsaUsersResponse,
    OutcomeListResponse,
    OutcomeRecord,
    OutcomeStatsResponse,
    OutcomeUpdateResponse,
)

__all__ = [
    "BulkOutcomeItem",
    "BulkOutcomeRequest",
    "BulkUpdateResponse",
    "DeleteResponse",
    "ErrorCodes",
    "ErrorResponse",
    "HealthResponse",
    "IsaUsersRequest",
    "IsaUsersResponse",
    "OutcomeListResponse",
    "OutcomeRecord",
    "OutcomeStatsResponse",
    "OutcomeUpdateRequest",
]
