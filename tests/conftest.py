"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import httpx
import pytest

# Add src and fixtures to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent / "fixtures"))

from core.database import get_connection, init_database  # noqa: E402

FUB_TEST_BASE_URL = "https://fub.test/v1"


@pytest.fixture
def sample_users():
    """FUB users for testing."""
    return [
        {"id": 1, "name": "Alice Agent", "email": "alice@example.com"},
        {"id": 2, "name": "Ian Isa", "email": "ian@example.com"},
    ]


@pytest.fixture
def sample_appointment():
    """Sample FUB appointment dictionary for testing."""
    return {
        "id": 101,
        "title": "Smith - 12 Oak St",
        "start": "2025-11-03T15:00:00Z",
        "end": "2025-11-03T16:00:00Z",
        "type": "Listing Appointment",
        "typeId": 1,
        "outcome": "Met- Signed/Converted",
        "outcomeId": 11,
        "createdById": 1,
        "invitees": [{"personId": 5001, "name": "Jo Smith"}],
    }


@pytest.fixture
def sample_appointments(sample_appointment):
    """List of sample appointments for testing."""
    return [
        sample_appointment,
        {
            **sample_appointment,
            "id": 102,
            "outcome": "Canceled/No Show",
            "outcomeId": 14,
        },
        {
            **sample_appointment,
            "id": 103,
            "type": "ISA Appointment",
            "outcome": None,
            "outcomeId": None,
            "createdById": 1,
            "invitees": [{"personId": 5002}, {"userId": 2}],
        },
    ]


@pytest.fixture
def db_conn(tmp_path):
    """Initialized SQLite database in a temp directory."""
    conn = get_connection(tmp_path / "outcomes.db")
    init_database(conn)
    yield conn
    conn.close()


def make_fub_handler(
    appointments: list[dict],
    users: list[dict],
    outcomes: list[dict] | None = None,
    types: list[dict] | None = None,
    fail_paths: set[str] | None = None,
):
    """
    Build an httpx.MockTransport handler that serves FUB endpoints.

    Collection endpoints honor limit/offset. Paths in fail_paths return 500.
    Every request is appended to handler.requests.
    """
    collections = {
        "/appointments": ("appointments", appointments),
        "/users": ("users", users),
        "/appointmentOutcomes": ("appointmentOutcomes", outcomes or []),
        "/appointmentTypes": ("appointmentTypes", types or []),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        handler.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        if fail_paths and path in fail_paths:
            return httpx.Response(500, json={"errorMessage": "boom"})
        if path not in collections:
            return httpx.Response(404, json={"errorMessage": "not found"})

        key, items = collections[path]
        if path == "/appointments" and request.url.params.get("userId"):
            user_id = int(request.url.params["userId"])
            items = [
                apt for apt in items
                if apt.get("createdById") == user_id
                or any(i.get("userId") == user_id for i in apt.get("invitees") or [])
            ]
        if "limit" in request.url.params:
            limit = int(request.url.params["limit"])
            offset = int(request.url.params.get("offset", 0))
            items = items[offset:offset + limit]
        return httpx.Response(200, json={key: items})

    handler.requests = []
    return handler


@pytest.fixture
def fub_handler_factory():
    """Builder for mock FUB handlers (see make_fub_handler)."""
    return make_fub_handler


@pytest.fixture
def fub_client_factory():
    """Create an AsyncClient backed by a mock FUB handler."""

    def factory(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=FUB_TEST_BASE_URL, transport=httpx.MockTransport(handler))

    return factory
