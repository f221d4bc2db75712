"""Tests for the Follow Up Boss client and pagination."""

import asyncio

import httpx
import pytest

from core.crm_client import CRMError, create_crm_client
from services.fub import (
    fetch_all_pages,
    get_appointment_outcomes,
    get_appointment_types,
    get_appointments,
    get_users,
)


def make_appointments(count):
    return [{"id": i, "type": "Showing", "outcome": None} for i in range(1, count + 1)]


def offsets(handler):
    return [int(r.url.params["offset"]) for r in handler.requests]


def test_fetch_all_pages_stops_on_short_page(fub_handler_factory, fub_client_factory):
    handler = fub_handler_factory(make_appointments(250), [])
    client = fub_client_factory(handler)

    items = asyncio.run(fetch_all_pages("/appointments", "appointments", client=client))

    assert len(items) == 250
    assert [item["id"] for item in items] == list(range(1, 251))
    assert offsets(handler) == [0, 100, 200]
    assert all(r.url.params["limit"] == "100" for r in handler.requests)


def test_fetch_all_pages_stops_on_empty_page(fub_handler_factory, fub_client_factory):
    handler = fub_handler_factory(make_appointments(200), [])
    client = fub_client_factory(handler)

    items = asyncio.run(fetch_all_pages("/appointments", "appointments", client=client))

    assert len(items) == 200
    assert offsets(handler) == [0, 100, 200]


def test_fetch_all_pages_respects_page_cap(fub_handler_factory, fub_client_factory):
    handler = fub_handler_factory(make_appointments(500), [])
    client = fub_client_factory(handler)

    items = asyncio.run(fetch_all_pages("/appointments", "appointments", client=client, max_pages=2))

    assert len(items) == 200
    assert offsets(handler) == [0, 100]


def test_first_page_failure_raises(fub_handler_factory, fub_client_factory):
    handler = fub_handler_factory([], [], fail_paths={"/appointments"})
    client = fub_client_factory(handler)

    with pytest.raises(CRMError):
        asyncio.run(get_appointments("2025-11-01", "2025-11-30", client=client))


def test_later_page_failure_returns_partial_result(fub_client_factory):
    appointments = make_appointments(100)

    def handler(request):
        if request.url.params["offset"] == "0":
            return httpx.Response(200, json={"appointments": appointments})
        return httpx.Response(503)

    items = asyncio.run(
        fetch_all_pages("/appointments", "appointments", client=fub_client_factory(handler))
    )

    assert items == appointments


def test_non_object_body_on_first_page_raises(fub_client_factory):
    def handler(request):
        return httpx.Response(200, json=[{"id": 1}])

    with pytest.raises(CRMError):
        asyncio.run(get_appointments("2025-11-01", "2025-11-30", client=fub_client_factory(handler)))


def test_non_object_body_on_later_page_returns_partial_result(fub_client_factory):
    appointments = make_appointments(100)

    def handler(request):
        if request.url.params["offset"] == "0":
            return httpx.Response(200, json={"appointments": appointments})
        return httpx.Response(200, json="maintenance")

    items = asyncio.run(
        fetch_all_pages("/appointments", "appointments", client=fub_client_factory(handler))
    )

    assert items == appointments


def test_non_list_collection_raises(fub_client_factory):
    def handler(request):
        return httpx.Response(200, json={"appointments": {"id": 1}})

    with pytest.raises(CRMError):
        asyncio.run(fetch_all_pages("/appointments", "appointments", client=fub_client_factory(handler)))


def test_catalogs_with_non_object_body_return_empty_lists(fub_client_factory):
    def handler(request):
        return httpx.Response(200, json=[{"id": 11, "name": "Met- Signed/Converted"}])

    client = fub_client_factory(handler)

    assert asyncio.run(get_users(client=client)) == []
    assert asyncio.run(get_appointment_outcomes(client=client)) == []
    assert asyncio.run(get_appointment_types(client=client)) == []


def test_get_appointments_passes_filters(fub_handler_factory, fub_client_factory):
    handler = fub_handler_factory([], [])
    client = fub_client_factory(handler)

    asyncio.run(get_appointments("2025-11-01", "2025-11-30", user_id=7, client=client))

    params = handler.requests[0].url.params
    assert params["start"] == "2025-11-01"
    assert params["end"] == "2025-11-30"
    assert params["userId"] == "7"


def test_catalog_failures_return_empty_lists(fub_handler_factory, fub_client_factory):
    handler = fub_handler_factory(
        [], [], fail_paths={"/users", "/appointmentOutcomes", "/appointmentTypes"}
    )
    client = fub_client_factory(handler)

    assert asyncio.run(get_users(client=client)) == []
    assert asyncio.run(get_appointment_outcomes(client=client)) == []
    assert asyncio.run(get_appointment_types(client=client)) == []


def test_catalogs(fub_handler_factory, fub_client_factory):
    outcomes = [{"id": 11, "name": "Met- Signed/Converted"}]
    types = [{"id": 1, "name": "Listing Appointment"}]
    client = fub_client_factory(fub_handler_factory([], [], outcomes=outcomes, types=types))

    assert asyncio.run(get_appointment_outcomes(client=client)) == outcomes
    assert asyncio.run(get_appointment_types(client=client)) == types


def test_crm_client_sends_auth_and_system_headers(fub_handler_factory):
    handler = fub_handler_factory([], [{"id": 1, "name": "Alice Agent"}])
    client = create_crm_client(transport=httpx.MockTransport(handler))

    users = asyncio.run(get_users(client=client))

    request = handler.requests[0]
    assert users == [{"id": 1, "name": "Alice Agent"}]
    assert request.headers["Authorization"].startswith("Basic ")
    assert request.headers["X-System"] == "FUBAnalytics"
    assert request.headers["X-System-Key"]
