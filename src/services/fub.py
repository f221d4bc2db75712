"""
Users, appointments and appointment catalogs from the Follow Up Boss API.
"""

import httpx

from core.config import MAX_PAGES, PAGE_SIZE
from core.crm_client import CRMError, get_crm_client
from models.appointments import Appointment, User


def read_collection(response: httpx.Response, collection_key: str) -> list[dict]:
    """
    Pull the item list out of a FUB collection response.

    Raises ValueError when the body is not a JSON object with a list under
    collection_key (a missing or null key counts as empty).
    """
    payload = response.json()
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    items = payload.get(collection_key) or []
    if not isinstance(items, list):
        raise ValueError(f"Expected a list under '{collection_key}', got {type(items).__name__}")
    return items


async def fetch_all_pages(
    endpoint: str,
    collection_key: str,
    params: dict | None = None,
    client: httpx.AsyncClient | None = None,
    max_pages: int = MAX_PAGES,
) -> list[dict]:
    """
    Fetch every page of a FUB collection endpoint.

    Uses limit/offset pagination and stops on an empty page, a short page,
    or after max_pages. A failure on the first page raises CRMError; a
    failure after some items were fetched is logged and the partial result
    is returned.
    """
    client = client or get_crm_client()
    all_results: list[dict] = []
    offset = 0

    for _ in range(max_pages):
        try:
            response = await client.get(
                endpoint, params={**(params or {}), "limit": PAGE_SIZE, "offset": offset}
            )
            response.raise_for_status()
            items = read_collection(response, collection_key)
        except (httpx.HTTPError, ValueError) as e:
            if not all_results:
                raise CRMError(f"Error fetching {endpoint}: {e}") from e
            print(f"  Error fetching {endpoint} at offset {offset}: {e}")
            break

        if not items:
            break

        all_results.extend(items)
        print(f"{endpoint}: fetched {len(all_results)} items so far...")

        if len(items) < PAGE_SIZE:
            break
        offset += PAGE_SIZE

    print(f"{endpoint}: total {len(all_results)} items")
    return all_results


async def get_appointments(
    start_date: str,
    end_date: str,
    user_id: int | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[Appointment]:
    """
    Fetch appointments in a date range, optionally for one agent.

    Raises CRMError if the API cannot be reached.
    """
    params: dict = {"start": start_date, "end": end_date}
    if user_id:
        params["userId"] = user_id
    return await fetch_all_pages("/appointments", "appointments", params, client=client)


async def get_users(client: httpx.AsyncClient | None = None) -> list[User]:
    """Fetch all users (agents). Returns an empty list on failure."""
    try:
        return await fetch_all_pages("/users", "users", client=client)
    except CRMError as e:
        print(f"  Error fetching users: {e}")
        return []


async def _get_catalog(
    endpoint: str, collection_key: str, client: httpx.AsyncClient | None
) -> list[dict]:
    """Fetch a small unpaginated catalog endpoint."""
    client = client or get_crm_client()
    try:
        response = await client.get(endpoint)
        response.raise_for_status()
        return read_collection(response, collection_key)
    except (httpx.HTTPError, ValueError) as e:
        print(f"  Error fetching {endpoint}: {e}")
        return []


async def get_appointment_types(client: httpx.AsyncClient | None = None) -> list[dict]:
    """Fetch the appointment type catalog. Returns an empty list on failure."""
    return await _get_catalog("/appointmentTypes", "appointmentTypes", client)


async def get_appointment_outcomes(client: httpx.AsyncClient | None = None) -> list[dict]:
    """Fetch the appointment outcome catalog. Returns an empty list on failure."""
    return await _get_catalog("/appointmentOutcomes", "appointmentOutcomes", client)
