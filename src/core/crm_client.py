"""
Follow Up Boss HTTP client setup with lazy initialization.
"""

import httpx

from core.config import (
    FUB_API_BASE_URL,
    FUB_API_KEY,
    FUB_SYSTEM_KEY,
    FUB_SYSTEM_NAME,
    FUB_TIMEOUT_SECONDS,
)


class CRMError(Exception):
    """Raised when the Follow Up Boss API cannot be reached or rejects a request."""


_crm_client: httpx.AsyncClient | None = None


def create_crm_client(**kwargs) -> httpx.AsyncClient:
    """
    Build an AsyncClient for the FUB API.

    FUB uses HTTP basic auth with the API key as username and an empty
    password. Extra kwargs (e.g. transport) are passed through to httpx.
    """
    return httpx.AsyncClient(
        base_url=FUB_API_BASE_URL,
        auth=(FUB_API_KEY, ""),
        headers={
            "Content-Type": "application/json",
            "X-System": FUB_SYSTEM_NAME,
            "X-System-Key": FUB_SYSTEM_KEY,
        },
        timeout=FUB_TIMEOUT_SECONDS,
        **kwargs,
    )


def get_crm_client() -> httpx.AsyncClient:
    """Get or create the FUB client (lazy initialization)."""
    global _crm_client
    if _crm_client is None or _crm_client.is_closed:
        _crm_client = create_crm_client()
    return _crm_client


async def close_crm_client() -> None:
    """Close the shared client if one was created."""
    global _crm_client
    if _crm_client is not None:
        await _crm_client.aclose()
        _crm_client = None
