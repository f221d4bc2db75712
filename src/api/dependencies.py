"""FastAPI dependencies for shared resources."""

import sqlite3
from collections.abc import Iterator

import httpx

from core.crm_client import get_crm_client
from core.database import get_connection


def get_db() -> Iterator[sqlite3.Connection]:
    """Open a database connection for the duration of a request."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


def get_crm() -> httpx.AsyncClient:
    """Shared Follow Up Boss client."""
    return get_crm_client()
