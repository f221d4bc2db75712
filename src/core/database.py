"""
SQLite database operations for local outcomes, ISA users and exported reports.
"""

import sqlite3
from datetime import date
from pathlib import Path

from core.config import DB_PATH

SCHEMA = """
    CREATE TABLE IF NOT EXISTS appointment_outcomes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        appointment_id INTEGER UNIQUE NOT NULL,
        outcome_id INTEGER,
        outcome_name TEXT,
        notes TEXT,
        updated_by TEXT,
        updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );

    CREATE INDEX IF NOT EXISTS idx_outcomes_appointment_id
        ON appointment_outcomes(appointment_id);
    CREATE INDEX IF NOT EXISTS idx_outcomes_outcome_id
        ON appointment_outcomes(outcome_id);

    CREATE TABLE IF NOT EXISTS isa_users (
        user_id INTEGER PRIMARY KEY,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS reports (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        type TEXT NOT NULL CHECK(type IN ('metrics_report')),
        name TEXT UNIQUE NOT NULL,
        start_date TEXT,
        end_date TEXT,
        dashboard_type TEXT,
        create_date TEXT DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        query TEXT,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL,
        appointments_count INTEGER
    );

    CREATE TABLE IF NOT EXISTS api_request_details (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT NOT NULL,
        detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'upstream_error', 'warning')),
        message TEXT NOT NULL,
        FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
    );

    CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp);
    CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code);
    CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id);
"""


def get_connection(db_path: Path = DB_PATH) -> sqlite3.Connection:
    """
    Get a database connection.

    Rows come back as sqlite3.Row so callers can convert them with dict().
    The connection may be handed to FastAPI's threadpool, so the same-thread
    check is disabled.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_database(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes if they don't exist."""
    conn.executescript(SCHEMA)
    conn.commit()


def generate_report_name(report_type: str, as_of_date: date, conn: sqlite3.Connection) -> str:
    """
    Generate unique report name with auto-incremented suffix.

    Example: metrics_report_2025_11_07_a, metrics_report_2025_11_07_b
    """
    base_pattern = f"{report_type}_{as_of_date.strftime('%Y_%m_%d')}_"

    cursor = conn.cursor()
    cursor.execute(
        "SELECT name FROM reports WHERE name LIKE ? ORDER BY name DESC",
        (f"{base_pattern}%",),
    )
    existing = cursor.fetchall()

    if not existing:
        return f"{base_pattern}a"

    # Find the highest suffix
    highest_suffix = "a"
    for (name,) in existing:
        suffix = name.replace(base_pattern, "")
        if suffix and suffix > highest_suffix:
            highest_suffix = suffix

    next_suffix = chr(ord(highest_suffix) + 1)
    return f"{base_pattern}{next_suffix}"


def create_report_record(
    conn: sqlite3.Connection,
    report_type: str,
    report_name: str,
    start_date: date,
    end_date: date,
    dashboard_type: str | None = None,
) -> int:
    """Create report record and return report_id."""
    cursor = conn.cursor()
    cursor.execute(
        """
        INSERT INTO reports (type, name, start_date, end_date, dashboard_type)
        VALUES (?, ?, ?, ?, ?)
        """,
        (report_type, report_name, start_date.isoformat(), end_date.isoformat(), dashboard_type),
    )
    conn.commit()
    return cursor.lastrowid
