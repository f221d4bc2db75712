"""
Local appointment outcome tracking.

Outcomes recorded here shadow the outcome stored in Follow Up Boss, so
agents can log results without FUB sending notification emails. Nothing in
this module writes to FUB.
"""

import sqlite3
from collections.abc import Iterable

from models.appointments import OutcomeOverride, OutcomeStats

UPSERT_OUTCOME_SQL = """
    INSERT INTO appointment_outcomes (
        appointment_id, outcome_id, outcome_name, notes, updated_by, updated_at
    ) VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
    ON CONFLICT(appointment_id) DO UPDATE SET
        outcome_id = excluded.outcome_id,
        outcome_name = excluded.outcome_name,
        notes = COALESCE(excluded.notes, notes),
        updated_by = excluded.updated_by,
        updated_at = CURRENT_TIMESTAMP
"""


def get_outcome(conn: sqlite3.Connection, appointment_id: int) -> OutcomeOverride | None:
    """Get the local outcome for an appointment, or None."""
    row = conn.execute(
        "SELECT * FROM appointment_outcomes WHERE appointment_id = ?",
        (appointment_id,),
    ).fetchone()
    return dict(row) if row else None


def get_all_outcomes(conn: sqlite3.Connection) -> list[OutcomeOverride]:
    """Get all local outcomes."""
    rows = conn.execute("SELECT * FROM appointment_outcomes ORDER BY appointment_id").fetchall()
    return [dict(row) for row in rows]


def get_outcomes_for_appointments(
    conn: sqlite3.Connection, appointment_ids: Iterable[int]
) -> list[OutcomeOverride]:
    """Get local outcomes for a list of appointment IDs."""
    ids = list(appointment_ids)
    if not ids:
        return []

    placeholders = ",".join("?" for _ in ids)
    rows = conn.execute(
        f"SELECT * FROM appointment_outcomes WHERE appointment_id IN ({placeholders})",
        ids,
    ).fetchall()
    return [dict(row) for row in rows]


def set_outcome(
    conn: sqlite3.Connection,
    appointment_id: int,
    outcome_id: int,
    outcome_name: str,
    notes: str | None = None,
    updated_by: str | None = None,
) -> bool:
    """
    Insert or update the local outcome for an appointment.

    Re-entering an outcome without notes keeps the notes already stored.
    """
    cursor = conn.execute(
        UPSERT_OUTCOME_SQL, (appointment_id, outcome_id, outcome_name, notes, updated_by)
    )
    conn.commit()
    return cursor.rowcount > 0


def set_outcomes_bulk(conn: sqlite3.Connection, outcomes: list[dict]) -> int:
    """Upsert many outcomes in a single transaction. Returns the number written."""
    with conn:
        conn.executemany(
            UPSERT_OUTCOME_SQL,
            [
                (
                    item["appointment_id"],
                    item["outcome_id"],
                    item["outcome_name"],
                    item.get("notes"),
                    item.get("updated_by"),
                )
                for item in outcomes
            ],
        )
    return len(outcomes)


def delete_outcome(conn: sqlite3.Connection, appointment_id: int) -> bool:
    """Delete the local outcome (revert to FUB's outcome). False if none existed."""
    cursor = conn.execute(
        "DELETE FROM appointment_outcomes WHERE appointment_id = ?",
        (appointment_id,),
    )
    conn.commit()
    return cursor.rowcount > 0


def get_stats(conn: sqlite3.Connection) -> OutcomeStats:
    """Count, distinct outcomes and first/last timestamps of local outcomes."""
    row = conn.execute(
        """
        SELECT
            COUNT(*) AS total,
            COUNT(DISTINCT outcome_id) AS unique_outcomes,
            MIN(created_at) AS first_entry,
            MAX(updated_at) AS last_update
        FROM appointment_outcomes
        """
    ).fetchone()
    return dict(row)


# =============================================================================
# ISA USERS
# =============================================================================


def get_isa_user_ids(conn: sqlite3.Connection) -> list[int]:
    """Get the IDs of users designated as Inside Sales Associates."""
    rows = conn.execute("SELECT user_id FROM isa_users ORDER BY user_id").fetchall()
    return [row["user_id"] for row in rows]


def set_isa_user_ids(conn: sqlite3.Connection, user_ids: Iterable[int]) -> list[int]:
    """Replace the ISA designation with exactly these users."""
    unique_ids = sorted(set(user_ids))
    with conn:
        conn.execute("DELETE FROM isa_users")
        conn.executemany(
            "INSERT INTO isa_users (user_id) VALUES (?)",
            [(user_id,) for user_id in unique_ids],
        )
    return unique_ids
