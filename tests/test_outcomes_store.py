"""Tests for the local outcome store."""

from services.outcomes import (
    delete_outcome,
    get_all_outcomes,
    get_isa_user_ids,
    get_outcome,
    get_outcomes_for_appointments,
    get_stats,
    set_isa_user_ids,
    set_outcome,
    set_outcomes_bulk,
)


def test_get_outcome_miss_returns_none(db_conn):
    assert get_outcome(db_conn, 101) is None


def test_set_and_get_outcome(db_conn):
    assert set_outcome(db_conn, 101, 11, "Met- Signed/Converted", "Signed at kitchen table", "alice")

    outcome = get_outcome(db_conn, 101)
    assert outcome["appointment_id"] == 101
    assert outcome["outcome_id"] == 11
    assert outcome["outcome_name"] == "Met- Signed/Converted"
    assert outcome["notes"] == "Signed at kitchen table"
    assert outcome["updated_by"] == "alice"
    assert outcome["created_at"]
    assert outcome["updated_at"]


def test_set_outcome_upserts_by_appointment(db_conn):
    set_outcome(db_conn, 101, 11, "Met- Signed/Converted", "first note", "alice")
    set_outcome(db_conn, 101, 14, "Canceled/No Show", None, "bob")

    outcomes = get_all_outcomes(db_conn)
    assert len(outcomes) == 1
    assert outcomes[0]["outcome_id"] == 14
    assert outcomes[0]["outcome_name"] == "Canceled/No Show"
    assert outcomes[0]["updated_by"] == "bob"
    # Notes survive a re-entry without notes
    assert outcomes[0]["notes"] == "first note"

    set_outcome(db_conn, 101, 14, "Canceled/No Show", "second note")
    assert get_outcome(db_conn, 101)["notes"] == "second note"


def test_delete_outcome(db_conn):
    set_outcome(db_conn, 101, 11, "Met- Signed/Converted")

    assert delete_outcome(db_conn, 101) is True
    assert get_outcome(db_conn, 101) is None
    assert delete_outcome(db_conn, 101) is False


def test_get_outcomes_for_appointments(db_conn):
    set_outcome(db_conn, 101, 11, "Met- Signed/Converted")
    set_outcome(db_conn, 102, 14, "Canceled/No Show")
    set_outcome(db_conn, 103, 16, "Rescheduled")

    found = get_outcomes_for_appointments(db_conn, [101, 103, 999])

    assert sorted(o["appointment_id"] for o in found) == [101, 103]
    assert get_outcomes_for_appointments(db_conn, []) == []


def test_set_outcomes_bulk(db_conn):
    set_outcome(db_conn, 101, 11, "Met- Signed/Converted", "keep me")

    count = set_outcomes_bulk(
        db_conn,
        [
            {"appointment_id": 101, "outcome_id": 16, "outcome_name": "Rescheduled"},
            {"appointment_id": 102, "outcome_id": 14, "outcome_name": "Canceled/No Show", "updated_by": "bob"},
        ],
    )

    assert count == 2
    assert get_outcome(db_conn, 101)["outcome_name"] == "Rescheduled"
    assert get_outcome(db_conn, 101)["notes"] == "keep me"
    assert get_outcome(db_conn, 102)["updated_by"] == "bob"


def test_get_stats(db_conn):
    empty = get_stats(db_conn)
    assert empty == {"total": 0, "unique_outcomes": 0, "first_entry": None, "last_update": None}

    set_outcome(db_conn, 101, 11, "Met- Signed/Converted")
    set_outcome(db_conn, 102, 11, "Met- Signed/Converted")
    set_outcome(db_conn, 103, 16, "Rescheduled")

    stats = get_stats(db_conn)
    assert stats["total"] == 3
    assert stats["unique_outcomes"] == 2
    assert stats["first_entry"] is not None
    assert stats["last_update"] >= stats["first_entry"]


def test_isa_user_ids_replace_whole_set(db_conn):
    assert get_isa_user_ids(db_conn) == []

    assert set_isa_user_ids(db_conn, [3, 1, 3]) == [1, 3]
    assert get_isa_user_ids(db_conn) == [1, 3]

    set_isa_user_ids(db_conn, [2])
    assert get_isa_user_ids(db_conn) == [2]

    set_isa_user_ids(db_conn, [])
    assert get_isa_user_ids(db_conn) == []
