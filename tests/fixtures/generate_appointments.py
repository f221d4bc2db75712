#!/usr/bin/env python3
"""
Generate Follow Up Boss style users and appointments for local testing.

Writes tests/fixtures/appointments.json when run directly; the test suite
imports generate_users/generate_appointments instead.
"""

import json
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path

from faker import Faker

OUTPUT_FILE = Path(__file__).parent / "appointments.json"

# Appointment types (mix of sales, ISA and types on neither dashboard)
APPOINTMENT_TYPES = [
    "Listing Appointment",
    "Buyer Appointment",
    "Buyer Consultation",
    "Listing Consultation",
    "Showing",
    "ISA Appointment",
    "Phone Consultation",
    "Discovery Call",
    "Open House",
    None,
]

# Outcomes as they appear in FUB (some with the "Met- " prefix)
APPOINTMENT_OUTCOMES = [
    (1, "Met- Signed/Converted"),
    (2, "Met- Writing Offer"),
    (3, "Scholarship Accepted"),
    (4, "Met- Likely Opportunity"),
    (5, "Met- Showed Homes"),
    (6, "Rescheduled"),
    (7, "Met- Nurture"),
    (8, "Met- Unlikely Opportunity"),
    (9, "Agent Incomplete"),
    (10, "Canceled/No Show"),
    (None, None),
]


def generate_users(count: int = 8, seed: int = 42) -> list[dict]:
    """Generate FUB users with sequential IDs starting at 1."""
    fake = Faker()
    Faker.seed(seed)
    return [
        {
            "id": user_id,
            "name": fake.name(),
            "email": fake.email(),
            "role": random.Random(seed + user_id).choice(["Agent", "Broker", "Lender"]),
        }
        for user_id in range(1, count + 1)
    ]


def generate_appointments(
    count: int = 200,
    users: list[dict] | None = None,
    seed: int = 42,
    start: datetime | None = None,
) -> list[dict]:
    """
    Generate appointments spread over the 30 days after start.

    Roughly a third are assigned through an agent invitee, the rest only
    through createdById, and a few reference a user that doesn't exist.
    """
    fake = Faker()
    Faker.seed(seed)
    rng = random.Random(seed)
    users = users or generate_users(seed=seed)
    start = start or datetime(2025, 11, 1, tzinfo=timezone.utc)

    appointments = []
    for appointment_id in range(1, count + 1):
        begins = start + timedelta(days=rng.randint(0, 29), hours=rng.randint(8, 18))
        ends = begins + timedelta(minutes=rng.choice([30, 60, 90]))
        outcome_id, outcome_name = rng.choice(APPOINTMENT_OUTCOMES)
        creator_id = rng.choice(users)["id"] if rng.random() > 0.05 else 999

        invitees = [{"personId": rng.randint(1000, 9999), "name": fake.name()}]
        if rng.random() < 0.35:
            invitees.append({"userId": rng.choice(users)["id"]})

        appointments.append(
            {
                "id": appointment_id,
                "title": f"{fake.last_name()} - {fake.street_address()}",
                "start": begins.isoformat(),
                "end": ends.isoformat(),
                "type": rng.choice(APPOINTMENT_TYPES),
                "outcome": outcome_name,
                "outcomeId": outcome_id,
                "createdById": creator_id,
                "invitees": invitees,
            }
        )
    return appointments


def main():
    print("Generating users and appointments...")
    users = generate_users()
    appointments = generate_appointments(users=users)

    OUTPUT_FILE.write_text(json.dumps({"users": users, "appointments": appointments}, indent=2))

    print(f"\nUsers generated: {len(users)}")
    print(f"Appointments generated: {len(appointments)}")
    print(f"\nSaved to: {OUTPUT_FILE}")


if __name__ == "__main__":
    main()
