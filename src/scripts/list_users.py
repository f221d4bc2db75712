#!/usr/bin/env python3
"""
List all Follow Up Boss users and whether they are designated ISAs.

Usage:
    uv run python src/scripts/list_users.py
"""

import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH
from core.crm_client import close_crm_client
from core.database import get_connection, init_database
from services.fub import get_users
from services.outcomes import get_isa_user_ids


async def main():
    """List all users with their ISA designation."""
    conn = get_connection(DB_PATH)
    init_database(conn)
    isa_user_ids = set(get_isa_user_ids(conn))
    conn.close()

    print("Fetching users from Follow Up Boss...\n")
    try:
        users = await get_users()
    finally:
        await close_crm_client()

    print(f"Found {len(users)} users\n")
    print("=" * 80)

    for user in users:
        print(f"\nUser: {user.get('name')}")
        print(f"  Email: {user.get('email')}")
        print(f"  ID: {user.get('id')}")
        if user.get("role"):
            print(f"  Role: {user['role']}")
        if user.get("id") in isa_user_ids:
            print("  ISA: yes")
        print("-" * 80)

    print("\nDone!")


if __name__ == "__main__":
    asyncio.run(main())
