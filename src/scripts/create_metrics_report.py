#!/usr/bin/env python3
"""
Create an Excel appointment metrics report from Follow Up Boss.

Fetches appointments and users, merges local outcomes, aggregates them
for the chosen dashboard and writes a workbook with Summary, By Type,
By Outcome, Type x Outcome and By Agent sheets.

Usage:
    uv run python src/scripts/create_metrics_report.py --start 2025-11-01 --end 2025-11-30
    uv run python src/scripts/create_metrics_report.py --dashboard-type isa
"""

import argparse
import asyncio
import sys
import traceback
from datetime import date, datetime, timedelta
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import (
    DASHBOARD_APPOINTMENT_TYPES,
    DB_PATH,
    DEFAULT_RANGE_DAYS,
    METRICS_REPORT_TYPE,
    OUTPUT_DIR,
)
from core.crm_client import close_crm_client
from core.database import (
    create_report_record,
    generate_report_name,
    get_connection,
    init_database,
)
from services.metrics import fetch_metrics
from services.reports import create_metrics_excel_report


# =============================================================================
# DATE UTILITIES
# =============================================================================


def get_report_date_range(start_str: str | None, end_str: str | None) -> tuple[date, date]:
    """
    Calculate date range for the report.

    Args:
        start_str: Optional start date (YYYY-MM-DD).
        end_str: Optional end date (YYYY-MM-DD). Uses today if None.

    Returns:
        Tuple of (start_date, end_date); start defaults to 30 days before end.
    """
    end_date = datetime.strptime(end_str, "%Y-%m-%d").date() if end_str else date.today()
    if start_str:
        start_date = datetime.strptime(start_str, "%Y-%m-%d").date()
    else:
        start_date = end_date - timedelta(days=DEFAULT_RANGE_DAYS)

    if start_date > end_date:
        raise ValueError(f"Start date {start_date} is after end date {end_date}")
    return start_date, end_date


# =============================================================================
# MAIN
# =============================================================================


async def main(
    start_str: str | None = None,
    end_str: str | None = None,
    user_id: int | None = None,
    dashboard_type: str | None = None,
):
    """Main entry point."""
    conn = get_connection(DB_PATH)
    try:
        init_database(conn)

        # 1. Calculate date range
        start_date, end_date = get_report_date_range(start_str, end_str)
        print(f"Generating metrics report for {start_date} to {end_date}")
        if dashboard_type:
            print(f"Dashboard: {dashboard_type}")

        # 2. Fetch and aggregate
        metrics = await fetch_metrics(
            conn, start_date.isoformat(), end_date.isoformat(), user_id, dashboard_type
        )
        summary = metrics["summary"]
        categories = metrics["outcome_categories"]
        print(f"\nTotal appointments: {summary['total_appointments']}")
        print(f"  Successful: {categories['successful']} ({summary['success_rate']}%)")
        print(f"  Nurture:    {categories['nurture']} ({summary['nurture_rate']}%)")
        print(f"  Failed:     {categories['failed']} ({summary['failed_rate']}%)")
        print(f"Local outcomes applied: {metrics['metadata']['overrides_applied']}")

        # 3. Create report record
        report_name = generate_report_name(METRICS_REPORT_TYPE, end_date, conn)
        report_id = create_report_record(
            conn, METRICS_REPORT_TYPE, report_name, start_date, end_date, dashboard_type
        )
        print(f"\nCreated report: {report_name} (ID: {report_id})")

        # 4. Generate Excel file
        output_path = OUTPUT_DIR / "reports" / "metrics" / f"{report_name}.xlsx"
        create_metrics_excel_report(metrics, output_path)

        print("\nDone!")

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise

    finally:
        conn.close()
        await close_crm_client()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate appointment metrics report")
    parser.add_argument("--start", help="Start date (YYYY-MM-DD). Defaults to 30 days before end.")
    parser.add_argument("--end", help="End date (YYYY-MM-DD). Defaults to today.")
    parser.add_argument("--user-id", type=int, help="Only include this agent's appointments.")
    parser.add_argument(
        "--dashboard-type",
        choices=sorted(DASHBOARD_APPOINTMENT_TYPES),
        help="Restrict to the sales or ISA appointment types. Defaults to all appointments.",
    )
    args = parser.parse_args()

    asyncio.run(main(args.start, args.end, args.user_id, args.dashboard_type))
