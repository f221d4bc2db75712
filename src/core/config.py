"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_list(name: str, default: list[str]) -> list[str]:
    """Read a comma-separated list from the environment."""
    raw = os.environ.get(name, "")
    if not raw.strip():
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("OUTCOMES_DB_PATH", str(PROJECT_ROOT / "data" / "db" / "outcomes.db"))
)
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# FOLLOW UP BOSS API
# =============================================================================

FUB_API_KEY = os.environ.get("FUB_API_KEY", "")
FUB_API_BASE_URL = os.environ.get("FUB_API_BASE_URL", "https://api.followupboss.com/v1")
FUB_SYSTEM_NAME = "FUBAnalytics"
FUB_SYSTEM_KEY = os.environ.get("FUB_SYSTEM_KEY", "fub-analytics-dashboard")
FUB_TIMEOUT_SECONDS = float(os.environ.get("FUB_TIMEOUT_SECONDS", "30"))

PAGE_SIZE = 100
MAX_PAGES = 50

# =============================================================================
# OUTCOME CATEGORIES
# =============================================================================

NO_OUTCOME = "No Outcome"
UNKNOWN_TYPE = "Unknown"
UNKNOWN_AGENT = "Unknown Agent"

OUTCOME_CATEGORIES = ("successful", "nurture", "failed")

# Checked in order; the first category with a matching keyword wins.
# Anything unmatched falls through to "failed".
OUTCOME_CATEGORY_KEYWORDS = {
    "successful": ["signed", "converted", "writing offer", "scholarship"],
    "nurture": ["likely opportunity", "showed homes", "rescheduled"],
}

# =============================================================================
# DASHBOARD TYPES
# =============================================================================

DASHBOARD_SALES = "sales"
DASHBOARD_ISA = "isa"

DASHBOARD_APPOINTMENT_TYPES = {
    DASHBOARD_SALES: _env_list(
        "SALES_APPOINTMENT_TYPES",
        [
            "Listing Appointment",
            "Buyer Appointment",
            "Buyer Consultation",
            "Listing Consultation",
            "Showing",
        ],
    ),
    DASHBOARD_ISA: _env_list(
        "ISA_APPOINTMENT_TYPES",
        [
            "ISA Appointment",
            "Phone Consultation",
            "Discovery Call",
        ],
    ),
}

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

METRICS_REPORT_TYPE = "metrics_report"
DEFAULT_RANGE_DAYS = 30

SUMMARY_ROW_LABELS = [
    "Start date",
    "End date",
    "Dashboard",
    "Total appointments",
    "Appointments with outcome",
    "Successful",
    "Nurture",
    "Failed",
    "Success rate (%)",
    "Nurture rate (%)",
    "Failed rate (%)",
]

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "5000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
