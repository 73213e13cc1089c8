import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
EXPORT_FILENAME_BASE = os.getenv("EXPORT_FILENAME", "inventory_export")

# --- Hosted Database (Supabase REST) ---
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
INVENTORY_TABLE = os.getenv("INVENTORY_TABLE", "inventory_data")
CHAT_TABLE = os.getenv("CHAT_TABLE", "chat_history")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))

# --- Logging ---
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
LOG_FILENAME = os.getenv("LOG_FILENAME", "smartmed.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
# Chatty third-party loggers held at WARNING so request lines do not flood the console.
QUIET_LOGGERS = ("urllib3", "requests")

# --- Session ---
# Authentication is mocked: the owner of all reads and writes comes from here.
USER_ID = os.getenv("SMARTMED_USER_ID", "local-user")

# --- Shared Business Logic ---
EXPIRY_UNITS = ("days", "months")


def parse_expiry_unit(value: str) -> str:
    """Accepts 'days' or 'months' in any case; anything else is a config error."""
    unit = value.strip().lower()
    if unit not in EXPIRY_UNITS:
        raise ValueError(f"EXPIRY_UNIT must be one of {EXPIRY_UNITS}, got '{value}'.")
    return unit


# Notifications use this window; the dashboard card keeps its own month window.
EXPIRY_WINDOW = int(os.getenv("EXPIRY_WINDOW", "30"))
EXPIRY_UNIT = parse_expiry_unit(os.getenv("EXPIRY_UNIT", "days"))
DASHBOARD_EXPIRY_MONTHS = int(os.getenv("DASHBOARD_EXPIRY_MONTHS", "3"))
LOW_STOCK_ALERT_LIMIT = 5
TOP_CATEGORY_LIMIT = 5

DEFAULT_ITEM_NAME = "Unnamed Item"
DEFAULT_CATEGORY = "Uncategorized"

# Column order of the downloadable CSV export.
EXPORT_COLUMNS = [
    "id",
    "name",
    "category",
    "currentStock",
    "minimumStock",
    "expiryDate",
    "unitPrice",
]
