from decimal import Decimal

APP_NAME = "House Duties"
PROG_NAME = "house-duties"
APP_VERSION = "1.2.0"
DB_FILE = "house_duties.db"
DEFAULT_DATABASE_URL = f"sqlite:///{DB_FILE}"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

BILL_TYPES = ["RENT", "ELECTRICITY", "WATER", "GAS", "INTERNET", "PHONE", "OTHER"]
PAYMENT_STATUSES = ["PENDING", "PAID", "OVERDUE"]

BILL_TYPE_LABELS = {
    "RENT":        "Rent",
    "ELECTRICITY": "Electricity",
    "WATER":       "Water",
    "GAS":         "Gas",
    "INTERNET":    "Internet",
    "PHONE":       "Phone",
    "OTHER":       "Other",
}

STATUS_LABELS = {
    "PAID":    "✓ Paid",
    "PENDING": "○ Pending",
    "OVERDUE": "✗ Overdue",
}

# Allowed status moves; PAID is terminal.
STATUS_TRANSITIONS = {
    "PENDING": {"PAID", "OVERDUE"},
    "OVERDUE": {"PAID"},
    "PAID":    set(),
}

MIN_DUE_DAY = 1
MAX_DUE_DAY = 31
MIN_YEAR = 1900
MAX_YEAR = 2999

COMPARISON_MONTHS = 3
TREND_EPSILON = Decimal("0.01")

DEFAULT_SETTINGS = [
    ("currency_symbol", "$"),
]
