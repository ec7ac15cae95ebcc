from typing import Final

ISO_DATE_FORMAT: Final[str] = "%Y-%m-%d"
LEGACY_DATE_FORMAT: Final[str] = "%d.%m.%Y"
MONTH_FORMAT: Final[str] = "%Y-%m"

# Weekly cadences: 5 = Mon-Fri, 6 = Mon-Sat
CADENCES: Final[tuple[int, ...]] = (5, 6)
DEFAULT_DAYS_COUNT: Final[dict[int, int]] = {5: 20, 6: 24}

# Days from "today" to the first delivery that may still be changed, keyed by
# date.weekday() (0=Monday .. 6=Sunday). Mirrors the production lead time.
CUTOFF_OFFSETS: Final[dict[int, int]] = {
    0: 4,  # Monday -> Friday
    1: 4,  # Tuesday -> Saturday
    2: 5,  # Wednesday -> Monday
    3: 5,  # Thursday -> Tuesday
    4: 5,  # Friday -> Wednesday
    5: 5,  # Saturday -> Thursday
    6: 4,  # Sunday -> Thursday
}
MODIFICATION_HORIZON_DAYS: Final[int] = 13

# Max dates per cancel call, below the two-week window's full day count
MAX_DATES_PER_CANCEL: Final[dict[int, int]] = {5: 10, 6: 12}

ACTIVE_ORDER_STATUSES: Final[tuple[str, ...]] = ("pending", "approved")
APPROVED_STATUS: Final[str] = "approved"

# Collections
ORDERS: Final[str] = "orders"
CANCELLATIONS: Final[str] = "cancelledDeliveries"
SELECTIONS: Final[str] = "mealSelections"
CLIENTS: Final[str] = "clients"
DAILY_MENUS: Final[str] = "dailyMeals"

DEFAULT_BREAKFAST_OPTION: Final[str] = "A"
DEFAULT_LUNCH_OPTION: Final[str] = "A"
BREAKFAST_OPTIONS: Final[tuple[str, ...]] = ("A", "B")
LUNCH_OPTIONS: Final[tuple[str, ...]] = ("A", "B", "C")
UNKNOWN_CLIENT_NAME: Final[str] = "Unknown"
UNKNOWN_PACKAGE: Final[str] = "UNKNOWN"
