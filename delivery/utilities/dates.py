"""Date conversion at the boundaries.

Everything inside the package works on ``datetime.date``. Strings coming from
requests or stored documents are converted here, and only here.
"""
import re
from datetime import date, datetime
from typing import Any, Optional

from delivery.domain.errors import InvalidDateFormat
from delivery.utilities.constants import ISO_DATE_FORMAT, LEGACY_DATE_FORMAT, MONTH_FORMAT

ISO_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
LEGACY_DATE_PATTERN = re.compile(r'^\d{2}\.\d{2}\.\d{4}$')
MONTH_PATTERN = re.compile(r'^\d{4}-\d{2}$')


def to_date(value: Any) -> date:
    """Normalize a date or datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def parse_iso_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string (ledger operations)."""
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        raise InvalidDateFormat(f"Invalid date format: {value!r} (expected YYYY-MM-DD)")
    try:
        return datetime.strptime(value, ISO_DATE_FORMAT).date()
    except ValueError:
        raise InvalidDateFormat(f"Invalid calendar date: {value!r}") from None


def parse_legacy_date(value: str) -> date:
    """Parse ``DD.MM.YYYY`` (order update paths), falling back to ISO."""
    if isinstance(value, str) and LEGACY_DATE_PATTERN.match(value):
        try:
            return datetime.strptime(value, LEGACY_DATE_FORMAT).date()
        except ValueError:
            raise InvalidDateFormat(f"Invalid calendar date: {value!r}") from None
    if isinstance(value, str) and ISO_DATE_PATTERN.match(value):
        return parse_iso_date(value)
    raise InvalidDateFormat(f"Invalid date format: {value!r} (expected DD.MM.YYYY)")


def parse_stored_date(value: Any) -> Optional[date]:
    """Read a date field from a stored document (string, date, datetime or empty)."""
    if value in (None, ""):
        return None
    if isinstance(value, (date, datetime)):
        return to_date(value)
    if isinstance(value, str):
        # Stored timestamps may carry a time part: keep the calendar day
        head = value[:10]
        if ISO_DATE_PATTERN.match(head):
            return parse_iso_date(head)
        return parse_legacy_date(value)
    raise InvalidDateFormat(f"Unsupported stored date: {value!r}")


def parse_month(value: str) -> tuple[int, int]:
    if not isinstance(value, str) or not MONTH_PATTERN.match(value):
        raise InvalidDateFormat(f"Invalid month format: {value!r} (expected YYYY-MM)")
    parsed = datetime.strptime(value, MONTH_FORMAT)
    return parsed.year, parsed.month


def format_iso(day: date) -> str:
    return day.strftime(ISO_DATE_FORMAT)


def format_legacy(day: date) -> str:
    return day.strftime(LEGACY_DATE_FORMAT)


def compound_key(client_id: str, day: date) -> str:
    """Document id shared by cancellations and selections: ``clientId_YYYY-MM-DD``."""
    return f"{client_id}_{format_iso(day)}"


__all__ = [
    'to_date', 'parse_iso_date', 'parse_legacy_date', 'parse_stored_date', 'parse_month',
    'format_iso', 'format_legacy', 'compound_key',
]
