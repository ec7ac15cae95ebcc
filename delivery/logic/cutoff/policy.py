"""Cutoff policy: which delivery dates may still be skipped, restored or re-addressed.

The first modifiable date is "today + offset", the offset depending on
today's weekday (production lead time). The window spans two weeks from
there.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Union

from delivery.domain.errors import InvalidDeliveryDay, OutsideModificationWindow
from delivery.logic.calendar.rules import is_valid_delivery_day
from delivery.utilities.constants import CUTOFF_OFFSETS, MODIFICATION_HORIZON_DAYS
from delivery.utilities.dates import format_iso, to_date

__all__ = [
    "first_modifiable_date", "last_modifiable_date", "is_modifiable", "check_modifiable",
    "can_restore", "effective_change_date",
]

Now = Union[date, datetime]


def first_modifiable_date(now: Now) -> date:
    today = to_date(now)
    return today + timedelta(days=CUTOFF_OFFSETS[today.weekday()])


def last_modifiable_date(now: Now) -> date:
    return first_modifiable_date(now) + timedelta(days=MODIFICATION_HORIZON_DAYS)


def check_modifiable(target: date, now: Now, duration) -> None:
    """Raise the matching ledger error when ``target`` can no longer be changed."""
    target = to_date(target)
    if not is_valid_delivery_day(target, duration):
        raise InvalidDeliveryDay(
            f"{format_iso(target)} is not a delivery day for the {int(duration)}-day cadence")
    today = to_date(now)
    first = first_modifiable_date(now)
    last = last_modifiable_date(now)
    if target <= today or target < first or target > last:
        raise OutsideModificationWindow(
            f"{format_iso(target)} is outside the modification window "
            f"{format_iso(first)} .. {format_iso(last)}")


def is_modifiable(target: date, now: Now, duration) -> bool:
    try:
        check_modifiable(target, now, duration)
    except (InvalidDeliveryDay, OutsideModificationWindow):
        return False
    return True


def can_restore(target: date, now: Now, duration) -> bool:
    """A skipped day can be restored only while it is still inside the window."""
    return is_modifiable(target, now, duration)


def effective_change_date(now: Now) -> date:
    """Date from which a delivery address change applies."""
    return first_modifiable_date(now)
