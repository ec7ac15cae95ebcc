"""Delivery calendar rules.

Sunday is never a delivery day. Saturday is a delivery day only for the
6-day (Mon-Sat) cadence. Monday-Friday are always delivery days.
"""
from datetime import date

from delivery.domain.Order import normalize_duration
from delivery.utilities.dates import to_date

__all__ = ["is_valid_delivery_day"]

SATURDAY = 5
SUNDAY = 6


def is_valid_delivery_day(day: date, duration) -> bool:
    weekday = to_date(day).weekday()
    if weekday == SUNDAY:
        return False
    if weekday == SATURDAY:
        return normalize_duration(duration) == 6
    return True
