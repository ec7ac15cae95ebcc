"""Schedule calculator.

Turns (start date, cadence, delivery count) into a subscription end date by
walking the calendar and counting valid delivery days only. The 5-day and
6-day cadences are not simple moduli once Sunday exclusion and the
cadence-dependent Saturday are combined, so every function here scans.

All functions take and return ``datetime.date``; datetimes are normalized to
their calendar day first.
"""
from datetime import date, timedelta
from typing import Iterable, List

from delivery.domain.Order import Order
from delivery.domain.errors import IncompleteOrder
from delivery.logic.calendar.rules import is_valid_delivery_day
from delivery.utilities.dates import to_date

__all__ = [
    "next_valid_delivery_day", "calculate_end_date", "extend_end_date", "retract_end_date",
    "resolve_end_date", "delivery_days_between", "deliveries_remaining",
]

ONE_DAY = timedelta(days=1)


def next_valid_delivery_day(day: date, duration) -> date:
    """Return ``day`` if it is a delivery day, else the next one (at most 7 steps)."""
    current = to_date(day)
    while not is_valid_delivery_day(current, duration):
        current += ONE_DAY
    return current


def calculate_end_date(start_date: date, duration, days_count: int) -> date:
    """Return the date of the ``days_count``-th delivery starting at ``start_date``.

    The start is snapped to the next valid delivery day, which counts as the
    first delivery.
    """
    if days_count < 1:
        raise ValueError(f"days_count must be at least 1, got {days_count}")
    current = next_valid_delivery_day(start_date, duration)
    counted = 1
    while counted < days_count:
        current += ONE_DAY
        if is_valid_delivery_day(current, duration):
            counted += 1
    return current


def extend_end_date(current_end_date: date, duration, days_to_add: int) -> date:
    """Move the end date forward by ``days_to_add`` valid delivery days.

    Always counts from the current end date (never from today), so repeated
    extensions compose: extend(extend(d, a), b) == extend(d, a + b).
    """
    if days_to_add < 0:
        raise ValueError(f"days_to_add must not be negative, got {days_to_add}")
    current = to_date(current_end_date)
    added = 0
    while added < days_to_add:
        current += ONE_DAY
        if is_valid_delivery_day(current, duration):
            added += 1
    return current


def retract_end_date(current_end_date: date, duration, days_to_remove: int) -> date:
    """Inverse of ``extend_end_date``: step back to the previous valid delivery days."""
    if days_to_remove < 0:
        raise ValueError(f"days_to_remove must not be negative, got {days_to_remove}")
    current = to_date(current_end_date)
    removed = 0
    while removed < days_to_remove:
        current -= ONE_DAY
        if is_valid_delivery_day(current, duration):
            removed += 1
    return current


def resolve_end_date(order: Order) -> date:
    """End date of an order, computed for legacy orders without a stored one.

    Every consumer that needs "is this order still running" goes through here;
    reading ``delivery_end_date`` directly treats legacy orders as expired.
    """
    if order.delivery_end_date:
        return to_date(order.delivery_end_date)
    if order.delivery_start_date is None:
        raise IncompleteOrder(f"Order {order.order_id} has neither a start nor an end date")
    if order.days_count < 1:
        raise IncompleteOrder(f"Order {order.order_id} has no stored end date and no deliveries to count")
    base_end = calculate_end_date(order.delivery_start_date, order.duration, order.days_count)
    if order.credit_days > 0:
        return extend_end_date(base_end, order.duration, order.credit_days)
    return base_end


def delivery_days_between(start: date, end: date, duration) -> List[date]:
    """All valid delivery days in the inclusive range [start, end]."""
    days: List[date] = []
    current = to_date(start)
    last = to_date(end)
    while current <= last:
        if is_valid_delivery_day(current, duration):
            days.append(current)
        current += ONE_DAY
    return days


def deliveries_remaining(order: Order, cancelled_dates: Iterable[date], today: date) -> int:
    """Count deliveries still to come: valid, non-cancelled days from today to the end date."""
    end = resolve_end_date(order)
    first = to_date(today)
    if order.delivery_start_date and order.delivery_start_date > first:
        first = order.delivery_start_date
    if end < first:
        return 0
    skipped = {to_date(d) for d in cancelled_dates}
    return sum(1 for d in delivery_days_between(first, end, order.duration) if d not in skipped)
