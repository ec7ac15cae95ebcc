"""Moving an order's first delivery day.

The end date follows the start: it is recomputed from the purchased days and
then pushed out by the credit days already earned.
"""
import logging
from typing import Dict

from delivery.domain.errors import IncompleteOrder, InvalidDeliveryDay, LedgerWriteFailed, OrderNotFound
from delivery.infra.Document_Store import StoreError
from delivery.infra.Order_Repository import OrderRepository
from delivery.logic.calendar.rules import SATURDAY, SUNDAY, is_valid_delivery_day
from delivery.logic.schedule.calculator import calculate_end_date, extend_end_date
from delivery.utilities.dates import format_iso, format_legacy, parse_legacy_date

logger = logging.getLogger(__name__)


def _invalid_start_message(day, duration: int) -> str:
    if day.weekday() == SUNDAY:
        return "Sunday is not a delivery day"
    if day.weekday() == SATURDAY and duration == 5:
        return "Saturday is not a delivery day for the 5-day package (Mon-Fri)"
    return "This day is not a delivery day for the package"


def update_start_date(store, order_id: str, new_start: str) -> Dict:
    """Reschedule ``order_id`` to begin on ``new_start`` (DD.MM.YYYY or YYYY-MM-DD).

    Returns {"success", "orderId", "newStartDate", "newEndDate", "creditDays"}.
    """
    start = parse_legacy_date(new_start)
    orders = OrderRepository(store)
    order, version = orders.get_with_version(order_id)
    if order is None:
        raise OrderNotFound(f"Order {order_id} not found")

    if not is_valid_delivery_day(start, order.duration):
        logger.warning("Start date %s rejected for order %s (%s-day)", format_iso(start), order_id, order.duration)
        raise InvalidDeliveryDay(_invalid_start_message(start, order.duration))
    if order.days_count < 1:
        raise IncompleteOrder(f"Order {order_id} has no deliveries to schedule")

    base_end = calculate_end_date(start, order.duration, order.days_count)
    new_end = extend_end_date(base_end, order.duration, order.credit_days)

    batch = store.batch()
    orders.stage_update(batch, order, {
        "deliveryStartDate": format_legacy(start),
        "deliveryEndDate": format_iso(new_end),
    }, version)
    try:
        batch.commit()
    except StoreError as e:
        logger.error("Start date update for order %s failed: %s", order_id, e)
        raise LedgerWriteFailed("Start date could not be saved, please retry") from e

    logger.info("Order %s now starts %s and ends %s (credit days %s)",
                order_id, format_iso(start), format_iso(new_end), order.credit_days)
    return {
        "success": True,
        "orderId": order.order_id,
        "newStartDate": format_legacy(start),
        "newEndDate": format_iso(new_end),
        "creditDays": order.credit_days,
    }
