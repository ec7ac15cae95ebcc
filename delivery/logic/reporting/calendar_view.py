"""Month calendar of one client's deliveries."""
import calendar
from datetime import date, datetime
from typing import Dict

from delivery.domain.errors import NoActiveOrder
from delivery.infra.Cancellation_Repository import CancellationRepository
from delivery.infra.Order_Repository import OrderRepository
from delivery.infra.Selection_Repository import SelectionRepository
from delivery.logic.calendar.rules import is_valid_delivery_day
from delivery.logic.cutoff.policy import first_modifiable_date, is_modifiable, last_modifiable_date
from delivery.logic.schedule.calculator import deliveries_remaining, resolve_end_date
from delivery.utilities.dates import compound_key, format_iso, parse_month, to_date


def client_calendar(store, client_id: str, month: str, now: datetime) -> Dict:
    """Status of every day of ``month`` (YYYY-MM) for the client's active order."""
    year, month_no = parse_month(month)
    order = OrderRepository(store).find_active_for_client(client_id)
    if order is None:
        raise NoActiveOrder(f"Client {client_id} has no active order")

    start = order.delivery_start_date
    end = resolve_end_date(order)
    days = [date(year, month_no, d) for d in range(1, calendar.monthrange(year, month_no)[1] + 1)]

    cancelled = {r.date for r in CancellationRepository(store).list_for_client(client_id)}
    selections = SelectionRepository(store)
    selected_keys = selections.existing_keys(compound_key(client_id, d) for d in days)
    published = selections.published_dates(days)

    entries = []
    for day in days:
        in_span = start is not None and start <= day <= end
        delivery_day = in_span and is_valid_delivery_day(day, order.duration)
        entries.append({
            "date": format_iso(day),
            "isDeliveryDay": delivery_day,
            "isCancelled": day in cancelled,
            "hasSelection": compound_key(client_id, day) in selected_keys,
            "isPublished": day in published,
            "canModify": delivery_day and is_modifiable(day, now, order.duration),
        })

    return {
        "month": month,
        "clientId": client_id,
        "orderId": order.order_id,
        "duration": order.duration,
        "deliveryStartDate": format_iso(start) if start else None,
        "deliveryEndDate": format_iso(end),
        "creditDays": order.credit_days,
        "deliveriesRemaining": deliveries_remaining(order, cancelled, to_date(now)),
        "firstModifiableDate": format_iso(first_modifiable_date(now)),
        "lastModifiableDate": format_iso(last_modifiable_date(now)),
        "days": entries,
    }
