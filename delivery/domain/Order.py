"""Order domain entity: the subset of a subscription order the ledger reads and writes."""
from datetime import date
from typing import Optional

from delivery.utilities.constants import ACTIVE_ORDER_STATUSES, CADENCES, DEFAULT_DAYS_COUNT, UNKNOWN_PACKAGE
from delivery.utilities.dates import format_iso, format_legacy, parse_stored_date


def normalize_duration(value) -> int:
    '''Accepts 5, 6, "5" or "6"; anything else is rejected.'''
    try:
        duration = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid delivery cadence: {value!r}") from None
    if duration not in CADENCES:
        raise ValueError(f"Invalid delivery cadence: {value!r}")
    return duration


class Order:
    def __init__(self, client_id: str = "", order_id: str = "", delivery_start_date: Optional[date] = None,
                 duration: int = 5, days_count: Optional[int] = None,
                 delivery_end_date: Optional[date] = None, credit_days: int = 0,
                 order_status: str = "pending", package: str = UNKNOWN_PACKAGE):
        self.client_id = client_id
        self.order_id = order_id
        self.delivery_start_date = delivery_start_date
        self.duration = normalize_duration(duration)
        self.days_count = int(days_count) if days_count is not None else DEFAULT_DAYS_COUNT[self.duration]
        self.delivery_end_date = delivery_end_date
        self.credit_days = max(int(credit_days or 0), 0)
        self.order_status = order_status
        self.package = package

    @property
    def is_active(self) -> bool:
        return self.order_status in ACTIVE_ORDER_STATUSES

    def __str__(self) -> str:
        end = format_iso(self.delivery_end_date) if self.delivery_end_date else "-"
        return (f"Order {self.order_id} ({self.client_id}) - {self.duration}-day x {self.days_count} "
                f"- end {end} - credit {self.credit_days} - {self.order_status}")

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates an Order from a stored document. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return Order(
            client_id=d.get("clientId", ""),
            order_id=d.get("orderId", ""),
            delivery_start_date=parse_stored_date(d.get("deliveryStartDate")),
            duration=d.get("duration", 5),
            days_count=d.get("daysCount"),
            delivery_end_date=parse_stored_date(d.get("deliveryEndDate")),
            credit_days=d.get("creditDays", 0),
            order_status=d.get("orderStatus", "pending"),
            package=d.get("package") or UNKNOWN_PACKAGE,
        )

    def to_dict(self):
        '''Converts the Order to its stored document shape.'''
        return {
            "clientId": self.client_id,
            "orderId": self.order_id,
            "deliveryStartDate": format_legacy(self.delivery_start_date) if self.delivery_start_date else "",
            "duration": str(self.duration),
            "daysCount": self.days_count,
            "deliveryEndDate": format_iso(self.delivery_end_date) if self.delivery_end_date else None,
            "creditDays": self.credit_days,
            "orderStatus": self.order_status,
            "package": self.package,
        }
