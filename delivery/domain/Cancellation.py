"""CancellationRecord: one skipped delivery day for one client."""
from datetime import date, datetime
from typing import Optional

from delivery.utilities.dates import compound_key, format_iso, parse_stored_date


class CancellationRecord:
    def __init__(self, client_id: str, order_id: str, day: date, credit_applied: bool = True,
                 cancelled_at: Optional[datetime] = None):
        self.client_id = client_id
        self.order_id = order_id
        self.date = day
        self.credit_applied = credit_applied
        self.cancelled_at = cancelled_at

    @property
    def key(self) -> str:
        return compound_key(self.client_id, self.date)

    def __str__(self) -> str:
        return f"Cancelled {format_iso(self.date)} - {self.client_id} - credit: {self.credit_applied}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        cancelled_at = d.get("cancelledAt")
        if isinstance(cancelled_at, str) and cancelled_at:
            try:
                cancelled_at = datetime.fromisoformat(cancelled_at)
            except ValueError:
                cancelled_at = None
        elif not isinstance(cancelled_at, datetime):
            cancelled_at = None
        return CancellationRecord(
            client_id=d.get("clientId", ""),
            order_id=d.get("orderId", ""),
            day=parse_stored_date(d.get("date")),
            # Records written before credit was tracked count as not credited
            credit_applied=bool(d.get("creditApplied", False)),
            cancelled_at=cancelled_at,
        )

    def to_dict(self):
        return {
            "clientId": self.client_id,
            "orderId": self.order_id,
            "date": format_iso(self.date),
            "creditApplied": self.credit_applied,
            "cancelledAt": self.cancelled_at.isoformat() if self.cancelled_at else None,
        }
