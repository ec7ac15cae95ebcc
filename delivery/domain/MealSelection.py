"""MealSelectionRecord: a client's chosen breakfast/lunch options for one delivery day."""
from datetime import date, datetime
from typing import Optional

from delivery.utilities.constants import DEFAULT_BREAKFAST_OPTION, DEFAULT_LUNCH_OPTION, UNKNOWN_PACKAGE
from delivery.utilities.dates import compound_key, format_iso, parse_stored_date


class MealSelection:
    def __init__(self, client_id: str, order_id: str, day: date,
                 selected_breakfast: str = DEFAULT_BREAKFAST_OPTION, selected_lunch: str = DEFAULT_LUNCH_OPTION,
                 package_tier: str = UNKNOWN_PACKAGE, auto_filled: bool = False,
                 created_at: Optional[datetime] = None):
        self.client_id = client_id
        self.order_id = order_id
        self.date = day
        self.selected_breakfast = selected_breakfast
        self.selected_lunch = selected_lunch
        self.package_tier = package_tier
        self.auto_filled = auto_filled
        self.created_at = created_at

    @property
    def key(self) -> str:
        return compound_key(self.client_id, self.date)

    def __str__(self) -> str:
        return (f"{format_iso(self.date)} - {self.client_id} - breakfast {self.selected_breakfast}, "
                f"lunch {self.selected_lunch}")

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return MealSelection(
            client_id=d.get("clientId", ""),
            order_id=d.get("orderId", ""),
            day=parse_stored_date(d.get("date")),
            selected_breakfast=d.get("selectedBreakfast") or DEFAULT_BREAKFAST_OPTION,
            selected_lunch=d.get("selectedLunch") or DEFAULT_LUNCH_OPTION,
            package_tier=d.get("packageTier") or UNKNOWN_PACKAGE,
            auto_filled=bool(d.get("autoFilled", False)),
        )

    def to_dict(self):
        stamp = self.created_at.isoformat() if self.created_at else None
        return {
            "clientId": self.client_id,
            "orderId": self.order_id,
            "date": format_iso(self.date),
            "selectedBreakfast": self.selected_breakfast,
            "selectedLunch": self.selected_lunch,
            "packageTier": self.package_tier,
            "autoFilled": self.auto_filled,
            "createdAt": stamp,
            "updatedAt": stamp,
        }
