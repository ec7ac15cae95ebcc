"""Ledger error kinds.

Each error carries a stable ``kind`` string and the HTTP status the API layer
answers with. Validation errors are raised before any write.
"""
from typing import Iterable, List, Optional


class LedgerError(Exception):
    kind = "LedgerError"
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self):
        return {"kind": self.kind, "message": self.message}


class InvalidDateFormat(LedgerError):
    kind = "InvalidDateFormat"


class InvalidDeliveryDay(LedgerError):
    kind = "InvalidDeliveryDay"


class OutsideModificationWindow(LedgerError):
    kind = "OutsideModificationWindow"


class AlreadyCancelled(LedgerError):
    kind = "AlreadyCancelled"
    status_code = 409

    def __init__(self, dates: Iterable[str], message: Optional[str] = None):
        self.dates: List[str] = sorted(dates)
        super().__init__(message or f"Delivery already cancelled for: {', '.join(self.dates)}")

    def to_dict(self):
        return {**super().to_dict(), "dates": self.dates}


class NotCancelled(LedgerError):
    kind = "NotCancelled"
    status_code = 409


class NoActiveOrder(LedgerError):
    kind = "NoActiveOrder"
    status_code = 403


class BatchSizeExceeded(LedgerError):
    kind = "BatchSizeExceeded"


class OrderNotFound(LedgerError):
    kind = "OrderNotFound"
    status_code = 404


class InvalidDateRange(LedgerError):
    kind = "InvalidDateRange"


class IncompleteOrder(LedgerError, ValueError):
    """The order lacks the dates or delivery count needed to compute its end date."""
    kind = "IncompleteOrder"
    status_code = 422


class LedgerWriteFailed(LedgerError):
    """The atomic batch was rejected by the store; nothing was applied."""
    kind = "LedgerWriteFailed"
    status_code = 503


__all__ = [
    'LedgerError', 'InvalidDateFormat', 'InvalidDeliveryDay', 'OutsideModificationWindow',
    'AlreadyCancelled', 'NotCancelled', 'NoActiveOrder', 'BatchSizeExceeded',
    'OrderNotFound', 'InvalidDateRange', 'IncompleteOrder', 'LedgerWriteFailed',
]
