"""
Input validation schemas using Pydantic for request bodies.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


class CancelDeliveriesInput(BaseModel):
    """Schema for skipping one or more delivery days."""
    dates: List[str] = Field(..., min_length=1)
    orderId: Optional[str] = None

    @field_validator('dates')
    @classmethod
    def strip_dates(cls, v):
        """Remove leading/trailing whitespace; the ledger validates the format."""
        return [d.strip() for d in v]


class UpdateStartDateInput(BaseModel):
    """Schema for moving an order's first delivery day."""
    newStartDate: str = Field(..., min_length=1)

    @field_validator('newStartDate')
    @classmethod
    def strip_whitespace(cls, v):
        return v.strip()


class AutoFillInput(BaseModel):
    """Schema for the admin auto-fill. ``date`` is the single-day shorthand."""
    dateFrom: Optional[str] = None
    dateTo: Optional[str] = None
    date: Optional[str] = None
    dryRun: bool = True

    def resolved_range(self):
        """(dateFrom, dateTo) with ``date`` applied when no range was given."""
        if self.date and not self.dateFrom and not self.dateTo:
            return self.date, self.date
        return self.dateFrom, self.dateTo
