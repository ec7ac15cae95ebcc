"""Admin endpoints: auto-fill, pending selections, production summary."""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from delivery.api.dependencies import get_assigner, get_now, get_store, http_error
from delivery.domain.errors import LedgerError
from delivery.logic.cutoff.policy import first_modifiable_date
from delivery.logic.reporting.production import production_summary
from delivery.logic.selections.assigner import SelectionAssigner
from delivery.utilities.dates import parse_iso_date
from delivery.utilities.validators import AutoFillInput

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)


@router.post("/auto-fill-meals")
def auto_fill_meals(payload: AutoFillInput, assigner: SelectionAssigner = Depends(get_assigner),
                    now: datetime = Depends(get_now)):
    date_from, date_to = payload.resolved_range()
    try:
        return assigner.auto_fill(date_from, date_to, now=now, dry_run=payload.dryRun)
    except LedgerError as e:
        raise http_error(e)


@router.get("/pending-selections")
def pending_selections(dateFrom: Optional[str] = Query(default=None), dateTo: Optional[str] = Query(default=None),
                       assigner: SelectionAssigner = Depends(get_assigner), now: datetime = Depends(get_now)):
    try:
        start = parse_iso_date(dateFrom) if dateFrom else first_modifiable_date(now)
        end = parse_iso_date(dateTo) if dateTo else start
        return {"byDate": assigner.pending_selections(start, end)}
    except LedgerError as e:
        raise http_error(e)


@router.get("/meal-orders/{day}")
def meal_orders(day: str, store=Depends(get_store)):
    try:
        return production_summary(store, parse_iso_date(day))
    except LedgerError as e:
        raise http_error(e)
