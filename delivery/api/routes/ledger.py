"""Client self-service: skip and restore delivery days, month calendar."""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from delivery.api.dependencies import get_ledger, get_now, get_store, http_error
from delivery.domain.errors import LedgerError
from delivery.logic.ledger.credit_ledger import CreditLedger
from delivery.logic.reporting.calendar_view import client_calendar
from delivery.utilities.dates import format_iso
from delivery.utilities.validators import CancelDeliveriesInput

router = APIRouter(prefix="/api/clients/{client_id}", tags=["ledger"])
logger = logging.getLogger(__name__)


@router.post("/cancelled-deliveries")
def cancel_deliveries(client_id: str, payload: CancelDeliveriesInput,
                      ledger: CreditLedger = Depends(get_ledger), now: datetime = Depends(get_now)):
    try:
        result = ledger.cancel(client_id, payload.orderId, payload.dates, now)
    except LedgerError as e:
        logger.warning("Cancel for %s rejected: %s", client_id, e.kind)
        raise http_error(e)
    return {"success": True, **result}


@router.delete("/cancelled-deliveries/{day}")
def restore_delivery(client_id: str, day: str, orderId: Optional[str] = Query(default=None),
                     ledger: CreditLedger = Depends(get_ledger), now: datetime = Depends(get_now)):
    try:
        return ledger.restore(client_id, orderId, day, now)
    except LedgerError as e:
        logger.warning("Restore of %s for %s rejected: %s", day, client_id, e.kind)
        raise http_error(e)


@router.get("/cancelled-deliveries")
def list_cancelled_deliveries(client_id: str, ledger: CreditLedger = Depends(get_ledger),
                              now: datetime = Depends(get_now)):
    return {"clientId": client_id, "cancelledDeliveries": ledger.list_cancellations(client_id, now)}


@router.get("/cancelled-deliveries/{day}")
def get_cancelled_delivery(client_id: str, day: str, ledger: CreditLedger = Depends(get_ledger)):
    try:
        record = ledger.is_cancelled(client_id, day)
    except LedgerError as e:
        raise http_error(e)
    if record is None:
        return {"date": day, "isCancelled": False}
    return {
        "date": format_iso(record.date),
        "isCancelled": True,
        "orderId": record.order_id,
        "creditApplied": record.credit_applied,
        "cancelledAt": record.cancelled_at.isoformat() if record.cancelled_at else None,
    }


@router.get("/calendar/{month}")
def get_calendar(client_id: str, month: str, store=Depends(get_store), now: datetime = Depends(get_now)):
    try:
        return client_calendar(store, client_id, month, now)
    except LedgerError as e:
        raise http_error(e)
    except ValueError as e:
        logger.error("Calendar for %s failed: %s", client_id, e)
        raise HTTPException(status_code=500, detail=str(e))
