"""Order schedule endpoints and the public cutoff window."""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from delivery.api.dependencies import get_now, get_store, http_error
from delivery.domain.errors import LedgerError
from delivery.infra.Order_Repository import OrderRepository
from delivery.logic.cutoff.policy import effective_change_date, first_modifiable_date, last_modifiable_date
from delivery.logic.orders.start_date import update_start_date
from delivery.logic.schedule.calculator import resolve_end_date
from delivery.utilities.dates import format_iso, to_date
from delivery.utilities.validators import UpdateStartDateInput

router = APIRouter(tags=["orders"])
logger = logging.getLogger(__name__)


@router.get("/api/orders/{order_id}/end-date")
def get_end_date(order_id: str, store=Depends(get_store)):
    order = OrderRepository(store).get(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail={"kind": "OrderNotFound", "message": "Order not found"})
    try:
        end = resolve_end_date(order)
    except LedgerError as e:
        raise http_error(e)
    return {
        "orderId": order.order_id,
        "deliveryStartDate": format_iso(order.delivery_start_date) if order.delivery_start_date else None,
        "deliveryEndDate": format_iso(end),
        "creditDays": order.credit_days,
        "daysCount": order.days_count,
        "duration": order.duration,
        "isStored": order.delivery_end_date is not None,
    }


@router.post("/api/orders/{order_id}/update-start-date")
def post_update_start_date(order_id: str, payload: UpdateStartDateInput, store=Depends(get_store)):
    try:
        return update_start_date(store, order_id, payload.newStartDate)
    except LedgerError as e:
        raise http_error(e)


@router.get("/api/delivery/cutoff")
def get_cutoff(now: datetime = Depends(get_now)):
    return {
        "today": format_iso(to_date(now)),
        "firstModifiableDate": format_iso(first_modifiable_date(now)),
        "lastModifiableDate": format_iso(last_modifiable_date(now)),
        "effectiveChangeDate": format_iso(effective_change_date(now)),
    }
