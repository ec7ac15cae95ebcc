"""Credit-day ledger: skip and restore delivery days.

State per (client, date) is either "scheduled" or "cancelled"; a cancellation
record marks the latter. Cancelling grants one credit day per date, which
pushes the order's end date one valid delivery day further. Restoring takes
the credit back.

Every call validates everything first and then submits one atomic batch
containing the record writes and the order update, so an order is never seen
with an end date that disagrees with its credit days.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from delivery.domain.Cancellation import CancellationRecord
from delivery.domain.Order import Order
from delivery.domain.errors import (
    AlreadyCancelled, BatchSizeExceeded, InvalidDeliveryDay, LedgerWriteFailed, NoActiveOrder, NotCancelled,
)
from delivery.events.event_helpers import publish_delivery_cancelled, publish_delivery_restored
from delivery.infra.Cancellation_Repository import CancellationRepository
from delivery.infra.Document_Store import DocumentExists, DocumentMissing, StoreError
from delivery.infra.Order_Repository import OrderRepository
from delivery.infra.Selection_Repository import SelectionRepository
from delivery.logic.cutoff.policy import can_restore, check_modifiable
from delivery.logic.schedule.calculator import extend_end_date, resolve_end_date, retract_end_date
from delivery.utilities.constants import MAX_DATES_PER_CANCEL
from delivery.utilities.dates import compound_key, format_iso, parse_iso_date, to_date

logger = logging.getLogger(__name__)

__all__ = ["CreditLedger"]


class CreditLedger:
    def __init__(self, store, event_bus=None):
        self.store = store
        self.event_bus = event_bus
        self.orders = OrderRepository(store)
        self.cancellations = CancellationRepository(store)
        self.selections = SelectionRepository(store)

    # --- Lookups -----------------------------------------------------------
    def find_active_order(self, client_id: str) -> Order:
        order = self.orders.find_active_for_client(client_id)
        if order is None:
            raise NoActiveOrder(f"Client {client_id} has no active order")
        return order

    def _load_order(self, client_id: str, order_id: Optional[str]):
        if order_id is None:
            order_id = self.find_active_order(client_id).order_id
        order, version = self.orders.get_with_version(order_id)
        if order is None or order.client_id != client_id or not order.is_active:
            raise NoActiveOrder(f"Order {order_id} is not an active order of client {client_id}")
        return order, version

    def is_cancelled(self, client_id: str, day: str) -> Optional[CancellationRecord]:
        return self.cancellations.get(client_id, parse_iso_date(day))

    def list_cancellations(self, client_id: str, now: datetime) -> List[Dict]:
        """All skipped days of a client (oldest first) with whether each can still be restored."""
        order = self.orders.find_active_for_client(client_id)
        result = []
        for record in self.cancellations.list_for_client(client_id):
            restorable = order is not None and can_restore(record.date, now, order.duration)
            result.append({
                "date": format_iso(record.date),
                "orderId": record.order_id,
                "cancelledAt": record.cancelled_at.isoformat() if record.cancelled_at else None,
                "creditApplied": record.credit_applied,
                "canRestore": restorable,
            })
        return result

    # --- Transitions -------------------------------------------------------
    def cancel(self, client_id: str, order_id: Optional[str], dates: Iterable[str], now: datetime) -> Dict:
        """Skip one or more delivery days and extend the subscription by one day each.

        Returns {"dates", "newEndDate", "creditDaysAdded", "creditDays"}.
        Raises a LedgerError subclass and writes nothing if any date is rejected.
        """
        # Parse everything before touching the store; duplicates collapse
        days = sorted({parse_iso_date(d) for d in dates})
        order, version = self._load_order(client_id, order_id)

        limit = MAX_DATES_PER_CANCEL[order.duration]
        if not days or len(days) > limit:
            raise BatchSizeExceeded(
                f"Between 1 and {limit} dates can be cancelled at once for a {order.duration}-day package "
                f"({len(days)} requested)")

        for day in days:
            check_modifiable(day, now, order.duration)

        # Only days the order actually delivers on earn a credit day
        current_end = resolve_end_date(order)
        start = order.delivery_start_date
        outside = [d for d in days if (start is not None and d < start) or d > current_end]
        if outside:
            logger.warning("Cancel rejected for %s: %s outside order %s", client_id,
                           [format_iso(d) for d in outside], order.order_id)
            raise InvalidDeliveryDay(
                f"Order {order.order_id} has no delivery on {', '.join(format_iso(d) for d in outside)}; "
                f"it runs until {format_iso(current_end)}")

        collisions = self.cancellations.cancelled_dates(client_id, days)
        if collisions:
            logger.warning("Cancel rejected for %s: already cancelled %s", client_id,
                           [format_iso(d) for d in sorted(collisions)])
            raise AlreadyCancelled(format_iso(d) for d in collisions)

        new_end = extend_end_date(current_end, order.duration, len(days))
        credit_days = order.credit_days + len(days)
        cancelled_at = now if isinstance(now, datetime) else datetime.combine(to_date(now), datetime.min.time())

        batch = self.store.batch()
        for day in days:
            record = CancellationRecord(client_id, order.order_id, day, credit_applied=True,
                                        cancelled_at=cancelled_at)
            self.cancellations.stage_create(batch, record)
            # A skipped day keeps no meal choice
            self.selections.stage_delete(batch, client_id, day)
        self.orders.stage_update(batch, order, {
            "deliveryEndDate": format_iso(new_end),
            "creditDays": credit_days,
        }, version)
        try:
            batch.commit()
        except DocumentExists as e:
            # Someone cancelled the same day between our check and the commit
            logger.warning("Cancel for %s lost a race on %s", client_id, e.doc_id)
            raise AlreadyCancelled([e.doc_id.rsplit("_", 1)[-1]]) from e
        except StoreError as e:
            logger.error("Cancel for %s (order %s) failed, nothing applied: %s", client_id, order.order_id, e)
            raise LedgerWriteFailed("Cancellation could not be saved, please retry") from e

        cancelled = [format_iso(d) for d in days]
        logger.info("Cancelled %s for client %s (order %s): end %s -> %s, credit days %s",
                    cancelled, client_id, order.order_id, format_iso(current_end), format_iso(new_end), credit_days)
        publish_delivery_cancelled(self.event_bus, client_id, order.order_id, cancelled,
                                   format_iso(new_end), credit_days)
        return {
            "dates": cancelled,
            "newEndDate": format_iso(new_end),
            "creditDaysAdded": len(days),
            "creditDays": credit_days,
        }

    def restore(self, client_id: str, order_id: Optional[str], day_str: str, now: datetime) -> Dict:
        """Undo one skipped day; takes back its credit day if one was granted.

        Returns {"success", "date", "newEndDate", "creditDays"}.
        """
        day = parse_iso_date(day_str)
        order, version = self._load_order(client_id, order_id)

        record = self.cancellations.get(client_id, day)
        if record is None:
            raise NotCancelled(f"Delivery on {format_iso(day)} is not cancelled")
        if record.order_id and record.order_id != order.order_id:
            raise NotCancelled(f"Delivery on {format_iso(day)} was cancelled under order {record.order_id}, "
                               f"not {order.order_id}")

        # Once production committed to the day it can no longer be restored
        check_modifiable(day, now, order.duration)

        current_end = resolve_end_date(order)
        new_end = current_end
        credit_days = order.credit_days
        batch = self.store.batch()
        self.cancellations.stage_delete(batch, record)
        if record.credit_applied:
            new_end = retract_end_date(current_end, order.duration, 1)
            credit_days = max(order.credit_days - 1, 0)
            self.orders.stage_update(batch, order, {
                "deliveryEndDate": format_iso(new_end),
                "creditDays": credit_days,
            }, version)
        try:
            batch.commit()
        except DocumentMissing as e:
            if e.doc_id == compound_key(client_id, day):
                raise NotCancelled(f"Delivery on {format_iso(day)} is not cancelled") from e
            logger.error("Restore for %s failed, nothing applied: %s", client_id, e)
            raise LedgerWriteFailed("Restore could not be saved, please retry") from e
        except StoreError as e:
            logger.error("Restore for %s (order %s) failed, nothing applied: %s", client_id, order.order_id, e)
            raise LedgerWriteFailed("Restore could not be saved, please retry") from e

        logger.info("Restored %s for client %s (order %s): end %s -> %s, credit days %s",
                    format_iso(day), client_id, order.order_id, format_iso(current_end), format_iso(new_end),
                    credit_days)
        publish_delivery_restored(self.event_bus, client_id, order.order_id, format_iso(day),
                                  format_iso(new_end), credit_days)
        return {
            "success": True,
            "date": format_iso(day),
            "newEndDate": format_iso(new_end),
            "creditDays": credit_days,
        }
