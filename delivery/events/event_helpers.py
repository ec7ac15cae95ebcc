"""Event helper utilities.

Publishing helpers for ledger events. Every helper accepts ``bus=None`` so
callers constructed without a bus stay silent.

Quick import:
    from delivery.events.event_helpers import (
        publish_delivery_cancelled, publish_delivery_restored, publish_auto_filled,
    )
"""
from __future__ import annotations
from typing import Iterable, Optional
from .Event_Bus import (
    EventBus, DELIVERY_CANCELLED, DELIVERY_RESTORED, SELECTION_AUTO_FILLED
)

__all__ = [
    'publish_delivery_cancelled', 'publish_delivery_restored', 'publish_auto_filled',
    'DELIVERY_CANCELLED', 'DELIVERY_RESTORED', 'SELECTION_AUTO_FILLED',
]


def publish_delivery_cancelled(bus: Optional[EventBus], client_id: str, order_id: str,
                               dates: Iterable[str], new_end_date: str, credit_days: int):
    """Publish a delivery.cancelled event."""
    if bus is None:
        return
    bus.publish(DELIVERY_CANCELLED, {
        'clientId': client_id,
        'orderId': order_id,
        'dates': list(dates),
        'newEndDate': new_end_date,
        'creditDays': credit_days,
    })


def publish_delivery_restored(bus: Optional[EventBus], client_id: str, order_id: str,
                              date: str, new_end_date: str, credit_days: int):
    """Publish a delivery.restored event."""
    if bus is None:
        return
    bus.publish(DELIVERY_RESTORED, {
        'clientId': client_id,
        'orderId': order_id,
        'date': date,
        'newEndDate': new_end_date,
        'creditDays': credit_days,
    })


def publish_auto_filled(bus: Optional[EventBus], date: str, client_ids: Iterable[str]):
    """Publish a selection.auto_filled snapshot for one date.

    Payload structure:
        { 'date': 'YYYY-MM-DD', 'clientIds': [...], 'count': <int> }
    """
    if bus is None:
        return
    ids = list(client_ids)
    bus.publish(SELECTION_AUTO_FILLED, {
        'date': date,
        'clientIds': ids,
        'count': len(ids),
    })
