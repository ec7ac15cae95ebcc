import logging
from typing import List, Optional, Tuple

from delivery.domain.Order import Order
from delivery.domain.errors import InvalidDateFormat
from delivery.utilities.constants import ACTIVE_ORDER_STATUSES, APPROVED_STATUS, ORDERS

logger = logging.getLogger(__name__)


class OrderRepository:
    """Orders are keyed by orderId; documents written by older tools may use another id."""

    def __init__(self, store):
        self.store = store

    def _doc_id(self, order_id: str) -> Optional[str]:
        if self.store.exists(ORDERS, order_id):
            return order_id
        matches = self.store.query(ORDERS, {"orderId": order_id})
        return matches[0][0] if matches else None

    def get_with_version(self, order_id: str) -> Tuple[Optional[Order], int]:
        """Return (order, version) so writers can guard their update against concurrent changes."""
        doc_id = self._doc_id(order_id)
        if doc_id is None:
            return None, 0
        # Version first: a change between the two reads makes the later update fail, never pass
        version = self.store.version(ORDERS, doc_id)
        data = self.store.get(ORDERS, doc_id)
        if data is None:
            return None, 0
        data.setdefault("orderId", doc_id)
        return Order.from_dict(data), version

    def get(self, order_id: str) -> Optional[Order]:
        return self.get_with_version(order_id)[0]

    def find_active_for_client(self, client_id: str) -> Optional[Order]:
        docs = self.store.query(ORDERS, {"clientId": client_id, "orderStatus": list(ACTIVE_ORDER_STATUSES)},
                                order_by="orderId")
        if not docs:
            return None
        doc_id, data = docs[0]
        data.setdefault("orderId", doc_id)
        return Order.from_dict(data)

    def list_approved(self) -> List[Order]:
        orders = []
        for doc_id, data in self.store.query(ORDERS, {"orderStatus": APPROVED_STATUS}, order_by="orderId"):
            data.setdefault("orderId", doc_id)
            try:
                orders.append(Order.from_dict(data))
            except (ValueError, InvalidDateFormat) as e:
                logger.warning("Skipping malformed order %s: %s", doc_id, e)
        return orders

    def stage_update(self, batch, order: Order, fields: dict, version: int):
        """Queue an update of ``order`` on ``batch``; fails at commit if the order changed since read."""
        doc_id = self._doc_id(order.order_id) or order.order_id
        batch.update(ORDERS, doc_id, fields, expected_version=version)
        return batch
