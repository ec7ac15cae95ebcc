"""Simple Event Bus / Observer implementation for ledger notifications.

Event names used so far:
  delivery.cancelled    -> payload {"clientId", "orderId", "dates", "newEndDate", "creditDays"}
  delivery.restored     -> payload {"clientId", "orderId", "date", "newEndDate", "creditDays"}
  selection.auto_filled -> payload {"date", "clientIds", "count"}

Subscribers are callables taking (event_name, payload). The bus is built by
the application and handed to the ledger and the selection assigner.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
DELIVERY_CANCELLED = "delivery.cancelled"
DELIVERY_RESTORED = "delivery.restored"
SELECTION_AUTO_FILLED = "selection.auto_filled"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		# Events are published after the ledger write committed: a failing
		# subscriber is logged and must not turn a committed change into an error.
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %s", event_name, cb)


__all__ = [
	'EventBus', 'DELIVERY_CANCELLED', 'DELIVERY_RESTORED', 'SELECTION_AUTO_FILLED',
]
