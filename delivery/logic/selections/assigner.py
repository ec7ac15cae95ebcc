"""Pending meal selections and the admin auto-fill.

A client is "pending" on a date when an approved order covers that date, the
date is one of the order's delivery days, the delivery was not cancelled and
no meal selection exists yet. Auto-fill writes the default options for every
pending client.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from delivery.domain.MealSelection import MealSelection
from delivery.domain.Order import Order
from delivery.domain.errors import IncompleteOrder, InvalidDateRange
from delivery.events.event_helpers import publish_auto_filled
from delivery.infra.Cancellation_Repository import CancellationRepository
from delivery.infra.Client_Repository import ClientRepository
from delivery.infra.Document_Store import DocumentExists, StoreError
from delivery.infra.Order_Repository import OrderRepository
from delivery.infra.Selection_Repository import SelectionRepository
from delivery.logic.calendar.rules import is_valid_delivery_day
from delivery.logic.cutoff.policy import first_modifiable_date
from delivery.logic.schedule.calculator import resolve_end_date
from delivery.utilities.constants import DEFAULT_BREAKFAST_OPTION, DEFAULT_LUNCH_OPTION, UNKNOWN_CLIENT_NAME
from delivery.utilities.dates import compound_key, format_iso, parse_iso_date, to_date

logger = logging.getLogger(__name__)

__all__ = ["compute_pending_selections", "date_range", "SelectionAssigner"]


def date_range(date_from: date, date_to: date) -> List[date]:
    """Every calendar day in [date_from, date_to]."""
    days = []
    current = to_date(date_from)
    while current <= to_date(date_to):
        days.append(current)
        current += timedelta(days=1)
    return days


def _order_spans(orders: Iterable[Order]) -> List[Tuple[Order, date]]:
    spans = []
    for order in orders:
        if order.delivery_start_date is None:
            logger.warning("Order %s has no start date, skipped", order.order_id)
            continue
        try:
            spans.append((order, resolve_end_date(order)))
        except IncompleteOrder as e:
            logger.warning("Order %s skipped: %s", order.order_id, e)
    return spans


def _covering_orders(day: date, spans: Sequence[Tuple[Order, date]]) -> Dict[str, Order]:
    """client_id -> first order that delivers on ``day``."""
    covering: Dict[str, Order] = {}
    for order, end in spans:
        if order.client_id in covering:
            continue
        if day < order.delivery_start_date or day > end:
            continue
        if not is_valid_delivery_day(day, order.duration):
            continue
        covering[order.client_id] = order
    return covering


def compute_pending_selections(dates: Iterable[date], orders: Iterable[Order], cancelled_keys: Set[str],
                               selected_keys: Set[str], client_names: Mapping[str, str]) -> Dict[date, List[Dict]]:
    """Work list of clients without a meal choice, per date.

    Each entry is {clientId, clientName, orderId, packageTier}; entries are
    sorted by client name (case-insensitive), then client id.
    """
    spans = _order_spans(orders)
    pending: Dict[date, List[Dict]] = {}
    for day in dates:
        day = to_date(day)
        entries = []
        for client_id, order in _covering_orders(day, spans).items():
            key = compound_key(client_id, day)
            if key in cancelled_keys or key in selected_keys:
                continue
            entries.append({
                "clientId": client_id,
                "clientName": client_names.get(client_id, UNKNOWN_CLIENT_NAME),
                "orderId": order.order_id,
                "packageTier": order.package,
            })
        entries.sort(key=lambda e: (e["clientName"].casefold(), e["clientId"]))
        pending[day] = entries
    return pending


class SelectionAssigner:
    def __init__(self, store, event_bus=None):
        self.store = store
        self.event_bus = event_bus
        self.orders = OrderRepository(store)
        self.cancellations = CancellationRepository(store)
        self.selections = SelectionRepository(store)
        self.clients = ClientRepository(store)

    def _collect(self, days: List[date]) -> Tuple[Dict[date, List[Dict]], Dict[str, Dict[str, str]]]:
        orders = self.orders.list_approved()
        spans = _order_spans(orders)
        candidate_keys = []
        client_ids = set()
        for day in days:
            for client_id in _covering_orders(day, spans):
                candidate_keys.append(compound_key(client_id, day))
                client_ids.add(client_id)
        # Both lookups are chunked by the store's IN-clause limit
        cancelled_keys = self.cancellations.existing_keys(candidate_keys)
        selected_keys = self.selections.existing_keys(candidate_keys)
        contacts = self.clients.contacts(sorted(client_ids))
        names = {client_id: info["name"] for client_id, info in contacts.items()}
        pending = compute_pending_selections(days, orders, cancelled_keys, selected_keys, names)
        return pending, contacts

    def pending_selections(self, date_from: date, date_to: date) -> Dict[str, List[Dict]]:
        """Clients still missing a meal choice, keyed by ISO date."""
        date_from, date_to = to_date(date_from), to_date(date_to)
        if date_from > date_to:
            raise InvalidDateRange(f"dateFrom {format_iso(date_from)} is after dateTo {format_iso(date_to)}")
        pending, _ = self._collect(date_range(date_from, date_to))
        return {format_iso(day): entries for day, entries in pending.items()}

    def auto_fill(self, date_from: Optional[str] = None, date_to: Optional[str] = None, *,
                  now: datetime, dry_run: bool = True) -> Dict:
        """Give every pending client the default breakfast and lunch.

        ``date_from`` defaults to the first modifiable date, ``date_to`` to
        ``date_from``. A dry run only reports who would be filled.
        """
        start = parse_iso_date(date_from) if date_from else first_modifiable_date(now)
        end = parse_iso_date(date_to) if date_to else start
        if start > end:
            raise InvalidDateRange(f"dateFrom {format_iso(start)} must not be after dateTo {format_iso(end)}")

        pending, contacts = self._collect(date_range(start, end))
        stamp = now if isinstance(now, datetime) else datetime.combine(to_date(now), datetime.min.time())

        by_date = []
        errors = []
        total_to_fill = 0
        total_filled = 0
        for day, entries in pending.items():
            for entry in entries:
                entry["email"] = contacts.get(entry["clientId"], {}).get("email", "")
            filled_ids = []
            if not dry_run:
                for entry in entries:
                    selection = MealSelection(entry["clientId"], entry["orderId"], day,
                                              selected_breakfast=DEFAULT_BREAKFAST_OPTION,
                                              selected_lunch=DEFAULT_LUNCH_OPTION,
                                              package_tier=entry["packageTier"], auto_filled=True,
                                              created_at=stamp)
                    try:
                        self.selections.stage_create(self.store.batch(), selection).commit()
                    except DocumentExists:
                        # The client picked a meal after we listed them
                        logger.info("Selection for %s on %s appeared meanwhile, skipped",
                                    entry["clientId"], format_iso(day))
                        continue
                    except StoreError as e:
                        logger.error("Auto-fill failed for %s on %s: %s", entry["clientId"], format_iso(day), e)
                        errors.append({"clientId": entry["clientId"], "date": format_iso(day), "error": str(e)})
                        continue
                    filled_ids.append(entry["clientId"])
                if filled_ids:
                    publish_auto_filled(self.event_bus, format_iso(day), filled_ids)
            by_date.append({
                "date": format_iso(day),
                "clientsToFill": len(entries),
                "clientsFilled": len(filled_ids),
                "clients": entries,
            })
            total_to_fill += len(entries)
            total_filled += len(filled_ids)

        logger.info("Auto-fill %s..%s (dry run: %s): %s pending, %s filled, %s error(s)",
                    format_iso(start), format_iso(end), dry_run, total_to_fill, total_filled, len(errors))
        result = {
            "success": not errors,
            "dateFrom": format_iso(start),
            "dateTo": format_iso(end),
            "dryRun": dry_run,
            "totalClientsToFill": total_to_fill,
            "totalClientsFilled": total_filled,
            "byDate": by_date,
        }
        if errors:
            result["errors"] = errors
        return result
