"""Production summary: what the kitchen cooks for one delivery day."""
import logging
from datetime import date
from typing import Dict, List, Optional

from delivery.infra.Cancellation_Repository import CancellationRepository
from delivery.infra.Client_Repository import ClientRepository
from delivery.infra.Selection_Repository import SelectionRepository
from delivery.logic.selections.assigner import SelectionAssigner
from delivery.utilities.constants import BREAKFAST_OPTIONS, LUNCH_OPTIONS, UNKNOWN_CLIENT_NAME
from delivery.utilities.dates import compound_key, format_iso, to_date

logger = logging.getLogger(__name__)


def _option_name(options: Optional[Dict], option: str) -> str:
    return (options or {}).get(f"option{option}") or f"Variant {option}"


def _option_counts(options: Optional[Dict], allowed, counts: Dict[str, int]) -> Dict[str, Dict]:
    return {
        f"option{option}": {"name": _option_name(options, option), "count": counts.get(option, 0)}
        for option in allowed
    }


def _by_name(entry):
    return (entry["clientName"].casefold(), entry["clientId"])


def production_summary(store, day: date) -> Dict:
    """Aggregate the meal selections of ``day``.

    Cancelled clients are listed under ``skippedClients`` even if a stale
    selection still exists. Clients who should receive a delivery but have
    not chosen yet appear under ``missingSelections``.
    """
    day = to_date(day)
    menu = SelectionRepository(store).menu_for(day)
    breakfast_names = menu.get("breakfastOptions") if menu else None
    lunch_names = menu.get("lunchOptions") if menu else None

    selections = SelectionRepository(store).for_date(day) if menu else []
    client_ids = sorted({s.client_id for s in selections})
    contacts = ClientRepository(store).contacts(client_ids)
    cancelled_keys = CancellationRepository(store).existing_keys(compound_key(c, day) for c in client_ids)

    by_package: Dict[str, Dict] = {}
    skipped: List[Dict] = []
    breakfast_counts: Dict[str, int] = {}
    lunch_counts: Dict[str, int] = {}
    total = 0
    for selection in selections:
        info = contacts.get(selection.client_id, {})
        name = info.get("name", UNKNOWN_CLIENT_NAME)
        if selection.key in cancelled_keys:
            skipped.append({
                "clientId": selection.client_id,
                "clientName": name,
                "orderId": selection.order_id,
                "packageTier": selection.package_tier,
                "phone": info.get("phone", ""),
            })
            continue
        total += 1
        breakfast_counts[selection.selected_breakfast] = breakfast_counts.get(selection.selected_breakfast, 0) + 1
        lunch_counts[selection.selected_lunch] = lunch_counts.get(selection.selected_lunch, 0) + 1
        group = by_package.setdefault(selection.package_tier, {"count": 0, "clients": []})
        group["count"] += 1
        group["clients"].append({
            "clientId": selection.client_id,
            "clientName": name,
            "orderId": selection.order_id,
            "selectedBreakfast": selection.selected_breakfast,
            "breakfastName": _option_name(breakfast_names, selection.selected_breakfast),
            "selectedLunch": selection.selected_lunch,
            "lunchName": _option_name(lunch_names, selection.selected_lunch),
            "autoFilled": selection.auto_filled,
            "phone": info.get("phone", ""),
        })

    skipped.sort(key=_by_name)
    for group in by_package.values():
        group["clients"].sort(key=_by_name)

    missing = SelectionAssigner(store).pending_selections(day, day)[format_iso(day)]
    if skipped:
        logger.info("Production %s: %s order(s), %s skipped", format_iso(day), total, len(skipped))

    summary = {
        "date": format_iso(day),
        "isPublished": menu is not None,
        "totalOrders": total,
        "byPackage": by_package,
        "breakfastCounts": _option_counts(breakfast_names, BREAKFAST_OPTIONS, breakfast_counts),
        "lunchCounts": _option_counts(lunch_names, LUNCH_OPTIONS, lunch_counts),
        "skippedClients": skipped,
        "missingSelections": missing,
    }
    if menu is None:
        summary["message"] = "Menu not published"
    return summary
