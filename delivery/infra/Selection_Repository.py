"""Meal selections and the daily menus they refer to."""
from datetime import date
from typing import Dict, Iterable, List, Optional, Set

from delivery.domain.MealSelection import MealSelection
from delivery.utilities.constants import DAILY_MENUS, SELECTIONS
from delivery.utilities.dates import compound_key, format_iso


class SelectionRepository:
    def __init__(self, store):
        self.store = store

    def exists(self, client_id: str, day: date) -> bool:
        return self.store.exists(SELECTIONS, compound_key(client_id, day))

    def existing_keys(self, keys: Iterable[str]) -> Set[str]:
        return set(self.store.get_many(SELECTIONS, keys).keys())

    def for_date(self, day: date) -> List[MealSelection]:
        docs = self.store.query(SELECTIONS, {"date": format_iso(day)}, order_by="clientId")
        return [MealSelection.from_dict(data) for _, data in docs]

    def stage_create(self, batch, selection: MealSelection):
        batch.create(SELECTIONS, selection.key, selection.to_dict())
        return batch

    def stage_delete(self, batch, client_id: str, day: date):
        batch.delete(SELECTIONS, compound_key(client_id, day))
        return batch

    def menu_for(self, day: date) -> Optional[Dict]:
        """Published menu for a date, or None."""
        menu = self.store.get(DAILY_MENUS, format_iso(day))
        if not menu or not menu.get("isPublished"):
            return None
        return menu

    def published_dates(self, days: Iterable[date]) -> Set[date]:
        wanted = {format_iso(d): d for d in days}
        menus = self.store.get_many(DAILY_MENUS, wanted.keys())
        return {wanted[day_id] for day_id, menu in menus.items() if menu.get("isPublished")}
