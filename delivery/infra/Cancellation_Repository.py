"""Cancellation records, keyed ``clientId_YYYY-MM-DD``."""
from datetime import date
from typing import Iterable, List, Optional, Set

from delivery.domain.Cancellation import CancellationRecord
from delivery.utilities.constants import CANCELLATIONS
from delivery.utilities.dates import compound_key


class CancellationRepository:
    def __init__(self, store):
        self.store = store

    def get(self, client_id: str, day: date) -> Optional[CancellationRecord]:
        data = self.store.get(CANCELLATIONS, compound_key(client_id, day))
        return CancellationRecord.from_dict(data) if data else None

    def cancelled_dates(self, client_id: str, days: Iterable[date]) -> Set[date]:
        """Subset of ``days`` that already have a cancellation for this client."""
        wanted = {compound_key(client_id, d): d for d in days}
        found = self.store.get_many(CANCELLATIONS, wanted.keys())
        return {wanted[key] for key in found}

    def existing_keys(self, keys: Iterable[str]) -> Set[str]:
        return set(self.store.get_many(CANCELLATIONS, keys).keys())

    def list_for_client(self, client_id: str) -> List[CancellationRecord]:
        docs = self.store.query(CANCELLATIONS, {"clientId": client_id}, order_by="date")
        return [CancellationRecord.from_dict(data) for _, data in docs]

    def stage_create(self, batch, record: CancellationRecord):
        batch.create(CANCELLATIONS, record.key, record.to_dict())
        return batch

    def stage_delete(self, batch, record: CancellationRecord):
        batch.delete(CANCELLATIONS, record.key, must_exist=True)
        return batch
