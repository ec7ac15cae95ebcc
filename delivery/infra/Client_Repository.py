from typing import Dict, Iterable

from delivery.utilities.constants import CLIENTS, UNKNOWN_CLIENT_NAME


def display_name(data: dict) -> str:
    """fullName, else "firstName lastName", else a placeholder."""
    full = (data.get("fullName") or "").strip()
    if full:
        return full
    joined = f"{data.get('firstName') or ''} {data.get('lastName') or ''}".strip()
    return joined or UNKNOWN_CLIENT_NAME


class ClientRepository:
    def __init__(self, store):
        self.store = store

    def contacts(self, client_ids: Iterable[str]) -> Dict[str, Dict[str, str]]:
        """clientId -> {name, email, phone}; unknown ids are left out."""
        docs = self.store.get_many(CLIENTS, client_ids)
        return {
            client_id: {
                "name": display_name(data),
                "email": data.get("email", "") or "",
                "phone": data.get("phone", "") or "",
            }
            for client_id, data in docs.items()
        }
