"""Request-scoped helpers shared by the routers.

The store and the event bus live on ``app.state``; ``create_app`` puts them
there so tests can hand in an in-memory store.
"""
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import HTTPException, Request

from delivery.domain.errors import LedgerError
from delivery.logic.ledger.credit_ledger import CreditLedger
from delivery.logic.selections.assigner import SelectionAssigner
from delivery.utilities.config import TIMEZONE


def get_store(request: Request):
    return request.app.state.store


def get_event_bus(request: Request):
    return request.app.state.event_bus


def get_ledger(request: Request) -> CreditLedger:
    return CreditLedger(get_store(request), get_event_bus(request))


def get_assigner(request: Request) -> SelectionAssigner:
    return SelectionAssigner(get_store(request), get_event_bus(request))


def get_now(request: Request) -> datetime:
    """Current local time; tests may pin it through ``app.state.clock``."""
    clock = getattr(request.app.state, "clock", None)
    if clock is not None:
        return clock()
    return datetime.now(ZoneInfo(TIMEZONE))


def http_error(err: LedgerError) -> HTTPException:
    return HTTPException(status_code=err.status_code, detail=err.to_dict())
