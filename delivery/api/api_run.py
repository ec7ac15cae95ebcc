from fastapi import FastAPI

from typing import Optional
import logging

from delivery.api.routes import admin, ledger, orders
from delivery.events.Event_Bus import EventBus
from delivery.infra.Document_Store import InMemoryDocumentStore, JsonDocumentStore
from delivery.infra.paths import STORE_FILE
from delivery.utilities.config import DEBUG, STORE_IN_CLAUSE_LIMIT

# Logging
logger = logging.getLogger("delivery_app")


def create_app(store: Optional[InMemoryDocumentStore] = None, event_bus: Optional[EventBus] = None) -> FastAPI:
    """Build the API around a store and an event bus.

    Without arguments the JSON store under DATA_DIR and a fresh bus are used.
    """
    if store is None:
        store = JsonDocumentStore(STORE_FILE, in_clause_limit=STORE_IN_CLAUSE_LIMIT)
        logger.info("Using document store %s", STORE_FILE)
    app = FastAPI(title="Meal Delivery Schedule & Credit Ledger API", debug=DEBUG)
    app.state.store = store
    app.state.event_bus = event_bus if event_bus is not None else EventBus()
    app.state.clock = None

    # Include routers
    app.include_router(ledger.router)
    app.include_router(orders.router)
    app.include_router(admin.router)

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    return app
