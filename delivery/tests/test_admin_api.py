from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from httpx import ASGITransport, AsyncClient

from delivery.api.api_run import create_app
from delivery.infra.Document_Store import InMemoryDocumentStore

NOW = datetime(2026, 1, 7, 10, 0, tzinfo=ZoneInfo("Europe/Bratislava"))


def make_app():
    store = InMemoryDocumentStore({
        "orders": {
            "o1": {"clientId": "c1", "orderId": "o1", "deliveryStartDate": "05.01.2026", "duration": "5",
                   "daysCount": 20, "deliveryEndDate": "2026-01-30", "orderStatus": "approved",
                   "package": "STANDARD"},
            "o2": {"clientId": "c2", "orderId": "o2", "deliveryStartDate": "05.01.2026", "duration": "6",
                   "daysCount": 24, "orderStatus": "approved", "package": "PREMIUM"},
        },
        "clients": {"c1": {"fullName": "Bob"}, "c2": {"fullName": "Alice"}},
        "dailyMeals": {"2026-01-15": {
            "isPublished": True,
            "breakfastOptions": {"optionA": "Oats", "optionB": "Eggs"},
            "lunchOptions": {"optionA": "Soup", "optionB": "Pasta", "optionC": "Salad"},
        }},
    })
    app = create_app(store=store)
    app.state.clock = lambda: NOW
    return app, store


@pytest.mark.asyncio
async def test_auto_fill_then_production_summary():
    """Preview, fill, and read back the kitchen summary for one day."""
    app, store = make_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        # === 1. Preview (dryRun defaults to true) ===
        preview = await ac.post("/api/admin/auto-fill-meals", json={"date": "2026-01-15"})
        assert preview.status_code == 200, preview.text
        data = preview.json()
        assert data["dryRun"] is True
        assert data["totalClientsToFill"] == 2
        assert [c["clientName"] for c in data["byDate"][0]["clients"]] == ["Alice", "Bob"]
        assert store.query("mealSelections") == []

        # === 2. Fill for real ===
        filled = await ac.post("/api/admin/auto-fill-meals", json={"date": "2026-01-15", "dryRun": False})
        assert filled.json()["totalClientsFilled"] == 2

        # === 3. Nothing left pending ===
        pending = await ac.get("/api/admin/pending-selections", params={"dateFrom": "2026-01-15"})
        assert pending.json() == {"byDate": {"2026-01-15": []}}

        # === 4. Kitchen summary ===
        summary = await ac.get("/api/admin/meal-orders/2026-01-15")
        body = summary.json()
        assert body["totalOrders"] == 2
        assert body["breakfastCounts"]["optionA"] == {"name": "Oats", "count": 2}
        assert body["lunchCounts"]["optionA"] == {"name": "Soup", "count": 2}
        assert set(body["byPackage"]) == {"STANDARD", "PREMIUM"}


@pytest.mark.asyncio
async def test_admin_rejects_bad_input():
    app, _ = make_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.post("/api/admin/auto-fill-meals", json={"dateFrom": "2026-01-16", "dateTo": "2026-01-15"})
        assert resp.status_code == 400
        assert resp.json()["detail"]["kind"] == "InvalidDateRange"

        resp = await ac.get("/api/admin/meal-orders/15.01.2026")
        assert resp.status_code == 400
        assert resp.json()["detail"]["kind"] == "InvalidDateFormat"

        # Defaults to the first modifiable date
        resp = await ac.post("/api/admin/auto-fill-meals", json={})
        assert resp.json()["dateFrom"] == "2026-01-12"
