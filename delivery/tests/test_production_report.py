from datetime import date
import unittest

from delivery.infra.Document_Store import InMemoryDocumentStore
from delivery.logic.reporting.production import production_summary

DAY = date(2026, 1, 14)


def order_doc(client_id, order_id):
    return {
        "clientId": client_id, "orderId": order_id, "deliveryStartDate": "05.01.2026", "duration": "5",
        "daysCount": 20, "deliveryEndDate": "2026-01-30", "orderStatus": "approved", "package": "STANDARD",
    }


def selection_doc(client_id, breakfast, lunch, tier):
    return {
        "clientId": client_id, "orderId": "o-" + client_id, "date": "2026-01-14",
        "selectedBreakfast": breakfast, "selectedLunch": lunch, "packageTier": tier,
    }


def sample_store(published=True):
    return InMemoryDocumentStore({
        "orders": {f"o-{c}": order_doc(c, f"o-{c}") for c in ("c1", "c2", "c5", "c6")},
        "clients": {
            "c1": {"fullName": "Zoe", "phone": "+421 900 000 001"},
            "c2": {"fullName": "adam"},
            "c5": {"fullName": "Eve"},
            "c6": {"fullName": "Frank"},
        },
        "mealSelections": {
            "c1_2026-01-14": selection_doc("c1", "B", "C", "STANDARD"),
            "c2_2026-01-14": selection_doc("c2", "A", "A", "PREMIUM"),
            "c5_2026-01-14": selection_doc("c5", "A", "B", "STANDARD"),
        },
        "cancelledDeliveries": {
            "c5_2026-01-14": {"clientId": "c5", "orderId": "o-c5", "date": "2026-01-14", "creditApplied": True},
        },
        "dailyMeals": {
            "2026-01-14": {
                "isPublished": published,
                "breakfastOptions": {"optionA": "Oats", "optionB": "Eggs"},
                "lunchOptions": {"optionA": "Soup", "optionB": "Pasta", "optionC": "Salad"},
            },
        },
    })


class TestProductionSummary(unittest.TestCase):

    def test_counts_with_menu_names(self):
        summary = production_summary(sample_store(), DAY)
        self.assertEqual(summary["date"], "2026-01-14")
        self.assertEqual(summary["totalOrders"], 2)
        self.assertEqual(summary["breakfastCounts"], {
            "optionA": {"name": "Oats", "count": 1},
            "optionB": {"name": "Eggs", "count": 1},
        })
        self.assertEqual(summary["lunchCounts"]["optionA"], {"name": "Soup", "count": 1})
        self.assertEqual(summary["lunchCounts"]["optionB"], {"name": "Pasta", "count": 0})
        self.assertEqual(summary["lunchCounts"]["optionC"], {"name": "Salad", "count": 1})

    def test_grouped_by_package(self):
        summary = production_summary(sample_store(), DAY)
        self.assertEqual(set(summary["byPackage"]), {"STANDARD", "PREMIUM"})
        standard = summary["byPackage"]["STANDARD"]
        self.assertEqual(standard["count"], 1)
        self.assertEqual(standard["clients"][0]["lunchName"], "Salad")
        self.assertEqual(standard["clients"][0]["phone"], "+421 900 000 001")

    def test_cancellation_overrides_stale_selection(self):
        summary = production_summary(sample_store(), DAY)
        self.assertEqual([c["clientId"] for c in summary["skippedClients"]], ["c5"])
        self.assertEqual(summary["skippedClients"][0]["clientName"], "Eve")

    def test_missing_selections_listed(self):
        summary = production_summary(sample_store(), DAY)
        self.assertEqual([c["clientId"] for c in summary["missingSelections"]], ["c6"])

    def test_unpublished_menu(self):
        summary = production_summary(sample_store(published=False), DAY)
        self.assertFalse(summary["isPublished"])
        self.assertEqual(summary["totalOrders"], 0)
        self.assertEqual(summary["byPackage"], {})
        self.assertEqual(summary["breakfastCounts"]["optionA"], {"name": "Variant A", "count": 0})
        self.assertIn("message", summary)


if __name__ == '__main__':
    unittest.main()
