import unittest

from delivery.domain.errors import InvalidDateFormat, InvalidDeliveryDay, OrderNotFound
from delivery.infra.Document_Store import InMemoryDocumentStore
from delivery.logic.orders.start_date import update_start_date


def make_store(**overrides):
    doc = {
        "clientId": "c1",
        "orderId": "o1",
        "deliveryStartDate": "05.01.2026",
        "duration": "5",
        "daysCount": 20,
        "deliveryEndDate": "2026-02-02",
        "creditDays": 1,
        "orderStatus": "approved",
    }
    doc.update(overrides)
    return InMemoryDocumentStore({"orders": {"o1": doc}})


class TestUpdateStartDate(unittest.TestCase):

    def test_end_date_recomputed_with_credit_days(self):
        store = make_store()
        result = update_start_date(store, "o1", "12.01.2026")
        # 20 deliveries from Jan 12 end Feb 6, one credit day moves it to Feb 9
        self.assertEqual(result["newEndDate"], "2026-02-09")
        self.assertEqual(result["newStartDate"], "12.01.2026")
        order = store.get("orders", "o1")
        self.assertEqual(order["deliveryStartDate"], "12.01.2026")
        self.assertEqual(order["deliveryEndDate"], "2026-02-09")
        self.assertEqual(order["creditDays"], 1)

    def test_iso_input_accepted(self):
        result = update_start_date(make_store(creditDays=0), "o1", "2026-01-12")
        self.assertEqual(result["newEndDate"], "2026-02-06")

    def test_sunday_rejected(self):
        with self.assertRaises(InvalidDeliveryDay) as ctx:
            update_start_date(make_store(), "o1", "11.01.2026")
        self.assertIn("Sunday", ctx.exception.message)

    def test_saturday_rejected_for_five_day(self):
        with self.assertRaises(InvalidDeliveryDay) as ctx:
            update_start_date(make_store(), "o1", "10.01.2026")
        self.assertIn("Saturday", ctx.exception.message)

    def test_saturday_allowed_for_six_day(self):
        store = make_store(duration="6", daysCount=24, creditDays=0)
        result = update_start_date(store, "o1", "10.01.2026")
        # Jan 10 + 23 Mon-Sat days
        self.assertEqual(result["newEndDate"], "2026-02-06")

    def test_unknown_order(self):
        with self.assertRaises(OrderNotFound):
            update_start_date(make_store(), "o9", "12.01.2026")

    def test_bad_format(self):
        with self.assertRaises(InvalidDateFormat):
            update_start_date(make_store(), "o1", "2026/01/12")
        with self.assertRaises(InvalidDateFormat):
            update_start_date(make_store(), "o1", "")


if __name__ == '__main__':
    unittest.main()
