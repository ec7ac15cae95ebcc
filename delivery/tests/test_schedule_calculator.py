from datetime import date, datetime, timedelta
import unittest

from delivery.domain.Order import Order
from delivery.domain.errors import IncompleteOrder
from delivery.logic.calendar.rules import is_valid_delivery_day
from delivery.logic.schedule.calculator import (
    calculate_end_date, deliveries_remaining, delivery_days_between, extend_end_date,
    next_valid_delivery_day, resolve_end_date, retract_end_date,
)


class TestCalculateEndDate(unittest.TestCase):

    def test_five_day_twenty_deliveries(self):
        self.assertEqual(calculate_end_date(date(2026, 1, 5), 5, 20), date(2026, 1, 30))

    def test_six_day_twenty_four_deliveries(self):
        self.assertEqual(calculate_end_date(date(2026, 1, 5), 6, 24), date(2026, 1, 31))

    def test_single_delivery_ends_on_start(self):
        self.assertEqual(calculate_end_date(date(2026, 1, 7), 5, 1), date(2026, 1, 7))

    def test_start_on_sunday_snaps_to_monday(self):
        self.assertEqual(calculate_end_date(date(2026, 1, 4), 5, 1), date(2026, 1, 5))
        self.assertEqual(calculate_end_date(date(2026, 1, 4), 5, 20), date(2026, 1, 30))

    def test_start_on_saturday_for_five_day(self):
        self.assertEqual(next_valid_delivery_day(date(2026, 1, 10), 5), date(2026, 1, 12))
        self.assertEqual(next_valid_delivery_day(date(2026, 1, 10), 6), date(2026, 1, 10))

    def test_accepts_datetime(self):
        self.assertEqual(calculate_end_date(datetime(2026, 1, 5, 17, 30), "5", 20), date(2026, 1, 30))

    def test_zero_count_rejected(self):
        with self.assertRaises(ValueError):
            calculate_end_date(date(2026, 1, 5), 5, 0)

    def test_count_invariant(self):
        start = date(2026, 3, 4)
        for duration in (5, 6):
            for count in (1, 7, 20, 24, 31):
                end = calculate_end_date(start, duration, count)
                self.assertTrue(is_valid_delivery_day(end, duration))
                self.assertEqual(len(delivery_days_between(start, end, duration)), count)


class TestExtendAndRetract(unittest.TestCase):

    def test_extend_friday_skips_weekend(self):
        self.assertEqual(extend_end_date(date(2026, 1, 30), 5, 1), date(2026, 2, 2))

    def test_extend_friday_six_day_lands_on_saturday(self):
        self.assertEqual(extend_end_date(date(2026, 1, 30), 6, 1), date(2026, 1, 31))

    def test_extend_zero_is_identity(self):
        self.assertEqual(extend_end_date(date(2026, 1, 30), 5, 0), date(2026, 1, 30))

    def test_extend_negative_rejected(self):
        with self.assertRaises(ValueError):
            extend_end_date(date(2026, 1, 30), 5, -1)

    def test_extend_composes(self):
        end = date(2026, 1, 30)
        for duration in (5, 6):
            for a in range(0, 6):
                for b in range(0, 6):
                    self.assertEqual(
                        extend_end_date(extend_end_date(end, duration, a), duration, b),
                        extend_end_date(end, duration, a + b),
                    )

    def test_retract_undoes_extend(self):
        end = date(2026, 1, 30)
        for duration in (5, 6):
            for n in range(0, 8):
                self.assertEqual(retract_end_date(extend_end_date(end, duration, n), duration, n), end)

    def test_retract_monday_goes_back_to_friday(self):
        self.assertEqual(retract_end_date(date(2026, 2, 2), 5, 1), date(2026, 1, 30))


class TestResolveEndDate(unittest.TestCase):

    def test_stored_end_date_wins(self):
        order = Order("c1", "o1", date(2026, 1, 5), 5, 20, delivery_end_date=date(2026, 2, 4), credit_days=1)
        self.assertEqual(resolve_end_date(order), date(2026, 2, 4))

    def test_legacy_order_computed(self):
        order = Order("c1", "o1", date(2026, 1, 5), 5, 20)
        self.assertEqual(resolve_end_date(order), date(2026, 1, 30))

    def test_legacy_order_with_credit_days(self):
        order = Order("c1", "o1", date(2026, 1, 5), 5, 20, credit_days=2)
        self.assertEqual(resolve_end_date(order), date(2026, 2, 3))

    def test_missing_start_and_end_rejected(self):
        with self.assertRaises(IncompleteOrder):
            resolve_end_date(Order("c1", "o1"))

    def test_zero_days_count_without_end_date_rejected(self):
        with self.assertRaises(IncompleteOrder):
            resolve_end_date(Order("c1", "o1", date(2026, 1, 5), 5, 0))
        order = Order("c1", "o1", date(2026, 1, 5), 5, 0, delivery_end_date=date(2026, 1, 30))
        self.assertEqual(resolve_end_date(order), date(2026, 1, 30))


class TestDeliveriesRemaining(unittest.TestCase):

    def test_counts_from_today_excluding_cancelled(self):
        order = Order("c1", "o1", date(2026, 1, 5), 5, 20, delivery_end_date=date(2026, 2, 2), credit_days=1)
        remaining = deliveries_remaining(order, {date(2026, 1, 14)}, date(2026, 1, 7))
        # Jan 5 and 6 already delivered
        self.assertEqual(remaining, 18)

    def test_before_start_counts_everything(self):
        order = Order("c1", "o1", date(2026, 1, 5), 6, 24)
        self.assertEqual(deliveries_remaining(order, [], date(2025, 12, 20)), 24)

    def test_after_end_is_zero(self):
        order = Order("c1", "o1", date(2026, 1, 5), 5, 20)
        self.assertEqual(deliveries_remaining(order, [], date(2026, 1, 30) + timedelta(days=1)), 0)


if __name__ == '__main__':
    unittest.main()
