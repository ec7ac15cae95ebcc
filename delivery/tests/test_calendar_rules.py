from datetime import date, datetime, timedelta
import unittest

from delivery.logic.calendar.rules import is_valid_delivery_day


class TestCalendarRules(unittest.TestCase):
    MONDAY = date(2026, 1, 5)

    def test_weekdays_always_deliver(self):
        for offset in range(5):
            day = self.MONDAY + timedelta(days=offset)
            self.assertTrue(is_valid_delivery_day(day, 5), day)
            self.assertTrue(is_valid_delivery_day(day, 6), day)

    def test_saturday_only_for_six_day_cadence(self):
        saturday = date(2026, 1, 10)
        self.assertFalse(is_valid_delivery_day(saturday, 5))
        self.assertTrue(is_valid_delivery_day(saturday, 6))

    def test_sunday_never_delivers(self):
        sunday = date(2026, 1, 11)
        self.assertFalse(is_valid_delivery_day(sunday, 5))
        self.assertFalse(is_valid_delivery_day(sunday, 6))

    def test_accepts_string_cadence_and_datetime(self):
        self.assertTrue(is_valid_delivery_day(datetime(2026, 1, 10, 23, 59), "6"))
        self.assertFalse(is_valid_delivery_day(datetime(2026, 1, 10, 0, 0), "5"))

    def test_total_over_a_year(self):
        day = date(2026, 1, 1)
        valid5 = valid6 = 0
        for _ in range(364):
            valid5 += is_valid_delivery_day(day, 5)
            valid6 += is_valid_delivery_day(day, 6)
            day += timedelta(days=1)
        # 52 full weeks
        self.assertEqual(valid5, 52 * 5)
        self.assertEqual(valid6, 52 * 6)

    def test_invalid_cadence_on_saturday_rejected(self):
        with self.assertRaises(ValueError):
            is_valid_delivery_day(date(2026, 1, 10), 7)


if __name__ == '__main__':
    unittest.main()
