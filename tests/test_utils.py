# coding: utf-8
"""
Unit tests for taxlots.utils
"""
import unittest
import datetime
from decimal import Decimal

from taxlots import utils


class ToDecimalTestCase(unittest.TestCase):
    def test_float_goes_through_str(self):
        self.assertEqual(utils.to_decimal(0.1), Decimal("0.1"))
        self.assertEqual(utils.to_decimal(0.1) + utils.to_decimal(0.2), Decimal("0.3"))

    def test_int_str_decimal(self):
        self.assertEqual(utils.to_decimal(10275), Decimal("10275"))
        self.assertEqual(utils.to_decimal(" 1.50 "), Decimal("1.50"))
        d = Decimal("3.14")
        self.assertIs(utils.to_decimal(d), d)

    def test_garbage(self):
        for bad in ("abc", "", None, True, float("nan"), "Infinity", [1]):
            with self.assertRaises(ValueError):
                utils.to_decimal(bad)


class NormalizeDatetimeTestCase(unittest.TestCase):
    def test_date(self):
        self.assertEqual(
            utils.normalize_datetime(datetime.date(2022, 3, 14)),
            datetime.datetime(2022, 3, 14),
        )

    def test_aware_converted_to_utc(self):
        tz = datetime.timezone(datetime.timedelta(hours=-5))
        aware = datetime.datetime(2022, 12, 31, 22, 0, tzinfo=tz)
        self.assertEqual(
            utils.normalize_datetime(aware), datetime.datetime(2023, 1, 1, 3, 0)
        )

    def test_naive_untouched(self):
        dt = datetime.datetime(2022, 3, 14, 15, 9, 26)
        self.assertEqual(utils.normalize_datetime(dt), dt)

    def test_string(self):
        self.assertEqual(
            utils.normalize_datetime("2022-03-14"), datetime.datetime(2022, 3, 14)
        )
        self.assertEqual(
            utils.normalize_datetime("2022-03-14T15:09:26Z"),
            datetime.datetime(2022, 3, 14, 15, 9, 26),
        )

    def test_garbage(self):
        for bad in ("March 14", None, 20220314):
            with self.assertRaises(ValueError):
                utils.normalize_datetime(bad)


class HoldingPeriodTestCase(unittest.TestCase):
    def test_whole_days_rounded_down(self):
        opendt = datetime.datetime(2021, 1, 1, 12, 0)
        self.assertEqual(
            utils.holding_days(opendt, datetime.datetime(2021, 1, 2, 11, 59)), 0
        )
        self.assertEqual(
            utils.holding_days(opendt, datetime.datetime(2021, 1, 2, 12, 0)), 1
        )

    def test_realize_longterm_boundary(self):
        self.assertFalse(utils.realize_longterm(365))
        self.assertTrue(utils.realize_longterm(366))
        self.assertFalse(utils.realize_longterm(0))

    def test_realize_longterm_threshold(self):
        self.assertTrue(utils.realize_longterm(31, threshold=30))
        self.assertFalse(utils.realize_longterm(30, threshold=30))


class RoundingTestCase(unittest.TestCase):
    def test_round_decimal(self):
        self.assertEqual(str(utils.round_decimal(Decimal("5.000"))), "5")
        self.assertEqual(str(utils.round_decimal(Decimal("0.123456"))), "0.1235")
        self.assertEqual(
            str(utils.round_decimal(Decimal("0.123456789"), power=-8)), "0.12345679"
        )

    def test_quantize_cents(self):
        self.assertEqual(str(utils.quantize_cents(Decimal("1027.5"))), "1027.50")
        self.assertEqual(str(utils.quantize_cents(Decimal("0.005"))), "0.01")


if __name__ == "__main__":
    unittest.main()
