# coding: utf-8
"""
Unit tests for taxlots.tax.estimator
"""
# stdlib imports
import unittest
from decimal import Decimal


# local imports
from taxlots.errors import UnknownFilingStatus
from taxlots.tax import (
    DEFAULT_BRACKETS,
    BracketSchedule,
    BracketTable,
    Estimator,
    FilingStatus,
    make_schedule,
    tax_on_gain,
)


SINGLE_SHORT = DEFAULT_BRACKETS["single"].short_term
SINGLE_LONG = DEFAULT_BRACKETS["single"].long_term


class TaxOnGainTestCase(unittest.TestCase):
    def testFirstBracketExactly(self):
        tax = tax_on_gain(Decimal("10275"), Decimal("0"), SINGLE_SHORT)
        self.assertEqual(tax, Decimal("1027.50"))

    def testSpillIntoSecondBracket(self):
        tax = tax_on_gain(Decimal("10276"), Decimal("0"), SINGLE_SHORT)
        self.assertEqual(tax, Decimal("1027.62"))

    def testStackedOnIncome(self):
        """
        Income fills the bottom of the schedule; the gain pays the rates above it.
        """
        # 10000 of income leaves 275 at 10%; the remaining 725 goes at 12%.
        tax = tax_on_gain(Decimal("1000"), Decimal("10000"), SINGLE_SHORT)
        self.assertEqual(tax, Decimal("27.5") + Decimal("87"))

    def testIncomeAboveSeveralBrackets(self):
        tax = tax_on_gain(Decimal("1000"), Decimal("100000"), SINGLE_SHORT)
        self.assertEqual(tax, Decimal("240"))

    def testTopBracket(self):
        tax = tax_on_gain(Decimal("1000"), Decimal("1000000"), SINGLE_SHORT)
        self.assertEqual(tax, Decimal("370"))

    def testNonPositiveGain(self):
        self.assertEqual(tax_on_gain(Decimal("0"), Decimal("0"), SINGLE_SHORT), 0)
        self.assertEqual(tax_on_gain(Decimal("-500"), Decimal("0"), SINGLE_SHORT), 0)

    def testNegativeIncomeOpensNoRoom(self):
        """
        Income below zero doesn't widen the first bracket.
        """
        tax = tax_on_gain(Decimal("50000"), Decimal("-10000"), SINGLE_LONG)
        # 41675 at 0%, 8325 at 15%
        self.assertEqual(tax, Decimal("8325") * Decimal("0.15"))

    def testSpansWholeSchedule(self):
        tax = tax_on_gain(Decimal("600000"), Decimal("0"), SINGLE_LONG)
        expected = (Decimal("459750") - Decimal("41675")) * Decimal("0.15") + (
            Decimal("600000") - Decimal("459750")
        ) * Decimal("0.20")
        self.assertEqual(tax, expected)


class EstimatorTestCase(unittest.TestCase):
    def testShortTermOnly(self):
        estimator = Estimator(DEFAULT_BRACKETS, "single")
        self.assertEqual(
            estimator.estimate(Decimal("10275"), Decimal("0")), Decimal("1027.50")
        )
        self.assertEqual(
            estimator.estimate(Decimal("10276"), Decimal("0")), Decimal("1027.62")
        )

    def testLongTermStackedAboveShortTerm(self):
        """
        Long-term gains start where income + short-term gains leave off.
        """
        estimator = Estimator(DEFAULT_BRACKETS, FilingStatus.SINGLE)
        # Income 30000 + short-term 20000 = 50000 > 41675: all long-term at 15%
        tax = estimator.estimate(Decimal("20000"), Decimal("10000"), Decimal("30000"))
        short = tax_on_gain(Decimal("20000"), Decimal("30000"), SINGLE_SHORT)
        self.assertEqual(tax, (short + Decimal("1500")).quantize(Decimal("0.01")))

    def testLongTermPartlyInZeroBracket(self):
        estimator = Estimator(DEFAULT_BRACKETS, "single")
        # 40000 income leaves 1675 at 0%; 8325 at 15%
        tax = estimator.estimate(Decimal("0"), Decimal("10000"), Decimal("40000"))
        self.assertEqual(tax, Decimal("1248.75"))

    def testShortTermLossLowersLongTermFloor(self):
        estimator = Estimator(DEFAULT_BRACKETS, "single")
        tax = estimator.estimate(Decimal("-5000"), Decimal("10000"), Decimal("40000"))
        # floor 35000 leaves 6675 at 0%; 3325 at 15%
        self.assertEqual(tax, Decimal("498.75"))

    def testLosses(self):
        estimator = Estimator(DEFAULT_BRACKETS, "joint")
        self.assertEqual(
            estimator.estimate(Decimal("-100"), Decimal("-200"), Decimal("50000")),
            Decimal("0"),
        )

    def testRoundedToCents(self):
        estimator = Estimator(DEFAULT_BRACKETS, "single")
        tax = estimator.estimate(Decimal("0.333"), Decimal("0"))
        self.assertEqual(str(tax), "0.03")

    def testInjectedTable(self):
        table = BracketTable(
            {
                FilingStatus.HEAD_OF_HOUSEHOLD: BracketSchedule(
                    short_term=make_schedule([("0.5", None)]),
                    long_term=make_schedule([("0.25", None)]),
                )
            }
        )
        estimator = Estimator(table, "head")
        self.assertEqual(
            estimator.estimate(Decimal("100"), Decimal("100")), Decimal("75.00")
        )

    def testUnknownStatus(self):
        with self.assertRaises(UnknownFilingStatus):
            Estimator(DEFAULT_BRACKETS, "widow")


if __name__ == "__main__":
    unittest.main()
