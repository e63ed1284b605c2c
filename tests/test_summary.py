# coding: utf-8
"""
Unit tests for taxlots.tax.summary
"""
# stdlib imports
import unittest
from decimal import Decimal


# local imports
from taxlots.inventory import TaxableEvent, TransactionKind
from taxlots.tax import AssetSummary, DEFAULT_BRACKETS, Estimator, summarize
from taxlots.tax.summary import AssetTotals, fold_events
from common import day


def event(txid, kind, symbol, cost, proceeds, gain, longterm=False):
    return TaxableEvent(
        transaction_id=txid,
        date=day(txid),
        kind=kind,
        symbol=symbol,
        amount=Decimal("1"),
        price=Decimal(proceeds),
        cost_basis=Decimal(cost),
        proceeds=Decimal(proceeds),
        gain_loss=Decimal(gain),
        holding_period_days=400 if longterm else 10,
        is_long_term=longterm,
    )


BUY, SELL = TransactionKind.BUY, TransactionKind.SELL


class SummarizeTestCase(unittest.TestCase):
    def setUp(self):
        self.events = [
            event(1, BUY, "BTC", "100", "0", "0"),
            event(2, SELL, "BTC", "100", "150", "50"),
            event(3, SELL, "BTC", "200", "500", "300", longterm=True),
            event(4, BUY, "ETH", "40", "0", "0"),
            event(5, SELL, "ETH", "40", "10", "-30"),
        ]
        self.estimator = Estimator(DEFAULT_BRACKETS, "single")

    def testTotals(self):
        summary = summarize(self.events, 2022, self.estimator)
        self.assertEqual(summary.tax_year, 2022)
        self.assertEqual(summary.total_transactions, 5)
        self.assertEqual(summary.short_term_gains, Decimal("20"))
        self.assertEqual(summary.long_term_gains, Decimal("300"))
        self.assertEqual(summary.total_gains, Decimal("320"))
        self.assertEqual(summary.total_taxable_amount, Decimal("320"))
        self.assertEqual(summary.cost_basis, Decimal("480"))
        self.assertEqual(summary.proceeds, Decimal("660"))
        # 20 short-term at 10%; long-term in the 0% bracket
        self.assertEqual(summary.estimated_tax, Decimal("2.00"))

    def testByAsset(self):
        summary = summarize(self.events, "2022", self.estimator)
        self.assertEqual(list(summary.by_asset), ["BTC", "ETH"])
        self.assertEqual(
            summary.by_asset["BTC"],
            AssetSummary(
                total_gains=Decimal("350"),
                short_term_gains=Decimal("50"),
                long_term_gains=Decimal("300"),
                transactions=3,
            ),
        )
        self.assertEqual(
            summary.by_asset["ETH"],
            AssetSummary(
                total_gains=Decimal("-30"),
                short_term_gains=Decimal("-30"),
                long_term_gains=Decimal("0"),
                transactions=2,
            ),
        )

    def testNegativeTaxableAmount(self):
        summary = summarize(self.events[3:], 2022, self.estimator)
        self.assertEqual(summary.total_taxable_amount, Decimal("-30"))
        self.assertEqual(summary.estimated_tax, Decimal("0"))

    def testOrderIndependent(self):
        forward = summarize(self.events, 2022, self.estimator)
        backward = summarize(reversed(self.events), 2022, self.estimator)
        self.assertEqual(forward, backward)

    def testAdditionalIncome(self):
        summary = summarize(self.events, 2022, self.estimator, Decimal("41675"))
        # 20 short-term at 12%; 300 long-term at 15%
        self.assertEqual(summary.estimated_tax, Decimal("47.40"))

    def testEmpty(self):
        summary = summarize([], 2022, self.estimator)
        self.assertEqual(summary.total_transactions, 0)
        self.assertEqual(summary.total_gains, 0)
        self.assertEqual(summary.estimated_tax, 0)
        self.assertEqual(summary.by_asset, {})


class FoldTestCase(unittest.TestCase):
    def testFoldAndMerge(self):
        a = fold_events([event(1, SELL, "X", "1", "3", "2")])
        b = fold_events([event(2, SELL, "X", "1", "5", "4", longterm=True)])
        merged = a + b
        self.assertEqual(merged.summary.total_gains, Decimal("6"))
        self.assertEqual(merged.summary.short_term_gains, Decimal("2"))
        self.assertEqual(merged.summary.long_term_gains, Decimal("4"))
        self.assertEqual(merged.summary.transactions, 2)
        self.assertEqual(merged.cost_basis, Decimal("2"))
        self.assertEqual(merged.proceeds, Decimal("8"))
        self.assertEqual(AssetTotals() + merged, merged)


if __name__ == "__main__":
    unittest.main()
