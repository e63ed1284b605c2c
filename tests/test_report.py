# coding: utf-8
"""
Unit tests for taxlots.report
"""
# stdlib imports
import unittest
from decimal import Decimal
from datetime import datetime


# 3rd party imports
import tablib


# local imports
from taxlots import report, calculate_taxes
from taxlots.errors import MalformedTransaction
from taxlots.inventory import Inventory, TransactionKind
from common import buy, sell, lot


TRANSACTIONS_CSV = """Id,Symbol,Type,Amount,Price,Date,Note
1,BTC,buy,1.0,10000,2021-01-01,first
2,BTC,buy,1.0,20000,2021-06-01T00:00:00Z,
3,BTC,sell,1.5,30000,2022-02-05,
"""


class EventsTestCase(unittest.TestCase):
    def setUp(self):
        transactions = [
            buy("1", "ETH", "2", "100.005", datetime(2022, 1, 2, 15, 30)),
            sell("2", "ETH", "0.5", "333.333", datetime(2022, 3, 1)),
        ]
        self.report = calculate_taxes(transactions, 2022)

    def testFlattenEvents(self):
        dataset = report.flatten_events(self.report.transactions)
        self.assertEqual(dataset.headers, list(report.EVENT_HEADERS))
        self.assertEqual(dataset.height, 2)
        self.assertEqual(
            dataset[0],
            (
                "2022-01-02",
                "buy",
                "ETH",
                Decimal("2"),
                Decimal("100.01"),
                Decimal("200.01"),
                Decimal("0.00"),
                Decimal("0.00"),
                0,
                "Short-Term",
            ),
        )
        self.assertEqual(
            dataset[1],
            (
                "2022-03-01",
                "sell",
                "ETH",
                Decimal("0.5"),
                Decimal("333.33"),
                Decimal("50.00"),
                Decimal("166.67"),
                Decimal("116.66"),
                57,
                "Short-Term",
            ),
        )

    def testCsv(self):
        text = report.flatten_events(self.report.transactions).export("csv")
        lines = text.splitlines()
        self.assertEqual(lines[0], ",".join(report.EVENT_HEADERS))
        self.assertEqual(len(lines), 3)

    def testFlattenSummary(self):
        dataset = report.flatten_summary(self.report.summary)
        self.assertEqual(dataset.title, "Tax Summary 2022")
        self.assertEqual(dataset.headers, list(report.SUMMARY_HEADERS))
        self.assertEqual(
            dataset[0],
            ("ETH", 2, Decimal("116.66"), Decimal("0.00"), Decimal("116.66")),
        )
        self.assertEqual(
            dataset[-1],
            ("TOTAL", 2, Decimal("116.66"), Decimal("0.00"), Decimal("116.66")),
        )


class InventoryTestCase(unittest.TestCase):
    def setUp(self):
        self.inventory = Inventory()
        self.inventory.insert(lot("ETH", "2", "100", datetime(2021, 1, 1), opentxid=1))
        self.inventory.insert(
            lot("ETH", "2", "200", datetime(2021, 2, 1), opentxid=2, remaining="1")
        )
        self.inventory.insert(lot("BTC", "0.123456789", "40000", datetime(2021, 3, 1)))

    def testFlattenInventory(self):
        dataset = report.flatten_inventory(self.inventory)
        self.assertEqual(dataset.headers, list(report.FlatLot._fields))
        self.assertEqual(dataset.height, 3)
        self.assertEqual(
            dataset[0],
            (
                "BTC",
                "2021-03-01T00:00:00",
                None,
                Decimal("0.12345679"),
                Decimal("40000"),
                Decimal("4938.27"),
            ),
        )
        self.assertEqual(
            dataset[2],
            (
                "ETH",
                "2021-02-01T00:00:00",
                "2",
                Decimal("1"),
                Decimal("200"),
                Decimal("200.00"),
            ),
        )

    def testConsolidate(self):
        dataset = report.flatten_inventory(self.inventory, consolidate=True)
        self.assertEqual(dataset.height, 2)
        self.assertEqual(
            dataset[1],
            ("ETH", None, None, Decimal("3"), Decimal("133.3333"), Decimal("400.00")),
        )

    def testEmpty(self):
        self.assertEqual(report.flatten_inventory(Inventory()).height, 0)
        self.assertEqual(report.consolidate_lots("ETH", []), [])


class ReadTransactionsTestCase(unittest.TestCase):
    def testRead(self):
        dataset = tablib.Dataset().load(TRANSACTIONS_CSV, format="csv")
        transactions = report.read_transactions(dataset)
        self.assertEqual(len(transactions), 3)
        first, second, third = transactions
        self.assertEqual(first.id, "1")
        self.assertIs(first.kind, TransactionKind.BUY)
        self.assertEqual(first.amount, Decimal("1.0"))
        self.assertEqual(first.datetime, datetime(2021, 1, 1))
        self.assertEqual(second.datetime, datetime(2021, 6, 1))
        self.assertIs(third.kind, TransactionKind.SELL)

        result = calculate_taxes(transactions, 2022)
        self.assertEqual(result.summary.long_term_gains, Decimal("25000"))

    def testMissingColumn(self):
        dataset = tablib.Dataset().load("id,symbol,type,amount,date\n", format="csv")
        with self.assertRaises(ValueError) as cm:
            report.read_transactions(dataset)
        self.assertIn("price", str(cm.exception))

    def testMalformedRow(self):
        dataset = tablib.Dataset().load(
            "id,symbol,type,amount,price,date\n7,BTC,swap,1,1,2022-01-01\n",
            format="csv",
        )
        with self.assertRaises(MalformedTransaction) as cm:
            report.read_transactions(dataset)
        self.assertEqual(cm.exception.transaction_id, "7")


if __name__ == "__main__":
    unittest.main()
