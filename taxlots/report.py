# coding: utf-8
"""Data structures and functions to prepare TaxableEvents, TaxSummaries and Lots
for serialization, and to recover Transactions from deserialized data.

Conversion for serialization is a two-step process.

First each TaxableEvent or Lot is "flattened" into an un-nested intermediate
sequence (FlatEvent or FlatLot) holding the information to be reported.

Next each FlatEvent or FlatLot is "exported", i.e. attributes are formatted as
desired.

The export()ed rows are packed (along with headers naming the columns) into a
tablib.Dataset container that provides serialization (CSV, JSON, etc.)

This module doesn't perform the actual reading or writing; callers handle that by
working with tablib.Dataset instances passed into/out of these functions.
"""
__all__ = [
    "EVENT_HEADERS",
    "SUMMARY_HEADERS",
    "TRANSACTION_HEADERS",
    "FlatEvent",
    "FlatLot",
    "flatten_event",
    "export_flatevent",
    "flatten_events",
    "flatten_summary",
    "flatten_lot",
    "export_flatlot",
    "consolidate_lots",
    "flatten_inventory",
    "read_transactions",
]

# stdlib imports
from decimal import Decimal
import datetime as _datetime
from typing import NamedTuple, Iterable, List, Optional, Sequence, Tuple

# 3rd party imports
import tablib

# local imports
from taxlots import ledger, utils
from taxlots.inventory import Inventory, Lot, TaxableEvent, Transaction
from taxlots.tax import TaxSummary


EVENT_HEADERS = (
    "Date",
    "Type",
    "Symbol",
    "Amount",
    "Price",
    "Cost Basis",
    "Proceeds",
    "Gain/Loss",
    "Holding Period (Days)",
    "Term",
)


SUMMARY_HEADERS = (
    "Symbol",
    "Transactions",
    "Short-Term Gains",
    "Long-Term Gains",
    "Total Gains",
)


TRANSACTION_HEADERS = ("id", "symbol", "type", "amount", "price", "date")


class FlatEvent(NamedTuple):
    """Un-nested container for TaxableEvent data, suitable for serialization.

    Order of attributes defines column order of serialized data (EVENT_HEADERS).

    Attributes:
        date: trade date/time.
        type: "buy" or "sell".
        symbol: asset traded.
        amount: units traded.
        price: per-unit trade price.
        cost_basis: basis of the buy, or of the Lots consumed by the sale.
        proceeds: sale proceeds (zero for buys).
        gain_loss: realized gain/loss (zero for buys).
        holding_period: days held, measured from the oldest Lot consumed.
        longterm: if True, signals long-term treatment for capital gain/loss.
    """

    date: _datetime.datetime
    type: str
    symbol: str
    amount: Decimal
    price: Decimal
    cost_basis: Decimal
    proceeds: Decimal
    gain_loss: Decimal
    holding_period: int
    longterm: bool


class FlatLot(NamedTuple):
    """Un-nested container for Lot data, suitable for serialization.

    Attributes:
        symbol: asset held.
        opendt: date/time of Lot's opening transaction.
        opentxid: id of Lot's opening transaction.
        units: amount of asset comprising the Lot.
        price: per-unit cost basis.
        cost: cost basis of Lot.
    """

    symbol: str
    opendt: Optional[_datetime.datetime]
    opentxid: Optional[str]
    units: Decimal
    price: Optional[Decimal]
    cost: Decimal


def flatten_event(event: TaxableEvent) -> FlatEvent:
    return FlatEvent(
        date=event.date,
        type=event.kind.value,
        symbol=event.symbol,
        amount=event.amount,
        price=event.price,
        cost_basis=event.cost_basis,
        proceeds=event.proceeds,
        gain_loss=event.gain_loss,
        holding_period=event.holding_period_days,
        longterm=event.is_long_term,
    )


def export_flatevent(flatevent: FlatEvent) -> Tuple:
    """Convert FlatEvent into a row (tuple) ready for serialization.

    Money values are rounded to cents; units are left at full precision.
    """
    attrs = flatevent._asdict()
    attrs.update(
        {
            "date": flatevent.date.date().isoformat(),
            "price": utils.quantize_cents(flatevent.price),
            "cost_basis": utils.quantize_cents(flatevent.cost_basis),
            "proceeds": utils.quantize_cents(flatevent.proceeds),
            "gain_loss": utils.quantize_cents(flatevent.gain_loss),
            "longterm": "Long-Term" if flatevent.longterm else "Short-Term",
        }
    )
    return tuple(attrs.values())


def flatten_events(events: Iterable[TaxableEvent]) -> tablib.Dataset:
    """Convert TaxableEvents into tablib.Dataset prepared for serialization.

    Columns are EVENT_HEADERS; rows represent TaxableEvent instances.
    """
    dataset = tablib.Dataset(headers=EVENT_HEADERS)
    for event in events:
        dataset.append(export_flatevent(flatten_event(event)))
    return dataset


def flatten_summary(summary: TaxSummary) -> tablib.Dataset:
    """Convert a TaxSummary into tablib.Dataset: one row per asset, then a total.
    """
    dataset = tablib.Dataset(headers=SUMMARY_HEADERS)
    dataset.title = f"Tax Summary {summary.tax_year}"
    for symbol, asset in summary.by_asset.items():
        dataset.append(
            (
                symbol,
                asset.transactions,
                utils.quantize_cents(asset.short_term_gains),
                utils.quantize_cents(asset.long_term_gains),
                utils.quantize_cents(asset.total_gains),
            )
        )
    dataset.append(
        (
            "TOTAL",
            summary.total_transactions,
            utils.quantize_cents(summary.short_term_gains),
            utils.quantize_cents(summary.long_term_gains),
            utils.quantize_cents(summary.total_gains),
        )
    )
    return dataset


def flatten_lot(lot: Lot) -> FlatLot:
    return FlatLot(
        symbol=lot.symbol,
        opendt=lot.acquired_at,
        opentxid=None if lot.opentxid is None else str(lot.opentxid),
        units=lot.remaining_amount,
        price=lot.unit_price,
        cost=lot.cost,
    )


def consolidate_lots(symbol: str, position: Sequence[Lot]) -> List[FlatLot]:
    """Condense a position into a single-element FlatLot sequence.

    Note:
        This function is irreversible; it loses all information about holding
        period.
    """
    if not position:
        return []
    units = sum((lot.remaining_amount for lot in position), Decimal("0"))
    cost = sum((lot.cost for lot in position), Decimal("0"))
    return [
        FlatLot(
            symbol=symbol,
            opendt=None,
            opentxid=None,
            units=units,
            price=cost / units if units else None,
            cost=cost,
        )
    ]


def export_flatlot(flatlot: FlatLot) -> Tuple:
    attrs = flatlot._asdict()
    attrs.update(
        {
            "opendt": flatlot.opendt.isoformat() if flatlot.opendt else None,
            "units": utils.round_decimal(flatlot.units, power=-8),
            "price": (
                utils.round_decimal(flatlot.price) if flatlot.price is not None else None
            ),
            "cost": utils.quantize_cents(flatlot.cost),
        }
    )
    return tuple(attrs.values())


def flatten_inventory(
    inventory: Inventory, *, consolidate: Optional[bool] = False
) -> tablib.Dataset:
    """Convert an Inventory into tablib.Dataset prepared for serialization.

    Columns are the fields of FlatLot; rows represent open Lots, by symbol.

    Args:
        inventory: a mapping of symbol to a sequence of Lot instances.
        consolidate: if True, sum all Lots for each symbol.
    """
    dataset = tablib.Dataset(headers=FlatLot._fields)
    for symbol in sorted(inventory):
        position = inventory[symbol]
        if consolidate:
            flatlots = consolidate_lots(symbol, position)
        else:
            flatlots = [flatten_lot(lot) for lot in position]
        for flatlot in flatlots:
            dataset.append(export_flatlot(flatlot))
    return dataset


def read_transactions(dataset: tablib.Dataset) -> List[Transaction]:
    """Convert a freshly-deserialized tablib.Dataset into Transactions.

    Headers are matched case-insensitively against TRANSACTION_HEADERS; extra
    columns are ignored.  Values are type-converted from strings.

    Raises:
        MalformedTransaction: if a row fails validation.
        ValueError: if a required column is missing.
    """
    headers = [(header or "").strip().lower() for header in dataset.headers or []]
    missing = [h for h in TRANSACTION_HEADERS if h not in headers]
    if missing:
        raise ValueError(f"Transaction data lacks column(s): {', '.join(missing)}")

    transactions = []
    for row in dataset:
        attrs = dict(zip(headers, row))
        transactions.append(
            ledger.make_transaction(
                {key: attrs[key] for key in TRANSACTION_HEADERS}
            )
        )
    return transactions
