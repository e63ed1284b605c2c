# coding: utf-8
"""
Data structures for tracking units/cost history of assets.

Each Lot tracks the current state of a particular bunch of units - (amount, price).
Lots are collected in lists called "positions", which are the values of an
Inventory mapping keyed by asset symbol.

Each Lot keeps the id and date/time of the buy Transaction that created it, which
started its holding period for tax purposes (to determine whether the character
of realized gain is long-term or short-term).

Lots are immutable.  A sale that takes part of a Lot leaves the original Lot
undisturbed and books a newly-created Lot holding the remainder, so references
held by a Consumption always reflect the Lot as it stood at the moment of sale.

To compute realized capital gains from a sale's Consumptions:
    * Proceeds - sale.amount * sale.price
    * Basis - sum(c.amount * c.lot.unit_price for c in consumptions)
    * Holding period start - min(c.lot.acquired_at for c in consumptions)
    * Holding period end - sale.datetime

Nothing in this module changes a Transaction, Lot or TaxableEvent, once created.
"""

__all__ = [
    "TransactionKind",
    "Transaction",
    "Lot",
    "Consumption",
    "TaxableEvent",
]


# stdlib imports
import enum
from decimal import Decimal
import datetime as _datetime
from typing import NamedTuple, Any


@enum.unique
class TransactionKind(enum.Enum):
    BUY = "buy"
    SELL = "sell"


class Transaction(NamedTuple):
    """Buy/sell an asset, creating basis (buy) or realizing gain (sell).

    Attributes:
        id: transaction unique identifier.
        symbol: asset that changes hands.
        kind: TransactionKind.BUY or TransactionKind.SELL.
        amount: units bought or sold (always positive).
        price: per-unit price (never negative).
        datetime: trade date/time.
    """

    id: Any
    symbol: str
    kind: TransactionKind
    amount: Decimal
    price: Decimal
    datetime: _datetime.datetime


class Lot(NamedTuple):
    """Cost basis/holding data container for an asset position.

    Attributes:
        symbol: asset held.
        original_amount: units acquired by the opening Transaction.
        remaining_amount: units still held (0 < remaining_amount <= original_amount).
        unit_price: per-unit cost basis.
        acquired_at: date/time of opening Transaction; starts the holding period.
        opentxid: id of the opening Transaction.
        sequence: position of the opening Transaction in replay order.
    """

    symbol: str
    original_amount: Decimal
    remaining_amount: Decimal
    unit_price: Decimal
    acquired_at: _datetime.datetime
    opentxid: Any = None
    sequence: int = 0

    @property
    def cost(self) -> Decimal:
        return self.remaining_amount * self.unit_price


class Consumption(NamedTuple):
    """Binds a sale to the Lot it drew from.

    Attributes:
        lot: Lot instance as it stood before the sale.
        amount: units the sale took from the Lot.
    """

    lot: Lot
    amount: Decimal

    @property
    def cost(self) -> Decimal:
        return self.amount * self.lot.unit_price


class TaxableEvent(NamedTuple):
    """One row of the tax report, emitted per in-year Transaction.

    Attributes:
        transaction_id: id of the Transaction reported.
        date: trade date/time.
        kind: TransactionKind of the Transaction.
        symbol: asset traded.
        amount: units traded.
        price: per-unit trade price.
        cost_basis: amount * price for buys; basis of Lots consumed for sells.
        proceeds: amount * price for sells; zero for buys.
        gain_loss: proceeds - cost_basis for sells; zero for buys.
        holding_period_days: days since the oldest Lot consumed; zero for buys.
        is_long_term: if True, gain/loss gets long-term treatment.
    """

    transaction_id: Any
    date: _datetime.datetime
    kind: TransactionKind
    symbol: str
    amount: Decimal
    price: Decimal
    cost_basis: Decimal
    proceeds: Decimal
    gain_loss: Decimal
    holding_period_days: int
    is_long_term: bool
