# coding: utf-8
"""Classify booked Transactions as TaxableEvents.

A sale's holding period runs from the oldest Lot it consumed, and that single
period decides long-term vs. short-term treatment for the whole sale.  A sale
drawing on Lots of mixed ages isn't split into long-term and short-term pieces.
"""

__all__ = ["classify_buy", "classify_sell", "classify"]


# stdlib imports
from decimal import Decimal
from typing import Sequence


# local imports
from taxlots import utils
from taxlots.inventory.types import (
    Transaction,
    TransactionKind,
    Consumption,
    TaxableEvent,
)


LONGTERM_DAYS = 365


def classify_buy(transaction: Transaction) -> TaxableEvent:
    """Report a buy; it realizes nothing."""
    return TaxableEvent(
        transaction_id=transaction.id,
        date=transaction.datetime,
        kind=TransactionKind.BUY,
        symbol=transaction.symbol,
        amount=transaction.amount,
        price=transaction.price,
        cost_basis=transaction.amount * transaction.price,
        proceeds=Decimal("0"),
        gain_loss=Decimal("0"),
        holding_period_days=0,
        is_long_term=False,
    )


def classify_sell(
    transaction: Transaction,
    consumptions: Sequence[Consumption],
    longterm_days: int = LONGTERM_DAYS,
) -> TaxableEvent:
    """Compute basis, proceeds, gain and holding period realized by a sale.

    Args:
        transaction: the sale.
        consumptions: Lots consumed by the sale, as returned by inventory.consume().
        longterm_days: holding periods longer than this many days are long-term.
    """
    cost_basis = sum((c.cost for c in consumptions), Decimal("0"))
    proceeds = transaction.amount * transaction.price

    if consumptions:
        opendt = min(c.lot.acquired_at for c in consumptions)
        days = utils.holding_days(opendt, transaction.datetime)
    else:
        days = 0

    return TaxableEvent(
        transaction_id=transaction.id,
        date=transaction.datetime,
        kind=TransactionKind.SELL,
        symbol=transaction.symbol,
        amount=transaction.amount,
        price=transaction.price,
        cost_basis=cost_basis,
        proceeds=proceeds,
        gain_loss=proceeds - cost_basis,
        holding_period_days=days,
        is_long_term=utils.realize_longterm(days, longterm_days),
    )


def classify(
    transaction: Transaction,
    consumptions: Sequence[Consumption],
    longterm_days: int = LONGTERM_DAYS,
) -> TaxableEvent:
    if transaction.kind is TransactionKind.BUY:
        return classify_buy(transaction)
    return classify_sell(transaction, consumptions, longterm_days)
