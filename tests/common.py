# coding: utf-8
""" Reusable test elements """
# stdlib imports
from decimal import Decimal
from datetime import datetime, timedelta


# local imports
from taxlots.inventory import Transaction, TransactionKind, Lot


DAY_ONE = datetime(2020, 1, 1)


def day(n: int) -> datetime:
    """Date/time `n` days into the test calendar; day(1) is DAY_ONE."""
    return DAY_ONE + timedelta(days=n - 1)


def buy(id, symbol, amount, price, dt):
    return Transaction(
        id=id,
        symbol=symbol,
        kind=TransactionKind.BUY,
        amount=Decimal(amount),
        price=Decimal(price),
        datetime=dt,
    )


def sell(id, symbol, amount, price, dt):
    return Transaction(
        id=id,
        symbol=symbol,
        kind=TransactionKind.SELL,
        amount=Decimal(amount),
        price=Decimal(price),
        datetime=dt,
    )


def lot(symbol, amount, price, dt, opentxid=None, sequence=0, remaining=None):
    return Lot(
        symbol=symbol,
        original_amount=Decimal(amount),
        remaining_amount=Decimal(remaining if remaining is not None else amount),
        unit_price=Decimal(price),
        acquired_at=dt,
        opentxid=opentxid,
        sequence=sequence,
    )
