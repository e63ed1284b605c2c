# coding: utf-8
"""Exceptions raised while booking transactions and estimating tax.

Every exception carries enough context (transaction id, symbol, amounts) for the
caller to display or log it without re-deriving inventory state.
"""

__all__ = [
    "TaxlotsError",
    "MalformedTransaction",
    "InsufficientInventory",
    "UnknownMethod",
    "UnknownFilingStatus",
    "BracketError",
]


# stdlib imports
from decimal import Decimal
from typing import Any


class TaxlotsError(Exception):
    """ Base class for Exceptions defined in this package """


class MalformedTransaction(TaxlotsError, ValueError):
    """Exception raised when a Transaction fails validation before replay.

    Args:
        transaction_id: id of the offending transaction.
        msg: Error message detailing what's wrong.

    Attributes:
        transaction_id: id of the offending transaction.
        msg: Error message detailing what's wrong.
    """

    def __init__(self, transaction_id: Any, msg: str) -> None:
        self.transaction_id = transaction_id
        self.msg = msg
        super(MalformedTransaction, self).__init__(
            f"Transaction {transaction_id} malformed: {msg}"
        )


class InsufficientInventory(TaxlotsError):
    """Exception raised when a sale asks for more units than the open Lots hold.

    Indicates missing buy records upstream; the position is left untouched.

    Attributes:
        transaction_id: id of the sale that couldn't be filled.
        symbol: asset being sold.
        requested: units the sale asked for.
        available: units held in open Lots at the moment of the sale.
        shortfall: requested - available.
    """

    def __init__(
        self, transaction_id: Any, symbol: str, requested: Decimal, available: Decimal
    ) -> None:
        self.transaction_id = transaction_id
        self.symbol = symbol
        self.requested = requested
        self.available = available
        self.shortfall = requested - available
        super(InsufficientInventory, self).__init__(
            f"Transaction {transaction_id} sells {requested} {symbol} "
            f"but only {available} are held (short {self.shortfall})"
        )


class UnknownMethod(TaxlotsError, ValueError):
    """ Lot matching method isn't one of fifo/lifo/hifo """

    def __init__(self, method: Any) -> None:
        self.method = method
        super(UnknownMethod, self).__init__(f"Unknown lot matching method {method!r}")


class UnknownFilingStatus(TaxlotsError, ValueError):
    """ Filing status has no bracket schedule """

    def __init__(self, status: Any) -> None:
        self.status = status
        super(UnknownFilingStatus, self).__init__(f"Unknown filing status {status!r}")


class BracketError(TaxlotsError, ValueError):
    """ Bracket table is malformed """
