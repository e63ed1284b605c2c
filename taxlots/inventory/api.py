# coding: utf-8
"""Functions to apply buy/sell transactions to inventory and match sales to Lots.

Besides the fundamental requirement of keeping accurate tallies, the main purpose
of this module is to match each sale with the open Lots it closes, in order to
calculate the cost basis and holding period of realized gains.

To use this module, create an Inventory instance and call its book() method,
passing in instances of inventory.types.Transaction.  Alternatively, you can use
any object that implements the mapping protocol, and pass it to the module-level
book() function.

The functions in this module are impure; they mutate the input Inventory (a
collection of Lots) as a side effect and return Consumptions.  Consumptions refer
to Lots, which are immutable; a partially sold Lot is replaced in the Inventory
by a newly-created Lot, leaving the old Lot undisturbed.  A consumption.lot thus
refers to the inventory state at the moment of the sale, not the current state.

Each symbol's position is stored in acquisition order at rest.  A sale views
the position through its sort (FIFO/LIFO/HIFO) but the untaken Lots are put back
canonicalized, so the next sale starts from the same baseline regardless of the
sort used before.
"""

__all__ = [
    "Inventory",
    "InventoryType",
    "book",
    "book_buy",
    "book_sell",
    "consume",
]


# stdlib imports
from collections import defaultdict
from decimal import Decimal
import logging
from typing import Any, List, MutableMapping, Optional


# local imports
from taxlots.errors import InsufficientInventory
from . import functions
from .types import Lot, Consumption, Transaction, TransactionKind
from .sortkeys import SortType, FIFO, ordering


class Inventory(defaultdict):
    """Mapping container for asset positions (i.e. lists of Lot instances).

    Keyed by symbol.

    Note:
        Any object implementing the mapping protocol may be used with the functions
        in this module.  It's convenient to inherit from collections.defaultdict.
    """

    default_factory = list

    def __init__(self, *args, **kwargs):
        args = (self.default_factory,) + args
        defaultdict.__init__(self, *args, **kwargs)

    def insert(self, lot: Lot) -> None:
        """Append a newly-opened Lot to the end of its symbol's position."""
        self[lot.symbol].append(lot)

    def consume(
        self,
        symbol: str,
        amount: Decimal,
        sort: Optional[SortType] = None,
        transaction_id: Any = None,
    ) -> List[Consumption]:
        """Convenience method to call inventory.consume()"""
        return consume(self, symbol, amount, sort=sort, transaction_id=transaction_id)

    def book(
        self, transaction: Transaction, sort: Optional[SortType] = None, sequence: int = 0
    ) -> List[Consumption]:
        """Convenience method to call inventory.book()

        Args:
            transaction: the transaction to apply to the Inventory.
            sort: sort algorithm for matching sales to Lots.
            sequence: position of `transaction` in replay order.

        Returns:
            A sequence of Consumption instances, reflecting Lots closed by the
            transaction.
        """
        return book(transaction, self, sort=sort, sequence=sequence)

    def units(self, symbol: str) -> Decimal:
        """Total units held in open Lots of `symbol`."""
        return functions.position_units(self.get(symbol, []))

    def cost(self, symbol: str) -> Decimal:
        """Total cost basis of open Lots of `symbol`."""
        return sum((lot.cost for lot in self.get(symbol, [])), Decimal("0"))


InventoryType = MutableMapping[str, List[Lot]]


def book(
    transaction: Transaction,
    inventory: InventoryType,
    *,
    sort: Optional[SortType] = None,
    sequence: int = 0,
) -> List[Consumption]:
    """Apply a Transaction to the appropriate position in the Inventory.

    Dispatch to handler function below based on Transaction.kind.

    Args:
        transaction: the transaction to apply to the Inventory.
        inventory: map of symbol to list of Lots.
        sort: sort algorithm for matching sales to Lots, e.g. FIFO.
        sequence: position of `transaction` in replay order.

    Returns:
        A sequence of Consumption instances, reflecting Lots closed by the
        transaction.
    """
    handlers = {
        TransactionKind.BUY: book_buy,
        TransactionKind.SELL: book_sell,
    }
    handler = handlers[transaction.kind]
    return handler(transaction, inventory, sort=sort, sequence=sequence)


def book_buy(
    transaction: Transaction, inventory: InventoryType, *, sequence: int = 0, **_
) -> List[Consumption]:
    """Open a new Lot at the end of the symbol's position.

    Buys never close Lots, so this function takes no `sort` arg and always
    returns an empty list.
    """
    lot = functions.open_lot(transaction, sequence=sequence)
    position = inventory.get(transaction.symbol, [])
    position.append(lot)
    inventory[transaction.symbol] = position
    logging.debug(
        "Opened lot %s: %s %s @ %s", lot.opentxid, lot.remaining_amount, lot.symbol,
        lot.unit_price,
    )
    return []


def book_sell(
    transaction: Transaction,
    inventory: InventoryType,
    *,
    sort: Optional[SortType] = None,
    **_,
) -> List[Consumption]:
    """Close Lots of the symbol's position to fill a sale.

    Raises:
        InsufficientInventory: if the position holds fewer units than the sale.
    """
    return consume(
        inventory,
        transaction.symbol,
        transaction.amount,
        sort=sort,
        transaction_id=transaction.id,
    )


def consume(
    inventory: InventoryType,
    symbol: str,
    amount: Decimal,
    *,
    sort: Optional[SortType] = None,
    transaction_id: Any = None,
) -> List[Consumption]:
    """Take `amount` units from a position, in the order given by `sort`.

    Lots are consumed greedily: each Lot is used up before moving to the next,
    so at most one Lot is split.  Fully consumed Lots leave the Inventory.

    Args:
        inventory: map of symbol to list of Lots.
        symbol: asset being sold.
        amount: units to take (positive).
        sort: sort algorithm for matching sales to Lots.  By default, FIFO.
        transaction_id: id of the sale, for error reporting.

    Returns:
        Consumptions in the order they were taken.

    Raises:
        InsufficientInventory: if the position holds fewer than `amount` units.
                               The position is left unchanged.
    """
    position = inventory.get(symbol, [])
    available = functions.position_units(position)
    if available < amount:
        raise InsufficientInventory(transaction_id, symbol, amount, available)

    ordered = ordering(position, sort or FIFO)
    taken, left = functions.part_units(ordered, max_units=amount)

    if left:
        inventory[symbol] = functions.canonicalize(left)
    else:
        inventory.pop(symbol, None)

    for consumption in taken:
        logging.debug(
            "Sale %s took %s %s from lot %s @ %s", transaction_id, consumption.amount,
            symbol, consumption.lot.opentxid, consumption.lot.unit_price,
        )
    return taken
