# coding: utf-8
"""Base functions used by inventory.api to mutate the Inventory.
"""
from __future__ import annotations


__all__ = [
    "open_lot",
    "part_units",
    "canonicalize",
    "position_units",
]


# stdlib imports
from decimal import Decimal
import functools
from typing import Tuple, List, Iterable, Callable, Optional


# local imports
from .types import Lot, Consumption, Transaction
from . import sortkeys


def open_lot(transaction: Transaction, sequence: int = 0) -> Lot:
    """Create a new Lot from a buy Transaction.

    Args:
        transaction: buy Transaction; its datetime starts the holding period.
        sequence: position of `transaction` in replay order, used to sort Lots
                  sharing the same acquisition date/time.
    """
    return Lot(
        symbol=transaction.symbol,
        original_amount=transaction.amount,
        remaining_amount=transaction.amount,
        unit_price=transaction.price,
        acquired_at=transaction.datetime,
        opentxid=transaction.id,
        sequence=sequence,
    )


def part_units(
    position: List[Lot], max_units: Optional[Decimal] = None
) -> Tuple[List[Consumption], List[Lot]]:
    """Partition Lots, taking units from the front until `max_units` is filled.

    At most one Lot is split: the taken part is reported as a Consumption of
    the original Lot, and the remainder is left in place as a new Lot.

    Args:
        position: list of Lots; must be presorted by caller into the order
                  in which units should be taken.
        max_units: limit of units to take.  By default, take everything.

    Returns:
        (Consumptions taken, Lots left)
    """
    Accumulator = Tuple[List[Consumption], List[Lot], Optional[Decimal]]

    def make_accum() -> Callable[[Accumulator, Lot], Accumulator]:
        """Factory to produce accumulator function"""

        def accum_part(accum: Accumulator, lot: Lot) -> Accumulator:
            taken, left, units_remain = accum

            if units_remain is None:
                # args passed in max_units=None -> take everything
                taken.append(Consumption(lot=lot, amount=lot.remaining_amount))
            elif units_remain == 0:
                # max_units already filled; we're done.
                left.append(lot)
            elif lot.remaining_amount <= units_remain:
                # Taking the whole Lot won't exceed max_units (but might reach it).
                units_remain -= lot.remaining_amount
                taken.append(Consumption(lot=lot, amount=lot.remaining_amount))
            else:
                # The Lot more than suffices to fulfill max_units -> split the Lot
                taken.append(Consumption(lot=lot, amount=units_remain))
                left.append(
                    lot._replace(remaining_amount=lot.remaining_amount - units_remain)
                )
                units_remain = Decimal("0")

            return taken, left, units_remain

        return accum_part

    initial: Accumulator = ([], [], max_units)
    taken, left, _ = functools.reduce(make_accum(), position, initial)
    return taken, left


def canonicalize(position: Iterable[Lot]) -> List[Lot]:
    """Restore a position to its at-rest order, i.e. by acquisition (oldest first).

    Positions are always stored in this order, whatever order the last sale
    consumed them in.
    """
    return sortkeys.ordering(position, sortkeys.FIFO)


def position_units(position: Iterable[Lot]) -> Decimal:
    """Total units held by a sequence of Lots."""
    return sum((lot.remaining_amount for lot in position), Decimal("0"))
