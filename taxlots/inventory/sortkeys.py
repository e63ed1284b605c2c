# coding: utf-8
"""
Functions used as keys to sort positions (i.e. lists of Lots).

A sort is a mapping of keyword args for sorted(), so a matching method is nothing
more than an ordering over a snapshot of a position.  Applying one never mutates
the position itself.
"""

__all__ = [
    "SortType",
    "Method",
    "sort_oldest",
    "sort_dearest",
    "FIFO",
    "LIFO",
    "HIFO",
    "SORTS",
    "get_method",
    "get_sort",
    "ordering",
]


# stdlib imports
import enum
from typing import Tuple, List, Iterable, Mapping, Callable, Union


# local imports
from taxlots.errors import UnknownMethod
from .types import Lot


SortType = Mapping[str, Union[bool, Callable[[Lot], Tuple]]]


@enum.unique
class Method(enum.Enum):
    FIFO = "fifo"
    LIFO = "lifo"
    HIFO = "hifo"


def sort_oldest(lot: Lot) -> Tuple:
    """Sort by holding period, then by replay order of the opening Transaction.

    Args:
        lot: a Lot instance.

    Returns:
        (Lot.acquired_at, Lot.sequence)
    """
    return (lot.acquired_at, lot.sequence)


def sort_dearest(lot: Lot) -> Tuple:
    """Sort by inverse price; break ties oldest first.

    Args:
        lot: a Lot instance.

    Returns:
        (-Lot.unit_price, Lot.acquired_at, Lot.sequence)
    """
    return (-lot.unit_price, lot.acquired_at, lot.sequence)


FIFO = {"key": sort_oldest, "reverse": False}
LIFO = {"key": sort_oldest, "reverse": True}
HIFO = {"key": sort_dearest, "reverse": False}


SORTS = {Method.FIFO: FIFO, Method.LIFO: LIFO, Method.HIFO: HIFO}


def get_method(method: Union[Method, str]) -> Method:
    """Look up a Method by enum member or (case-insensitive) name.

    Raises:
        UnknownMethod: if `method` isn't fifo, lifo or hifo.
    """
    if isinstance(method, Method):
        return method
    if isinstance(method, str):
        try:
            return Method(method.strip().lower())
        except ValueError:
            pass
    raise UnknownMethod(method)


def get_sort(method: Union[Method, str]) -> SortType:
    """Map a lot matching method to its sort.

    Raises:
        UnknownMethod: if `method` isn't fifo, lifo or hifo.
    """
    return SORTS[get_method(method)]


def ordering(position: Iterable[Lot], sort: SortType) -> List[Lot]:
    """Return a new list of the position's Lots in the order a sale consumes them."""
    return sorted(position, **sort)  # type: ignore
