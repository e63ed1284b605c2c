# coding: utf-8
from .types import (
    TransactionKind,
    Transaction,
    Lot,
    Consumption,
    TaxableEvent,
)
from .api import (
    Inventory,
    book,
    book_buy,
    book_sell,
    consume,
)
from .sortkeys import (
    SortType,
    Method,
    sort_oldest,
    sort_dearest,
    FIFO,
    LIFO,
    HIFO,
    get_method,
    get_sort,
    ordering,
)
from .functions import open_lot, part_units, canonicalize, position_units
