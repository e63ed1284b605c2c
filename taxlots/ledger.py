# coding: utf-8
"""Replay a transaction history into inventory and report a tax year's events.

Replay happens in two phases over one chronological stream.  Transactions on or
before the start of the tax year are booked silently, establishing the Lots
carried into the year.  Transactions within the year are booked and reported,
one TaxableEvent apiece.  Transactions after the year are ignored.

Every method replays oldest first; the matching method only decides which Lots
a sale consumes.

Symbols never interact, so the stream is partitioned by symbol and each
sub-stream is replayed on its own, through any `map`-like callable (e.g.
`concurrent.futures.Executor.map`).  The per-symbol results are merged back by
replay position, so the output never depends on which symbol finished first.
Within a symbol, booking is strictly sequential.
"""

__all__ = [
    "Replay",
    "make_transaction",
    "validate",
    "year_bounds",
    "partition_symbols",
    "replay_symbol",
    "replay_between",
    "replay",
]


# stdlib imports
from collections import defaultdict
import datetime as _datetime
import functools
import itertools
import logging
import operator
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Tuple,
    Union,
)


# local imports
from taxlots import utils, gains
from taxlots.errors import MalformedTransaction
from taxlots.inventory import (
    Inventory,
    Lot,
    Transaction,
    TransactionKind,
    TaxableEvent,
    SortType,
    FIFO,
)


Mapper = Callable[..., Iterable]
Sequenced = Tuple[int, Transaction]


class Replay(NamedTuple):
    """Outcome of replaying a transaction history.

    Attributes:
        events: reported TaxableEvents, in chronological order.
        inventory: open Lots after the last Transaction replayed.
    """

    events: List[TaxableEvent]
    inventory: Inventory


KIND_ALIASES = {kind.value: kind for kind in TransactionKind}


def make_transaction(record: Union[Transaction, Mapping[str, Any]]) -> Transaction:
    """Validate and normalize one input record into a Transaction.

    Accepts a Transaction or a mapping with keys `id`, `symbol`, `kind` (or
    `type`), `amount`, `price` and `datetime` (or `timestamp`, or `date`).
    Numbers are converted to Decimal; dates/times to naive UTC datetimes.

    Raises:
        MalformedTransaction: for a missing symbol, unknown kind, non-positive
                              amount, negative price, or unparseable value.
    """
    if isinstance(record, Transaction):
        attrs: Dict[str, Any] = record._asdict()
    else:
        attrs = dict(record)
        if attrs.get("kind") is None:
            attrs["kind"] = attrs.get("type")
        if attrs.get("datetime") is None:
            attrs["datetime"] = attrs.get("timestamp") or attrs.get("date")

    txid = attrs.get("id")

    symbol = attrs.get("symbol")
    if not isinstance(symbol, str) or not symbol.strip():
        raise MalformedTransaction(txid, f"symbol must be a nonempty string, not {symbol!r}")

    kind = attrs.get("kind")
    if not isinstance(kind, TransactionKind):
        kind = KIND_ALIASES.get(str(kind).strip().lower())
        if kind is None:
            raise MalformedTransaction(txid, f"unknown kind {attrs.get('kind')!r}")

    try:
        amount = utils.to_decimal(attrs.get("amount"))
        price = utils.to_decimal(attrs.get("price"))
    except ValueError as err:
        raise MalformedTransaction(txid, str(err))

    if amount <= 0:
        raise MalformedTransaction(txid, f"amount must be positive, not {amount}")
    if price < 0:
        raise MalformedTransaction(txid, f"price can't be negative, not {price}")

    try:
        dt = utils.normalize_datetime(attrs.get("datetime"))
    except (TypeError, ValueError) as err:
        raise MalformedTransaction(txid, str(err))

    return Transaction(
        id=txid, symbol=symbol.strip(), kind=kind, amount=amount, price=price, datetime=dt
    )


def validate(
    transactions: Iterable[Union[Transaction, Mapping[str, Any]]]
) -> List[Transaction]:
    """Validate every record before any replay; the first failure aborts."""
    return [make_transaction(record) for record in transactions]


def year_bounds(tax_year: Union[int, str]) -> Tuple[_datetime.datetime, _datetime.datetime]:
    """(start, end) of a tax year; replay reports start < datetime <= end.

    Raises:
        ValueError: if `tax_year` isn't a four-digit year.
    """
    if isinstance(tax_year, int) and not isinstance(tax_year, bool):
        year = tax_year
    elif isinstance(tax_year, str) and tax_year.strip().isdecimal():
        year = int(tax_year)
    else:
        raise ValueError(f"tax year must be an int or digit string, not {tax_year!r}")
    if not 1000 <= year <= 9999:
        raise ValueError(f"tax year must have four digits, not {tax_year!r}")
    start = _datetime.datetime(year, 1, 1)
    end = _datetime.datetime(year, 12, 31, 23, 59, 59, 999999)
    return start, end


def partition_symbols(stream: Iterable[Sequenced]) -> Dict[str, List[Sequenced]]:
    """Split a sequenced stream into per-symbol sub-streams, preserving order."""
    streams: Dict[str, List[Sequenced]] = defaultdict(list)
    for sequence, transaction in stream:
        streams[transaction.symbol].append((sequence, transaction))
    return streams


def replay_symbol(
    stream: List[Sequenced],
    *,
    report_after: Optional[_datetime.datetime],
    sort: SortType,
    longterm_days: int = gains.LONGTERM_DAYS,
) -> Tuple[List[Tuple[int, TaxableEvent]], List[Lot]]:
    """Book one symbol's sub-stream in order.

    Args:
        stream: (replay position, Transaction) pairs for one symbol, in order.
        report_after: Transactions dated after this are reported; earlier ones
                      are booked silently.  If None, report everything.
        sort: sort algorithm for matching sales to Lots.
        longterm_days: holding periods longer than this are long-term.

    Returns:
        ((replay position, TaxableEvent) pairs, ending position)

    Raises:
        InsufficientInventory: if a sale exceeds the Lots open at that point.
    """
    inventory = Inventory()
    events = []
    for sequence, transaction in stream:
        consumptions = inventory.book(transaction, sort=sort, sequence=sequence)
        if report_after is None or transaction.datetime > report_after:
            event = gains.classify(transaction, consumptions, longterm_days)
            events.append((sequence, event))

    position = list(itertools.chain.from_iterable(inventory.values()))
    return events, position


def replay_between(
    transactions: Iterable[Union[Transaction, Mapping[str, Any]]],
    report_after: Optional[_datetime.datetime],
    dtend: _datetime.datetime,
    sort: Optional[SortType] = None,
    *,
    mapper: Mapper = map,
    longterm_days: int = gains.LONGTERM_DAYS,
) -> Replay:
    """Replay all Transactions dated on/before `dtend`, reporting those after
    `report_after`.

    Raises:
        MalformedTransaction: if any record fails validation (before replay).
        InsufficientInventory: if a sale exceeds the Lots open at that point.
    """
    validated = validate(transactions)

    # sorted() is stable, so same-instant Transactions keep their input order.
    ordered = sorted(
        (tx for tx in validated if tx.datetime <= dtend),
        key=operator.attrgetter("datetime"),
    )
    streams = partition_symbols(enumerate(ordered))

    symbols = sorted(streams)
    worker = functools.partial(
        replay_symbol,
        report_after=report_after,
        sort=sort or FIFO,
        longterm_days=longterm_days,
    )
    results = list(mapper(worker, [streams[symbol] for symbol in symbols]))

    inventory = Inventory()
    for symbol, (_, position) in zip(symbols, results):
        if position:
            inventory[symbol] = position

    merged = sorted(
        itertools.chain.from_iterable(events for events, _ in results),
        key=operator.itemgetter(0),
    )
    events = [event for _, event in merged]

    logging.info(
        "Replayed %d transactions across %d symbols; reported %d events",
        len(ordered), len(symbols), len(events),
    )
    return Replay(events=events, inventory=inventory)


def replay(
    transactions: Iterable[Union[Transaction, Mapping[str, Any]]],
    tax_year: Union[int, str],
    sort: Optional[SortType] = None,
    *,
    mapper: Mapper = map,
    longterm_days: int = gains.LONGTERM_DAYS,
) -> Replay:
    """Replay history through the end of `tax_year`; report the year's events.

    Args:
        transactions: full history (any order); later years are ignored.
        tax_year: four-digit year to report.
        sort: sort algorithm for matching sales to Lots.  By default, FIFO.
        mapper: `map`-like callable used to replay symbols, e.g. Executor.map.
        longterm_days: holding periods longer than this are long-term.
    """
    year_start, year_end = year_bounds(tax_year)
    return replay_between(
        transactions,
        report_after=year_start,
        dtend=year_end,
        sort=sort,
        mapper=mapper,
        longterm_days=longterm_days,
    )
