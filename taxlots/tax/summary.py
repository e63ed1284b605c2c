# coding: utf-8
"""
Fold TaxableEvents into per-asset and overall totals for a tax year.

Each symbol's events are folded independently into an AssetTotals, and the
per-symbol results are then merged by summation in sorted-symbol order, so the
outcome doesn't depend on the order in which symbols were processed.
"""

__all__ = ["AssetSummary", "AssetTotals", "TaxSummary", "fold_events", "summarize"]


# stdlib imports
from collections import defaultdict
from decimal import Decimal
import functools
from typing import NamedTuple, Iterable, Mapping, Dict, List, Union


# local imports
from taxlots.inventory.types import TaxableEvent, TransactionKind
from .estimator import Estimator


ZERO = Decimal("0")


class AssetSummary(NamedTuple):
    """Gains realized on one symbol during the tax year.

    Attributes:
        total_gains: short_term_gains + long_term_gains.
        short_term_gains: net gain/loss on sales held 365 days or less.
        long_term_gains: net gain/loss on sales held longer.
        transactions: number of in-year events (buys and sells).
    """

    total_gains: Decimal = ZERO
    short_term_gains: Decimal = ZERO
    long_term_gains: Decimal = ZERO
    transactions: int = 0


class AssetTotals(NamedTuple):
    """AssetSummary plus the money totals that roll up into TaxSummary."""

    summary: AssetSummary = AssetSummary()
    cost_basis: Decimal = ZERO
    proceeds: Decimal = ZERO

    def __add__(self, other):  # type: ignore
        if not isinstance(other, AssetTotals):
            return NotImplemented
        return AssetTotals(
            summary=AssetSummary(
                *(mine + theirs for mine, theirs in zip(self.summary, other.summary))
            ),
            cost_basis=self.cost_basis + other.cost_basis,
            proceeds=self.proceeds + other.proceeds,
        )


class TaxSummary(NamedTuple):
    """Capital gains report for one tax year.

    Attributes:
        tax_year: four-digit year reported.
        total_transactions: number of in-year events.
        short_term_gains: net short-term gain/loss.
        long_term_gains: net long-term gain/loss.
        total_gains: short_term_gains + long_term_gains.
        total_taxable_amount: equal to total_gains; may be negative.
        estimated_tax: bracket estimate on the gains, rounded to cents.
        cost_basis: sum of cost_basis over all events (buys and sells).
        proceeds: sum of proceeds over all events.
        by_asset: symbol -> AssetSummary.
    """

    tax_year: int
    total_transactions: int
    short_term_gains: Decimal
    long_term_gains: Decimal
    total_gains: Decimal
    total_taxable_amount: Decimal
    estimated_tax: Decimal
    cost_basis: Decimal
    proceeds: Decimal
    by_asset: Mapping[str, AssetSummary]


def accum_event(totals: AssetTotals, event: TaxableEvent) -> AssetTotals:
    summary = totals.summary
    short, long_ = summary.short_term_gains, summary.long_term_gains
    if event.kind is TransactionKind.SELL:
        if event.is_long_term:
            long_ += event.gain_loss
        else:
            short += event.gain_loss

    return AssetTotals(
        summary=AssetSummary(
            total_gains=short + long_,
            short_term_gains=short,
            long_term_gains=long_,
            transactions=summary.transactions + 1,
        ),
        cost_basis=totals.cost_basis + event.cost_basis,
        proceeds=totals.proceeds + event.proceeds,
    )


def fold_events(events: Iterable[TaxableEvent]) -> AssetTotals:
    """Fold one symbol's events into running totals."""
    return functools.reduce(accum_event, events, AssetTotals())


def summarize(
    events: Iterable[TaxableEvent],
    tax_year: Union[int, str],
    estimator: Estimator,
    additional_income: Decimal = ZERO,
) -> TaxSummary:
    """Aggregate a tax year's TaxableEvents and estimate the tax due on them.

    Args:
        events: in-year TaxableEvents, in any order.
        tax_year: year being reported.
        estimator: Estimator bound to the filing status's brackets.
        additional_income: ordinary income beneath the gains.
    """
    by_symbol: Dict[str, List[TaxableEvent]] = defaultdict(list)
    for event in events:
        by_symbol[event.symbol].append(event)

    per_asset = {symbol: fold_events(by_symbol[symbol]) for symbol in sorted(by_symbol)}
    totals = sum(per_asset.values(), AssetTotals())

    overall = totals.summary
    estimated_tax = estimator.estimate(
        overall.short_term_gains, overall.long_term_gains, additional_income
    )

    return TaxSummary(
        tax_year=int(tax_year),
        total_transactions=overall.transactions,
        short_term_gains=overall.short_term_gains,
        long_term_gains=overall.long_term_gains,
        total_gains=overall.total_gains,
        total_taxable_amount=overall.total_gains,
        estimated_tax=estimated_tax,
        cost_basis=totals.cost_basis,
        proceeds=totals.proceeds,
        by_asset={symbol: asset.summary for symbol, asset in per_asset.items()},
    )
