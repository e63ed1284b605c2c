# coding: utf-8
"""Compute a tax year's capital gains report from a transaction history.

    report = calculate_taxes(transactions, 2022, method="hifo",
                             additional_income=50000, filing_status="joint")
    print(report.summary.estimated_tax)

calculate_taxes() validates its configuration and every transaction before any
replay, so a bad method, filing status or record fails fast without partial
results.  The computation is pure: identical inputs give identical outputs.
"""

__all__ = ["TaxReport", "calculate_taxes"]


# stdlib imports
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Union


# local imports
from taxlots import ledger, gains, utils
from taxlots.inventory import TaxableEvent, Transaction, Method, get_sort
from taxlots.tax import (
    BracketTable,
    FilingStatus,
    DEFAULT_BRACKETS,
    Estimator,
    TaxSummary,
    summarize,
)


class TaxReport(NamedTuple):
    """TaxableEvents for the year plus their TaxSummary.

    Attributes:
        transactions: one TaxableEvent per in-year Transaction, chronologically.
        summary: aggregated gains and estimated tax.
    """

    transactions: List[TaxableEvent]
    summary: TaxSummary

    def as_dict(self) -> Dict[str, Any]:
        """Plain JSON-serializable rendition (Decimals as strings, camelCase keys)."""
        return {
            "transactions": [event_as_dict(event) for event in self.transactions],
            "summary": summary_as_dict(self.summary),
        }


def event_as_dict(event: TaxableEvent) -> Dict[str, Any]:
    return {
        "transactionId": event.transaction_id,
        "date": event.date.isoformat(),
        "type": event.kind.value,
        "symbol": event.symbol,
        "amount": str(event.amount),
        "price": str(event.price),
        "costBasis": str(event.cost_basis),
        "proceeds": str(event.proceeds),
        "gainLoss": str(event.gain_loss),
        "holdingPeriod": event.holding_period_days,
        "isLongTerm": event.is_long_term,
    }


def summary_as_dict(summary: TaxSummary) -> Dict[str, Any]:
    return {
        "taxYear": str(summary.tax_year),
        "totalTransactions": summary.total_transactions,
        "shortTermGains": str(summary.short_term_gains),
        "longTermGains": str(summary.long_term_gains),
        "totalGains": str(summary.total_gains),
        "totalTaxableAmount": str(summary.total_taxable_amount),
        "estimatedTax": str(summary.estimated_tax),
        "costBasis": str(summary.cost_basis),
        "proceeds": str(summary.proceeds),
        "byAsset": {
            symbol: {
                "totalGains": str(asset.total_gains),
                "shortTermGains": str(asset.short_term_gains),
                "longTermGains": str(asset.long_term_gains),
                "transactions": asset.transactions,
            }
            for symbol, asset in summary.by_asset.items()
        },
    }


def calculate_taxes(
    transactions: Iterable[Union[Transaction, Mapping[str, Any]]],
    tax_year: Union[int, str],
    method: Union[Method, str] = Method.FIFO,
    additional_income: Union[int, str, Decimal] = 0,
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    *,
    brackets: BracketTable = DEFAULT_BRACKETS,
    mapper: ledger.Mapper = map,
    longterm_days: int = gains.LONGTERM_DAYS,
) -> TaxReport:
    """Replay `transactions` and report gains and estimated tax for `tax_year`.

    Args:
        transactions: full history through (at least) the end of `tax_year`;
                      Transactions or mappings accepted by ledger.make_transaction().
        tax_year: four-digit year to report.
        method: lot matching method - fifo, lifo or hifo.
        additional_income: ordinary income the gains are stacked on (non-negative).
        filing_status: single, married_joint (joint), married_separate
                       (separate) or head_of_household (head).
        brackets: BracketTable supplying rate schedules.
        mapper: `map`-like callable used to replay symbols, e.g. Executor.map.
        longterm_days: holding periods longer than this are long-term.

    Raises:
        UnknownMethod: if `method` isn't fifo/lifo/hifo.
        UnknownFilingStatus: if `brackets` has no schedule for `filing_status`.
        ValueError: if `tax_year` or `additional_income` is invalid.
        MalformedTransaction: if any transaction fails validation.
        InsufficientInventory: if a sale exceeds the Lots open at that point.
    """
    sort = get_sort(method)
    estimator = Estimator(brackets, filing_status)
    income = utils.to_decimal(additional_income)
    if income < 0:
        raise ValueError(f"additional income can't be negative, not {income}")
    ledger.year_bounds(tax_year)

    replayed = ledger.replay(
        transactions, tax_year, sort, mapper=mapper, longterm_days=longterm_days
    )
    summary = summarize(replayed.events, tax_year, estimator, income)
    return TaxReport(transactions=replayed.events, summary=summary)
