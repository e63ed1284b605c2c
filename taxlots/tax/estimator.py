# coding: utf-8
"""
Estimate tax on realized gains by stacking them through progressive brackets.

Gains are treated as the top slice of taxable income.  Short-term gains sit
directly on top of other ordinary income; long-term gains sit on top of both.
Each slice is walked up through its schedule, taxing only the room left in each
bracket by whatever lies beneath it.

Losses aren't refunded: a non-positive gain contributes no tax.
"""

__all__ = ["tax_on_gain", "Estimator"]


# stdlib imports
from decimal import Decimal
from typing import Sequence, Union


# local imports
from taxlots import utils
from .brackets import (
    Bracket,
    BracketTable,
    FilingStatus,
    DEFAULT_BRACKETS,
    get_status,
)


def tax_on_gain(gain: Decimal, income: Decimal, brackets: Sequence[Bracket]) -> Decimal:
    """Tax on `gain` stacked on top of `income`.

    Args:
        gain: slice of income to be taxed.
        income: income already occupying the bottom of the schedule.
        brackets: rate schedule, ascending by `up_to`.

    Returns:
        Tax attributable to `gain` alone (unrounded).
    """
    tax = Decimal("0")
    if gain <= 0:
        return tax

    remaining = gain
    floor = income
    threshold = Decimal("0")
    for bracket in brackets:
        if bracket.up_to is not None and floor >= bracket.up_to:
            # Bracket already filled by income beneath the gain.
            threshold = bracket.up_to
            continue

        # Negative income (e.g. a short-term loss) never opens room below zero.
        start = max(floor, threshold)
        if bracket.up_to is None:
            taken = remaining
        else:
            taken = min(bracket.up_to - start, remaining)
            threshold = bracket.up_to

        tax += taken * bracket.rate
        remaining -= taken
        floor = start + taken
        if remaining <= 0:
            break

    return tax


class Estimator:
    """Bind a BracketTable and filing status to estimate tax on gains.

    Args:
        table: BracketTable to draw schedules from.
        status: filing status (FilingStatus member or alias string).

    Raises:
        UnknownFilingStatus: if `table` has no schedule for `status`.
    """

    def __init__(
        self,
        table: BracketTable = DEFAULT_BRACKETS,
        status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    ) -> None:
        self.status = get_status(status)
        self.schedule = table[self.status]

    def __repr__(self):
        return f"Estimator(status={self.status.value})"

    def short_term_tax(self, gains: Decimal, income: Decimal) -> Decimal:
        return tax_on_gain(gains, income, self.schedule.short_term)

    def long_term_tax(
        self, gains: Decimal, income: Decimal, short_term_gains: Decimal
    ) -> Decimal:
        return tax_on_gain(gains, income + short_term_gains, self.schedule.long_term)

    def estimate(
        self,
        short_term_gains: Decimal,
        long_term_gains: Decimal,
        additional_income: Decimal = Decimal("0"),
    ) -> Decimal:
        """Total estimated tax on the year's gains, rounded to cents.

        Long-term gains are stacked above `additional_income + short_term_gains`
        exactly as given, so a short-term loss lowers the long-term floor.
        """
        short_tax = self.short_term_tax(short_term_gains, additional_income)
        long_tax = self.long_term_tax(
            long_term_gains, additional_income, short_term_gains
        )
        return utils.quantize_cents(short_tax + long_tax)
