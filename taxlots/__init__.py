# coding: utf-8
"""Tax-lot cost basis accounting: match sales to lots, classify gains, estimate tax.
"""
from .config import CONFIG
from .errors import (
    TaxlotsError,
    MalformedTransaction,
    InsufficientInventory,
    UnknownMethod,
    UnknownFilingStatus,
    BracketError,
)
from .engine import TaxReport, calculate_taxes
