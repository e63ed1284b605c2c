# coding: utf-8
from .brackets import (
    FilingStatus,
    Bracket,
    BracketSchedule,
    BracketTable,
    DEFAULT_BRACKETS,
    get_status,
    make_schedule,
    load_brackets,
)
from .estimator import tax_on_gain, Estimator
from .summary import AssetSummary, TaxSummary, summarize
