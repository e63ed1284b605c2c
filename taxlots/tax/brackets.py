# coding: utf-8
"""
Progressive bracket tables, by filing status.

Tables are plain immutable data handed to the estimator; nothing in the engine
reads them from module state.  DEFAULT_BRACKETS reproduces the simplified 2022 US
federal schedules: ordinary income rates for short-term gains, and capital gains
rates for long-term gains.

A bracket file (INI format) can replace the defaults.  Each section is named
`<regime>.<status>`, e.g. `short_term.single`, and maps the upper bound of each
bracket to its rate.  The last bracket is unbounded, written `inf`:

    [long_term.single]
    41675 = 0
    459750 = 0.15
    inf = 0.20
"""

__all__ = [
    "FilingStatus",
    "Bracket",
    "BracketSchedule",
    "BracketTable",
    "DEFAULT_BRACKETS",
    "get_status",
    "make_schedule",
    "load_brackets",
]


# stdlib imports
import configparser
import enum
from decimal import Decimal
from types import MappingProxyType
from typing import (
    NamedTuple,
    Mapping,
    Iterator,
    Iterable,
    Sequence,
    Tuple,
    Optional,
    Union,
)


# local imports
from taxlots import utils
from taxlots.errors import UnknownFilingStatus, BracketError


@enum.unique
class FilingStatus(enum.Enum):
    SINGLE = "single"
    MARRIED_JOINT = "married_joint"
    MARRIED_SEPARATE = "married_separate"
    HEAD_OF_HOUSEHOLD = "head_of_household"


STATUS_ALIASES = {
    "single": FilingStatus.SINGLE,
    "joint": FilingStatus.MARRIED_JOINT,
    "marriedjoint": FilingStatus.MARRIED_JOINT,
    "married_joint": FilingStatus.MARRIED_JOINT,
    "separate": FilingStatus.MARRIED_SEPARATE,
    "marriedseparate": FilingStatus.MARRIED_SEPARATE,
    "married_separate": FilingStatus.MARRIED_SEPARATE,
    "head": FilingStatus.HEAD_OF_HOUSEHOLD,
    "headofhousehold": FilingStatus.HEAD_OF_HOUSEHOLD,
    "head_of_household": FilingStatus.HEAD_OF_HOUSEHOLD,
}


def get_status(status: Union[FilingStatus, str]) -> FilingStatus:
    """Look up a FilingStatus by enum member, value, or alias.

    Matching is case-insensitive; `marriedJoint`, `married_joint` and `joint`
    all name the same status.

    Raises:
        UnknownFilingStatus: if `status` doesn't name a filing status.
    """
    if isinstance(status, FilingStatus):
        return status
    if isinstance(status, str):
        key = status.strip().lower().replace("-", "_")
        match = STATUS_ALIASES.get(key)
        if match is not None:
            return match
    raise UnknownFilingStatus(status)


class Bracket(NamedTuple):
    """One step of a progressive rate schedule.

    Attributes:
        rate: marginal rate applied to income in this bracket (0 <= rate <= 1).
        up_to: upper bound of the bracket; None for the unbounded top bracket.
    """

    rate: Decimal
    up_to: Optional[Decimal]


class BracketSchedule(NamedTuple):
    """Short-term and long-term rate schedules for one filing status.

    Attributes:
        short_term: brackets for ordinary income (and short-term gains).
        long_term: brackets for long-term capital gains.
    """

    short_term: Tuple[Bracket, ...]
    long_term: Tuple[Bracket, ...]


def make_schedule(
    steps: Iterable[Tuple[Union[str, float, Decimal], Optional[Union[int, str, Decimal]]]]
) -> Tuple[Bracket, ...]:
    """Build a validated bracket tuple from (rate, up_to) pairs.

    Raises:
        BracketError: if thresholds aren't strictly ascending, a rate lies outside
                      [0, 1], or the last bracket is bounded (or any other isn't).
    """
    brackets = tuple(
        Bracket(
            rate=utils.to_decimal(rate),
            up_to=None if up_to is None else utils.to_decimal(up_to),
        )
        for rate, up_to in steps
    )
    validate_schedule(brackets)
    return brackets


def validate_schedule(brackets: Sequence[Bracket]) -> None:
    if not brackets:
        raise BracketError("Bracket schedule is empty")

    *bounded, top = brackets
    if top.up_to is not None:
        raise BracketError(f"Top bracket must be unbounded, not up to {top.up_to}")

    previous = Decimal("0")
    for bracket in bounded:
        if bracket.up_to is None:
            raise BracketError("Only the top bracket may be unbounded")
        if bracket.up_to <= previous:
            msg = f"Bracket thresholds must ascend; {bracket.up_to} after {previous}"
            raise BracketError(msg)
        previous = bracket.up_to

    for bracket in brackets:
        if not (0 <= bracket.rate <= 1):
            raise BracketError(f"Rate must be between 0 and 1, not {bracket.rate}")


class BracketTable(Mapping):
    """Immutable mapping of FilingStatus to BracketSchedule.

    Lookups accept anything get_status() does, so `table["joint"]` works.
    """

    def __init__(self, schedules: Mapping[FilingStatus, BracketSchedule]) -> None:
        for schedule in schedules.values():
            validate_schedule(schedule.short_term)
            validate_schedule(schedule.long_term)
        self._schedules = MappingProxyType(
            {get_status(status): schedule for status, schedule in schedules.items()}
        )

    def __getitem__(self, status: Union[FilingStatus, str]) -> BracketSchedule:
        key = get_status(status)
        try:
            return self._schedules[key]
        except KeyError:
            raise UnknownFilingStatus(status)

    def __iter__(self) -> Iterator[FilingStatus]:
        return iter(self._schedules)

    def __len__(self) -> int:
        return len(self._schedules)

    def __repr__(self):
        return f"BracketTable({dict(self._schedules)!r})"


DEFAULT_BRACKETS = BracketTable(
    {
        FilingStatus.SINGLE: BracketSchedule(
            short_term=make_schedule(
                [
                    ("0.10", 10275),
                    ("0.12", 41775),
                    ("0.22", 89075),
                    ("0.24", 170050),
                    ("0.32", 215950),
                    ("0.35", 539900),
                    ("0.37", None),
                ]
            ),
            long_term=make_schedule([("0", 41675), ("0.15", 459750), ("0.20", None)]),
        ),
        FilingStatus.MARRIED_JOINT: BracketSchedule(
            short_term=make_schedule(
                [
                    ("0.10", 20550),
                    ("0.12", 83550),
                    ("0.22", 178150),
                    ("0.24", 340100),
                    ("0.32", 431900),
                    ("0.35", 647850),
                    ("0.37", None),
                ]
            ),
            long_term=make_schedule([("0", 83350), ("0.15", 517200), ("0.20", None)]),
        ),
        FilingStatus.MARRIED_SEPARATE: BracketSchedule(
            short_term=make_schedule(
                [
                    ("0.10", 10275),
                    ("0.12", 41775),
                    ("0.22", 89075),
                    ("0.24", 170050),
                    ("0.32", 215950),
                    ("0.35", 323925),
                    ("0.37", None),
                ]
            ),
            long_term=make_schedule([("0", 41675), ("0.15", 258600), ("0.20", None)]),
        ),
        FilingStatus.HEAD_OF_HOUSEHOLD: BracketSchedule(
            short_term=make_schedule(
                [
                    ("0.10", 14650),
                    ("0.12", 55900),
                    ("0.22", 89050),
                    ("0.24", 170050),
                    ("0.32", 215950),
                    ("0.35", 539900),
                    ("0.37", None),
                ]
            ),
            long_term=make_schedule([("0", 55800), ("0.15", 488500), ("0.20", None)]),
        ),
    }
)


REGIMES = ("short_term", "long_term")
UNBOUNDED = ("inf", "infinity", "none", "")


def load_brackets(path: str) -> BracketTable:
    """Read a BracketTable from an INI bracket file.

    Every filing status present must define both regimes.

    Raises:
        BracketError: if the file can't be read, a section is misnamed, a value
                      isn't numeric, or a filing status lacks one of its regimes.
        UnknownFilingStatus: if a section names an unknown filing status.
    """
    parser = configparser.ConfigParser()
    try:
        with open(path, "r") as bracketfile:
            parser.read_file(bracketfile)
    except OSError as err:
        raise BracketError(f"Can't read bracket file {path}: {err.strerror}")
    except configparser.Error as err:
        raise BracketError(f"Bad bracket file {path}: {err}")

    found: dict = {}
    for section in parser.sections():
        regime, _, status = section.partition(".")
        if regime not in REGIMES or not status:
            raise BracketError(f"Bad bracket section [{section}] in {path}")
        try:
            steps = [
                (
                    rate,
                    None if threshold.strip().lower() in UNBOUNDED else threshold,
                )
                for threshold, rate in parser.items(section)
            ]
            schedule = make_schedule(steps)
        except BracketError:
            raise
        except ValueError as err:
            raise BracketError(f"Bad bracket value in [{section}] of {path}: {err}")
        found.setdefault(get_status(status), {})[regime] = schedule

    schedules = {}
    for status, regimes in found.items():
        missing = [regime for regime in REGIMES if regime not in regimes]
        if missing:
            raise BracketError(f"{status.value} brackets lack {', '.join(missing)}")
        schedules[status] = BracketSchedule(**regimes)
    return BracketTable(schedules)
