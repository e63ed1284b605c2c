# coding: utf-8
"""CLI front end to replay transactions, report capital gains and ending lots.


INSTALL
-------
q.v. package README.  The package requires Python v3.8+ and tablib.

CONFIGURE
---------
We look for the config file in ~/.config/taxlots/taxlots.cfg.  It's in INI format;
every option is optional (q.v. taxlots.config):

    [books]
    method = hifo
    filing_status = married_joint
    additional_income = 85000

    [brackets]
    path = ~/.config/taxlots/brackets-2023.cfg

PREPARATION
-----------
Export the complete transaction history (not just the reporting year; earlier
years establish the Lots carried into it) as CSV with the columns:

    id,symbol,type,amount,price,date

`type` is buy or sell; `date` is ISO-8601 (e.g. 2022-03-14 or 2022-03-14T15:09:26Z).

REPORT
------
Realized gains for a tax year, by sale (the summary goes to stdout when -o is given):

    taxlots gains -y 2022 -m fifo -i 50000 -s single -o gains-2022.csv history.csv

The full report as JSON instead of CSV:

    taxlots gains -y 2022 -j -o gains-2022.json history.csv

Ending lots after all transactions through a date:

    taxlots lots -e 2022-12-31 -o lots-2022.csv history.csv

Pass --consolidate/-c to the lots report to sum Lots by symbol.
"""
# stdlib imports
import argparse
from argparse import ArgumentParser, _SubParsersAction
from datetime import datetime
import json
import logging
import sys
from typing import List, Optional, Tuple

# 3rd party imports
import tablib

# Local imports
from taxlots import ledger, report, CONFIG
from taxlots.engine import calculate_taxes
from taxlots.errors import TaxlotsError
from taxlots.inventory import Transaction, get_sort


def load_transactions(path: str) -> List[Transaction]:
    """Deserialize transaction history from a CSV file.

    Args:
        path: filesystem path to transaction CSV file.
    """
    with open(path, "r") as csvfile:
        data = tablib.Dataset().load(csvfile.read(), format="csv")
    return report.read_transactions(data)


def write_output(text: str, path: Optional[str]) -> None:
    if path:
        with open(path, "w") as outfile:
            outfile.write(text)
    else:
        sys.stdout.write(text)


def dump_gains(args: argparse.Namespace) -> None:
    """Replay transactions in the CLI file; write the tax year's gains.

    Args:
        args: argparse.Namespace instance populated with parsed CLI arguments.
    """
    transactions = load_transactions(args.file)
    taxreport = calculate_taxes(
        transactions,
        args.year,
        method=args.method,
        additional_income=args.income,
        filing_status=args.status,
        brackets=CONFIG.brackets,
        longterm_days=CONFIG.longterm_days,
    )

    if args.json:
        write_output(json.dumps(taxreport.as_dict(), indent=2), args.output)
    else:
        write_output(report.flatten_events(taxreport.transactions).csv, args.output)

    if args.output:
        summary = taxreport.summary
        print(report.flatten_summary(summary).csv)
        print(f"Estimated tax {summary.tax_year}: {summary.estimated_tax}")


def dump_lots(args: argparse.Namespace) -> None:
    """Replay transactions in the CLI file through a date; write ending Lots.

    Args:
        args: argparse.Namespace instance populated with parsed CLI arguments.
    """
    transactions = load_transactions(args.file)
    replayed = ledger.replay_between(
        transactions,
        report_after=args.dtend,
        dtend=args.dtend,
        sort=get_sort(args.method),
    )
    lots_dataset = report.flatten_inventory(
        replayed.inventory, consolidate=args.consolidate
    )
    write_output(lots_dataset.csv, args.output)


def make_argparser() -> Tuple[ArgumentParser, _SubParsersAction]:
    """Return subparsers along with the ArgumentParer, so the latter can be extended.
    """
    argparser = ArgumentParser(description="Tax lot utility")
    argparser.add_argument(
        "--verbose", "-v", action="count", default=0, help="-vv for DEBUG"
    )
    argparser.set_defaults(func=None)
    subparsers = argparser.add_subparsers()

    gain_parser = subparsers.add_parser(
        "gains", help="Report realized gains for a tax year"
    )
    gain_parser.add_argument("file", help="Transaction CSV file")
    gain_parser.add_argument(
        "-y", "--year", type=int, required=True, help="Tax year to report"
    )
    gain_parser.add_argument(
        "-m",
        "--method",
        default=CONFIG.method,
        help="Lot matching method: fifo, lifo or hifo",
    )
    gain_parser.add_argument(
        "-i",
        "--income",
        default=CONFIG.additional_income,
        help="Other ordinary income the gains are stacked on",
    )
    gain_parser.add_argument(
        "-s",
        "--status",
        default=CONFIG.filing_status,
        help="Filing status: single, joint, separate or head",
    )
    gain_parser.add_argument(
        "-j", "--json", action="store_true", help="Write full report as JSON"
    )
    gain_parser.add_argument(
        "-o", "--output", default=None, help="Output file (default stdout)"
    )
    gain_parser.set_defaults(func=dump_gains)

    lot_parser = subparsers.add_parser(
        "lots", aliases=["dump"], help="Dump ending Lots to CSV"
    )
    lot_parser.add_argument("file", help="Transaction CSV file")
    lot_parser.add_argument(
        "-e",
        "--dtend",
        required=True,
        help="End date for Transactions processed for Lot report (included)",
    )
    lot_parser.add_argument(
        "-m",
        "--method",
        default=CONFIG.method,
        help="Lot matching method: fifo, lifo or hifo",
    )
    lot_parser.add_argument(
        "-o", "--output", default=None, help="Output file (default stdout)"
    )
    lot_parser.add_argument("-c", "--consolidate", action="store_true")
    lot_parser.set_defaults(func=dump_lots)

    return argparser, subparsers


def run(argparser: ArgumentParser, argv: Optional[List[str]] = None) -> int:
    """Parse args and pass them to the indicated function.

    Args:
        argparser: the ArgumentParser instance returned by make_argparser().
        argv: command line arguments; by default, sys.argv[1:].

    Returns:
        Process exit status.
    """
    args = argparser.parse_args(argv)

    logLevel = (3 - min(args.verbose, 2)) * 10
    logging.basicConfig(level=logLevel)
    logging.captureWarnings(True)

    if not args.func:
        argparser.print_help()
        return 0

    try:
        # Parse datetime args
        if getattr(args, "dtend", None):
            args.dtend = datetime.strptime(args.dtend, "%Y-%m-%d").replace(
                hour=23, minute=59, second=59, microsecond=999999
            )
        args.func(args)
    except (TaxlotsError, ValueError, OSError) as err:
        logging.debug("%s failed", args.func.__name__, exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    argparser, subparsers = make_argparser()
    sys.exit(run(argparser))


if __name__ == "__main__":
    main()
