"""
User configuration, read from ~/.config/taxlots/taxlots.cfg (INI format).

    [books]
    method = fifo
    filing_status = single
    additional_income = 0
    longterm_days = 365

    [brackets]
    path = /path/to/brackets.cfg

Missing options fall back to the defaults above.  The engine never reads CONFIG;
callers (e.g. the CLI) pass these values in as arguments.
"""
import os
import configparser
from decimal import Decimal

from taxlots import utils
from taxlots.tax.brackets import BracketTable, DEFAULT_BRACKETS, load_brackets


CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".config", "taxlots")
CONFIG_PATH = os.path.join(CONFIG_DIR, "taxlots.cfg")


class TaxlotsConfig(configparser.ConfigParser):
    def make_default(self):
        self["books"] = {
            "method": "fifo",
            "filing_status": "single",
            "additional_income": "0",
            "longterm_days": "365",
        }
        self["brackets"] = {"path": ""}

    def write_default(self, path=CONFIG_PATH):
        """Write the default configuration to `path`, creating directories."""
        self.make_default()
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as configfile:
            self.write(configfile)

    @property
    def method(self) -> str:
        return self.get("books", "method", fallback="fifo")

    @property
    def filing_status(self) -> str:
        return self.get("books", "filing_status", fallback="single")

    @property
    def additional_income(self) -> Decimal:
        return utils.to_decimal(self.get("books", "additional_income", fallback="0"))

    @property
    def longterm_days(self) -> int:
        return self.getint("books", "longterm_days", fallback=365)

    @property
    def brackets(self) -> BracketTable:
        path = self.get("brackets", "path", fallback="")
        if not path:
            return DEFAULT_BRACKETS
        return load_brackets(os.path.expanduser(path))


CONFIG = TaxlotsConfig()
CONFIG.make_default()


if os.path.exists(CONFIG_PATH):
    CONFIG.read(CONFIG_PATH)
