"""Single bank account: ledger, state file persistence and CSV/XML/JSON export."""

__version__ = "0.1.0"
