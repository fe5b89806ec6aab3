from .exporters import (
    CsvExporter,
    ExportFormat,
    Exporter,
    JsonExporter,
    LedgerSnapshot,
    XmlExporter,
    get_exporter,
    parse_selectors,
)
from .ledger import Ledger
from .repository import LedgerRepository
from .store import LedgerStore, LoadResult, LoadStatus

__all__ = [
    "CsvExporter",
    "ExportFormat",
    "Exporter",
    "JsonExporter",
    "Ledger",
    "LedgerRepository",
    "LedgerSnapshot",
    "LedgerStore",
    "LoadResult",
    "LoadStatus",
    "XmlExporter",
    "get_exporter",
    "parse_selectors",
]
